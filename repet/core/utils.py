"""
Provides utilities for the REPET pipeline that do not belong to
any specific component or that are shared between components.
"""

import numpy as np


def next_power_of_two(value):
    """
    Returns the smallest power of two that is greater than or equal to ``value``.

    Args:
        value (float): Positive number.

    Returns:
        (int) ``2 ** ceil(log2(value))``
    """
    if value <= 0:
        raise ValueError(f'Cannot find a power of two for non-positive value {value}!')
    return int(2 ** np.ceil(np.log2(value)))


def _get_axis(array, axis_num, i):
    """
    Will get index 'i' along axis 'axis_num' using np.take.

    Args:
        array (:obj:`np.ndarray`): Array to fetch axis of.
        axis_num (int): Axes to retrieve.
        i (int): Index to retrieve.

    Returns:
        The value at index :param:`i` along axis :param:`axis_num`
    """

    return np.take(array, i, axis_num)
