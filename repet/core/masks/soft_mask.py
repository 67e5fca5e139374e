"""
:class:`SoftMask` holds values in ``[0.0, 1.0]``. The REPET ratio mask is a
:class:`SoftMask`: each cell is the fraction of the mixture's magnitude attributed to
the repeating background.
"""

import numpy as np

from . import mask_base
from . import binary_mask


class SoftMask(mask_base.MaskBase):
    """
    Args:
        input_mask (:obj:`np.ndarray`): 2D or 3D float array with values in ``[0.0, 1.0]``.
    """

    @staticmethod
    def _validate_mask(mask_):
        if mask_.dtype.kind != 'f':
            raise ValueError(f'SoftMask needs float values, got {mask_.dtype}! '
                             'Maybe you want BinaryMask?')

        if mask_.size and (mask_.max() > 1.0 or mask_.min() < 0.0):
            raise ValueError('SoftMask values must be within [0.0, 1.0]!')

        return mask_

    def mask_to_binary(self, threshold=0.5):
        """
        Thresholds this mask into a :class:`BinaryMask`: cells strictly above
        ``threshold`` are ``True``.

        Args:
            threshold (float, optional): cutoff in ``(0.0, 1.0)``. Defaults to 0.5.

        Returns:
            A new :class:`BinaryMask`.

        """
        return binary_mask.BinaryMask(self.mask > threshold)

    def invert_mask(self):
        """
        Returns a new :class:`SoftMask` holding ``1 - mask``.
        """
        return SoftMask(np.abs(1 - self.mask))
