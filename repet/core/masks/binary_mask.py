"""
:class:`BinaryMask` holds a hard assignment of every time-frequency cell to the
background (``True``) or the foreground (``False``). A REPET separation returns
:class:`BinaryMask` objects when it is created with ``mask_type='binary'``.
"""

import numpy as np

from . import mask_base


class BinaryMask(mask_base.MaskBase):
    """
    Args:
        input_mask (:obj:`np.ndarray`): 2D or 3D array of bools, of 0/1 ints, or of floats
          within 0.01 of 0 or 1. Stored as bools.
    """

    @staticmethod
    def _validate_mask(mask_):
        kind = mask_.dtype.kind
        if kind == 'b':
            return mask_

        if kind in 'iu':
            if np.any((mask_ != 0) & (mask_ != 1)):
                raise ValueError('Integer masks may only hold 0 and 1!')
        elif kind == 'f':
            near_zero = np.isclose(mask_, 0, atol=1e-2)
            near_one = np.isclose(mask_, 1, atol=1e-2)
            if not np.all(near_zero | near_one):
                raise ValueError('Float masks must be within 0.01 of 0 or 1!')
        else:
            raise ValueError(f'Cannot make a BinaryMask from {mask_.dtype} data!')

        return np.isclose(mask_, 1, atol=1e-2)

    def invert_mask(self):
        return BinaryMask(np.logical_not(self.mask))
