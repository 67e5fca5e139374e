"""
Masks made by the REPET pipeline hold one value per cell of the one-sided spectrogram, as
a three dimensional numpy :obj:`ndarray` with dimensions ``[NUM_FREQ, NUM_HOPS, NUM_CHAN]``
(see :ref:`constants` for the axis indices). :func:`repet.core.AudioSignal.apply_mask`
mirrors them across Nyquist before multiplying the full spectrum.
"""

import numpy as np

from .. import utils
from .. import constants


class MaskBase(object):
    """
    Args:
        input_mask (:obj:`np.ndarray`): 2D ``(freq, time)`` or 3D ``(freq, time, channel)``
          array of mask values.

    """
    def __init__(self, input_mask):
        self._mask = None
        self.mask = input_mask

    @property
    def mask(self):
        """
        The mask values as a 3D :obj:`np.ndarray`. A 2D array is given a channel axis on set,
        then checked by the subclass' :func:`_validate_mask`.

        Raises:
            :obj:`ValueError` if not an array, if it has fewer than 2 or more than 3
            dimensions, or if the values are not valid for the mask type.
            :obj:`NotImplementedError` on the base class.

        """
        return self._mask

    @mask.setter
    def mask(self, value):
        if not isinstance(value, np.ndarray):
            raise ValueError(f'Mask must be a np.ndarray, got {type(value)}!')

        if value.ndim == 2:
            value = np.expand_dims(value, axis=constants.STFT_CHAN_INDEX)

        if value.ndim != 3:
            raise ValueError(f'Mask must have 2 or 3 dimensions, got {value.ndim}!')

        self._mask = self._validate_mask(value)

    def get_channel(self, ch):
        """
        Mask values of channel ``ch`` (0-based) as a 2D :obj:`np.ndarray`.

        Raises:
            :obj:`ValueError` if ``ch`` is not a channel of this mask.

        """
        if not 0 <= ch < self.num_channels:
            raise ValueError(
                f'Cannot get channel {ch} of a mask with {self.num_channels} channels! (0-based)')

        return utils._get_axis(self.mask, constants.STFT_CHAN_INDEX, ch)

    @property
    def num_channels(self):
        return self.mask.shape[constants.STFT_CHAN_INDEX]

    @property
    def shape(self):
        return self.mask.shape

    @staticmethod
    def _validate_mask(mask_):
        raise NotImplementedError('Use BinaryMask or SoftMask!')

    def invert_mask(self):
        """
        The complementary mask: what this mask sends to the background, the inverse sends
        to the foreground.
        """
        raise NotImplementedError('Use BinaryMask or SoftMask!')
