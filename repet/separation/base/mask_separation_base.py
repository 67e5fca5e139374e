"""
Separation by time-frequency masking. :class:`repet.separation.primitive.Repet` is
derived from :class:`MaskSeparationBase`.
"""

from ...core import masks
from .separation_base import SeparationBase, SeparationException


class MaskSeparationBase(SeparationBase):
    """
    Base class for algorithms whose :func:`run` fills :attr:`result_masks` with one
    mask per estimated source. :func:`make_audio_signals` applies each mask to the
    mixture's STFT and inverts it back to the time domain.

    Args:
        input_audio_signal (:class:`AudioSignal`): Mixture to separate.
        mask_type (str or mask class): ``'soft'`` or ``'binary'``, see :attr:`mask_type`.
        mask_threshold (float): Threshold used to make binary masks, see
          :attr:`mask_threshold`.
    """

    MASKS = {
        'binary': masks.BinaryMask,
        'soft': masks.SoftMask
    }

    def __init__(self, input_audio_signal, mask_type='soft', mask_threshold=0.5):
        super().__init__(input_audio_signal=input_audio_signal)

        self.mask_type = mask_type
        self.mask_threshold = mask_threshold
        self.result_masks = []

        self.metadata.update({
            'mask_type': mask_type,
            'mask_threshold': 'N/A' if self.mask_type == masks.SoftMask else mask_threshold
        })

    @property
    def mask_type(self):
        """
        Class of the masks :func:`run` returns, :class:`core.masks.SoftMask` or
        :class:`core.masks.BinaryMask`. Can be set with ``'soft'`` / ``'binary'``
        (any case) or with the class itself.

        Raises:
            ValueError if set to anything else.

        """
        return self._mask_type

    @mask_type.setter
    def mask_type(self, value):
        if isinstance(value, str) and value.lower() in self.MASKS:
            self._mask_type = self.MASKS[value.lower()]
        elif value in self.MASKS.values():
            self._mask_type = value
        else:
            raise ValueError(
                f"Invalid mask type {value}! Valid masks are:"
                f" [{', '.join(self.MASKS.keys())}]")

    @property
    def mask_threshold(self):
        """
        Soft masks are thresholded at this value to make binary masks: cells strictly
        above it go to the background.

        Raises:
            ValueError if not a float in the open interval ``(0.0, 1.0)``.

        """
        return self._mask_threshold

    @mask_threshold.setter
    def mask_threshold(self, value):
        if not isinstance(value, float) or not (0.0 < value < 1.0):
            raise ValueError(
                f'Mask threshold must be a float strictly between 0.0 and 1.0, got {value}!')

        self._mask_threshold = value

    def _preprocess_audio_signal(self):
        """
        Takes the STFT of the mixture. A new mixture means new masks, so
        :attr:`result_masks` is reset.
        """
        self.stft = self.audio_signal.stft()
        self.result_masks = []

    def run(self):
        raise NotImplementedError('Subclasses must implement run()!')

    def make_audio_signals(self):
        """
        Applies every mask in :attr:`result_masks` to the mixture and inverts the result.

        Returns:
            list: one :class:`AudioSignal` per mask, each as long as the mixture.

        Raises:
            SeparationException: if :func:`run` has not filled :attr:`result_masks`, or
              a mask is not of :attr:`mask_type`.
        """
        if not self.result_masks:
            raise SeparationException('No masks to apply! Did you call self.run()?')

        estimates = []
        for mask in self.result_masks:
            if not isinstance(mask, self.mask_type):
                raise SeparationException(
                    f'Expected {self.mask_type} but got {type(mask)} in self.result_masks!')
            estimate = self.audio_signal.apply_mask(mask, overwrite=False)
            estimate.istft(truncate_to_length=self.audio_signal.signal_length)
            estimates.append(estimate)
        return estimates
