import pytest
import numpy as np

import repet
from repet import separation
from repet.core import masks
from repet.separation import SeparationException


def test_separation_base(random_signal, monkeypatch):
    pytest.raises(SeparationException, separation.SeparationBase, repet.AudioSignal())
    pytest.raises(ValueError, separation.SeparationBase, None)
    pytest.raises(ValueError, separation.SeparationBase, np.ones(100))

    separator = separation.SeparationBase(random_signal)

    assert separator.sample_rate == random_signal.sample_rate
    assert separator.stft_params == random_signal.stft_params
    assert separator.audio_signal is not random_signal
    assert np.array_equal(separator.audio_signal.audio_data, random_signal.audio_data)

    # the copy is what gets modified, not the input
    separator.audio_signal.audio_data[0, 0] = 100.0
    assert random_signal.audio_data[0, 0] != 100.0

    pytest.raises(NotImplementedError, separator.run)
    pytest.raises(NotImplementedError, separator.make_audio_signals)
    pytest.raises(NotImplementedError, separator)

    def dummy_run(self):
        pass

    monkeypatch.setattr(separation.SeparationBase, 'run', dummy_run)
    pytest.raises(NotImplementedError, separator)

    assert separator.__class__.__name__ in str(separator)
    assert str(random_signal) in str(separator)


def test_mask_separation_base(random_signal, monkeypatch):
    separator = separation.MaskSeparationBase(random_signal)

    assert separator.mask_type == masks.SoftMask
    assert separator.stft.shape == random_signal.stft().shape
    assert separator.metadata['mask_threshold'] == 'N/A'

    separator.mask_type = 'BINARY'
    assert separator.mask_type == masks.BinaryMask
    separator.mask_type = masks.SoftMask
    assert separator.mask_type == masks.SoftMask

    def set_mask_type(value):
        separator.mask_type = value

    def set_mask_threshold(value):
        separator.mask_threshold = value

    pytest.raises(ValueError, set_mask_type, 'ratio')
    pytest.raises(ValueError, set_mask_type, None)
    pytest.raises(ValueError, set_mask_type, np.ndarray)
    pytest.raises(ValueError, set_mask_threshold, 1)
    pytest.raises(ValueError, set_mask_threshold, 1.5)
    pytest.raises(ValueError, set_mask_threshold, 0.0)

    pytest.raises(NotImplementedError, separator.run)
    pytest.raises(SeparationException, separator.make_audio_signals)

    half_shape = random_signal.magnitude_spectrogram_data.shape

    def dummy_run(self):
        ones = masks.SoftMask(np.ones(half_shape))
        self.result_masks = [ones, ones.invert_mask()]
        return self.result_masks

    monkeypatch.setattr(separation.MaskSeparationBase, 'run', dummy_run)
    everything, nothing = separator()

    assert np.allclose(everything.audio_data, random_signal.audio_data, atol=1e-6)
    assert np.allclose(nothing.audio_data, 0)
    assert everything.signal_length == random_signal.signal_length

    separator.result_masks = [masks.BinaryMask(np.ones(half_shape, dtype=bool))]
    pytest.raises(SeparationException, separator.make_audio_signals)
