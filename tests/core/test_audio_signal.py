import pytest
import numpy as np

import repet
from repet.core.audio_signal import AudioSignalException, STFTParams
from repet.core import masks

sr = 16000
length = 8000


def test_load_from_array():
    mono = np.sin(np.linspace(0, 100 * 2 * np.pi, length))
    signal = repet.AudioSignal(audio_data_array=mono, sample_rate=sr)

    assert signal.audio_data.shape == (1, length)
    assert signal.num_channels == 1
    assert signal.signal_length == length
    assert signal.signal_duration == length / sr

    # the shape doesn't matter, channels are fewer than samples
    stereo = np.vstack([mono, -mono])
    for data in [stereo, stereo.T]:
        signal = repet.AudioSignal(audio_data_array=data, sample_rate=sr)
        assert signal.audio_data.shape == (2, length)
        assert np.array_equal(signal.get_channel(1), -mono)

    # integer data is stored as floats
    signal = repet.AudioSignal(audio_data_array=np.ones(10, dtype=int), sample_rate=sr)
    assert signal.audio_data.dtype.kind == 'f'


def test_input_is_not_mutated():
    data = np.random.rand(2, 1000)
    original = data.copy()
    signal = repet.AudioSignal(audio_data_array=data, sample_rate=sr)
    signal.audio_data[0, 0] = 10

    assert np.array_equal(data, original)


def test_bad_audio_data():
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.array([0.0, np.nan, 1.0]), sample_rate=sr)
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.array([0.0, np.inf]), sample_rate=sr)
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.ones((2, 3, 4)), sample_rate=sr)
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.ones(10) + 1j, sample_rate=sr)
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.ones(10), stft=np.ones((10, 10)))

    signal = repet.AudioSignal(audio_data_array=np.ones(10), sample_rate=sr)

    def set_list(signal):
        signal.audio_data = [1, 2, 3]

    pytest.raises(AudioSignalException, set_list, signal)


@pytest.mark.parametrize("sample_rate", [0, -44100, float('nan'), 'fast', True])
def test_bad_sample_rate(sample_rate):
    pytest.raises(AudioSignalException, repet.AudioSignal,
                  audio_data_array=np.ones(10), sample_rate=sample_rate)


def test_empty_signal():
    signal = repet.AudioSignal(audio_data_array=np.array([]), sample_rate=sr)
    assert not signal.has_data
    assert signal.signal_length == 0
    pytest.raises(AudioSignalException, signal.stft)

    signal = repet.AudioSignal(sample_rate=sr)
    assert signal.num_channels is None
    pytest.raises(AudioSignalException, signal.istft)


def test_stft_params():
    signal = repet.AudioSignal(audio_data_array=np.ones(1000), sample_rate=44100)
    assert signal.stft_params == STFTParams(
        window_length=2048, hop_length=1024, window_type='hamming')

    signal.stft_params = STFTParams(window_length=512)
    assert signal.stft_params.hop_length == 256
    assert signal.stft_params.window_type == 'hamming'

    def set_dict(signal):
        signal.stft_params = {'window_length': 512}

    pytest.raises(ValueError, set_dict, signal)


def test_stft_data():
    signal = repet.AudioSignal(stft=np.ones((16, 10), dtype=complex), sample_rate=sr)
    assert signal.stft_data.shape == (16, 10, 1)
    assert signal.num_channels == 1
    assert signal.stft_data.shape[1] == 10

    def set_1d(signal):
        signal.stft_data = np.ones(10)

    def set_4d(signal):
        signal.stft_data = np.ones((2, 2, 2, 2))

    pytest.raises(AudioSignalException, set_1d, signal)
    pytest.raises(AudioSignalException, set_4d, signal)


def test_apply_mask(random_signal):
    stft = random_signal.stft()
    half_shape = random_signal.magnitude_spectrogram_data.shape

    ones = masks.SoftMask(np.ones(half_shape))
    same = random_signal.apply_mask(ones)
    assert np.allclose(same.stft_data, stft)
    same.istft()
    assert np.allclose(same.audio_data, random_signal.audio_data, atol=1e-6)

    zeros = masks.BinaryMask(np.zeros(half_shape, dtype=bool))
    silent = random_signal.apply_mask(zeros)
    assert np.allclose(silent.stft_data, 0)

    # full spectrum masks are applied as-is
    full = masks.SoftMask(0.5 * np.ones(stft.shape))
    random_signal.apply_mask(full, overwrite=True)
    assert np.allclose(random_signal.stft_data, 0.5 * stft)

    wrong_shape = masks.SoftMask(np.ones((3, 3, 2)))
    pytest.raises(AudioSignalException, random_signal.apply_mask, wrong_shape)
    pytest.raises(AudioSignalException, random_signal.apply_mask, np.ones(stft.shape))


def test_arithmetic(random_signal):
    total = random_signal + random_signal
    assert np.allclose(total.audio_data, 2 * random_signal.audio_data)

    difference = total - random_signal
    assert np.allclose(difference.audio_data, random_signal.audio_data)

    summed = sum([random_signal, random_signal, random_signal])
    assert np.allclose(summed.audio_data, 3 * random_signal.audio_data)

    mono = repet.AudioSignal(audio_data_array=np.ones(10000), sample_rate=16000)
    other_rate = repet.AudioSignal(audio_data_array=np.ones((2, 10000)), sample_rate=8000)
    shorter = repet.AudioSignal(audio_data_array=np.ones((2, 100)), sample_rate=16000)

    for other in [mono, other_rate, shorter]:
        pytest.raises(AudioSignalException, random_signal.add, other)
        pytest.raises(AudioSignalException, random_signal.subtract, other)


def test_channels(random_signal):
    pytest.raises(AudioSignalException, random_signal.get_channel, 2)
    pytest.raises(AudioSignalException, random_signal.get_channel, -1)
    pytest.raises(AudioSignalException, random_signal.get_stft_channel, 0)

    random_signal.stft()
    channels = list(random_signal.get_stft_channels())
    assert len(channels) == 2
    assert channels[0].ndim == 2

    assert 'AudioSignal' in str(random_signal)
