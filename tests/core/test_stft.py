import pytest
import numpy as np

import repet
from repet.core import stft_utils, constants

stft_tol = 1e-6

# windows that satisfy constant overlap-add at a hop of half a window
cola_windows = [constants.WINDOW_HAMMING, constants.WINDOW_HANN, constants.WINDOW_RECTANGULAR]
win_lengths = [64, 256, 2048]
signal_lengths = [1, 100, 1000, 4096, 12345]


@pytest.mark.parametrize("window_type", cola_windows)
@pytest.mark.parametrize("win_length", win_lengths)
@pytest.mark.parametrize("signal_length", signal_lengths)
def test_stft_istft_round_trip(window_type, win_length, signal_length):
    np.random.seed(0)
    signal = np.random.rand(signal_length) * 2 - 1
    hop_length = win_length // 2

    stft = stft_utils.e_stft(signal, win_length, hop_length, window_type)
    reconstructed = stft_utils.e_istft(
        stft, win_length, hop_length, window_type, original_length=signal_length)

    assert reconstructed.shape == signal.shape
    assert np.allclose(reconstructed, signal, atol=stft_tol)


def test_stft_round_trip_with_ones_mask():
    np.random.seed(0)
    signal = np.random.randn(5000)
    win_length, hop_length = 512, 256

    stft = stft_utils.e_stft(signal, win_length, hop_length, 'hamming')
    ones = np.ones((win_length // 2 + 1, stft.shape[1]))
    masked = stft * stft_utils.add_reflection(ones)
    reconstructed = stft_utils.e_istft(masked, win_length, hop_length, 'hamming', len(signal))

    assert np.allclose(reconstructed, signal, atol=stft_tol)


def test_stft_shape_and_padding():
    win_length, hop_length = 256, 128
    for signal_length in [1, 127, 128, 129, 1000]:
        stft = stft_utils.e_stft(np.ones(signal_length), win_length, hop_length)
        expected_frames = int(np.ceil((win_length - hop_length + signal_length) / hop_length))
        assert stft.shape == (win_length, expected_frames)
        assert stft_utils.num_frames(signal_length, win_length, hop_length) == expected_frames

    # first frame is centered: its second half holds the first samples
    signal = np.arange(1, 301, dtype=float)
    stft = stft_utils.e_stft(signal, win_length, hop_length, constants.WINDOW_RECTANGULAR)
    first_frame = np.real(np.fft.ifft(stft[:, 0]))
    assert np.allclose(first_frame[:hop_length], 0)
    assert np.allclose(first_frame[hop_length:], signal[:hop_length])


def test_stft_full_spectrum_is_conjugate_symmetric():
    np.random.seed(0)
    win_length = 128
    stft = stft_utils.e_stft(np.random.randn(1000), win_length, win_length // 2)

    assert stft.shape[0] == win_length
    one_sided = stft_utils.remove_reflection(stft)
    assert one_sided.shape[0] == win_length // 2 + 1
    assert np.allclose(stft_utils.add_reflection(one_sided), stft)


def test_add_reflection():
    mask = np.arange(5 * 3, dtype=float).reshape(5, 3)
    full = stft_utils.add_reflection(mask)

    assert full.shape == (8, 3)
    # bins 5, 6, 7 mirror bins 3, 2, 1; DC and Nyquist are not repeated
    assert np.array_equal(full[:5], mask)
    assert np.array_equal(full[5:], mask[[3, 2, 1]])

    mask_3d = np.random.rand(5, 3, 2)
    assert stft_utils.add_reflection(mask_3d).shape == (8, 3, 2)


def test_make_window():
    hamming = stft_utils.make_window(constants.WINDOW_HAMMING, 8)
    n = np.arange(8)
    assert np.allclose(hamming, 0.54 - 0.46 * np.cos(2 * np.pi * n / 8))

    # periodic hamming at 50% overlap sums to a constant
    hamming = stft_utils.make_window(constants.WINDOW_HAMMING, 2048)
    assert np.allclose(hamming[:1024] + hamming[1024:], 1.08)

    for window_type in constants.ALL_WINDOWS:
        assert stft_utils.make_window(window_type, 16).shape == (16,)

    assert np.array_equal(
        stft_utils.make_window(None, 16),
        stft_utils.make_window(constants.WINDOW_DEFAULT, 16))

    pytest.raises(ValueError, stft_utils.make_window, 'not a window', 16)


def test_window_length_from_duration():
    assert stft_utils.window_length_from_duration(0.040, 44100) == 2048
    assert stft_utils.window_length_from_duration(0.040, 16000) == 1024
    assert stft_utils.window_length_from_duration(0.040, 8000) == 512
    assert repet.core.utils.next_power_of_two(1024) == 1024
    pytest.raises(ValueError, repet.core.utils.next_power_of_two, 0)


def test_audio_signal_stft_istft(random_signal):
    stft = random_signal.stft()
    window_length = random_signal.stft_params.window_length

    assert stft.shape[0] == window_length
    assert stft.shape[2] == random_signal.num_channels
    assert random_signal.magnitude_spectrogram_data.shape == (
        window_length // 2 + 1, stft.shape[1], random_signal.num_channels)

    original = random_signal.audio_data.copy()
    new_signal = random_signal.make_copy_with_stft_data(stft)
    assert new_signal.audio_data is None
    new_signal.istft()

    assert new_signal.audio_data.shape == original.shape
    assert np.allclose(new_signal.audio_data, original, atol=stft_tol)
