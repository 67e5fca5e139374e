"""
Short-time Fourier transform utilities used by the REPET pipeline.

The forward transform (:func:`e_stft`) zero-pads the front of the signal by
``window_length - hop_length`` samples so that the first window is centered on the
first sample, and pads the back so that the padded signal holds an integer number of
hops. It keeps the full ``window_length``-point spectrum of every frame, reflection
included. The inverse transform (:func:`e_istft`) overlap-adds the real part of every
inverse FFT, strips the same padding, and divides by the constant overlap-add gain of
the window.

Perfect reconstruction holds for windows that satisfy the constant overlap-add
constraint at the given hop, e.g. a periodic Hamming window with
``hop_length = window_length // 2``.
"""

import numpy as np
import scipy.fftpack as scifft
import scipy.signal

from . import constants
from . import utils

__all__ = ['make_window', 'window_length_from_duration', 'num_frames',
           'e_stft', 'e_istft', 'add_reflection', 'remove_reflection']


def make_window(window_type, length, symmetric=False):
    """Returns an :obj:`np.array` populated with samples of a normalized window of type
    :param:`window_type`.

    Args:
        window_type (str): Type of window to create, one of ``constants.ALL_WINDOWS``.
        length (int): length of window
        symmetric (bool): If ``False``,  generates a periodic window (for use in spectral analysis).
            If ``True``, generates a symmetric window (for use in filter design).
            Does nothing for rectangular window.

    Returns:
        window (np.array): np array with a window of type window_type

    Raises:
        ValueError: if ``window_type`` is not a known window.
    """
    window_type = constants.WINDOW_DEFAULT if window_type is None else window_type

    if window_type == constants.WINDOW_RECTANGULAR:
        return np.ones(length)
    elif window_type == constants.WINDOW_HANN:
        return scipy.signal.windows.hann(length, sym=symmetric)
    elif window_type == constants.WINDOW_SQRT_HANN:
        return np.sqrt(scipy.signal.windows.hann(length, sym=symmetric))
    elif window_type == constants.WINDOW_BLACKMAN:
        return scipy.signal.windows.blackman(length, sym=symmetric)
    elif window_type == constants.WINDOW_HAMMING:
        return scipy.signal.windows.hamming(length, sym=symmetric)
    elif window_type == constants.WINDOW_TRIANGULAR:
        return scipy.signal.windows.triang(length, sym=symmetric)

    raise ValueError(
        f'Unknown window type {window_type}! '
        f'Valid windows are: [{", ".join(constants.ALL_WINDOWS)}]')


def window_length_from_duration(duration, sample_rate):
    """
    Converts a window duration in seconds into a window length in samples, rounded up
    to the next power of two for a fast FFT.

    Args:
        duration (float): Window duration in seconds.
        sample_rate (int): Sample rate in Hz.

    Returns:
        (int) Window length in samples.

    Example:
        >>> window_length_from_duration(0.040, 44100)
        2048
    """
    return utils.next_power_of_two(duration * sample_rate)


def num_frames(signal_length, window_length, hop_length):
    """
    Number of time frames :func:`e_stft` produces for a signal of ``signal_length`` samples.
    """
    overlap = window_length - hop_length
    return int(np.ceil((overlap + signal_length) / hop_length))


def _add_zero_padding(signal, window_length, hop_length):
    """
    Pads ``window_length - hop_length`` zeros before the signal and enough zeros after it
    so that every sample is covered by a whole number of hops.

    Returns:
        (padded signal, number of frames)
    """
    signal_length = len(signal)
    overlap = window_length - hop_length
    n_frames = num_frames(signal_length, window_length, hop_length)

    after = n_frames * hop_length - signal_length
    signal = np.pad(signal, (overlap, after), 'constant', constant_values=(0, 0))

    return signal, n_frames


def e_stft(signal, window_length, hop_length, window_type=None):
    """
    Computes the short time fourier transform (STFT) of a 1D numpy array input signal.

    The full spectrum of every frame is kept (``window_length`` bins, reflection above
    Nyquist included), so the output can be passed back to :func:`e_istft` directly once
    any mask has been mirrored with :func:`add_reflection`.

    This function assumes a single channel. For multichannel audio see
    :func:`repet.core.AudioSignal.stft`.

    Args:
        signal (np.ndarray): 1D real-valued audio data.
        window_length (int): number of samples per window
        hop_length (int): number of samples between the start of adjacent windows, or "hop"
        window_type (str): type of window to use, see ``constants.ALL_WINDOWS``.

    Returns:
        2D complex numpy array with shape ``(window_length, n_frames)`` where
        ``n_frames = ceil((window_length - hop_length + len(signal)) / hop_length)``.

    Example:

    .. code-block:: python
        :linenos:

        x = np.sin(np.linspace(0, 300 * 2 * np.pi, 3 * 44100))
        stft = e_stft(x, 2048, 1024, 'hamming')
        # stft has shape (2048, 131)

    """
    signal = np.asarray(signal, dtype=float)
    window = make_window(window_type, window_length)

    signal, n_frames = _add_zero_padding(signal, window_length, hop_length)

    frames = np.zeros((window_length, n_frames))
    for frame in range(n_frames):
        start = frame * hop_length
        end = start + window_length
        frames[:, frame] = signal[start:end] * window

    return scifft.fft(frames, axis=0)


def e_istft(stft, window_length, hop_length, window_type=None, original_length=None):
    """
    Computes the inverse short time fourier transform (iSTFT) from a 2D numpy array of
    complex values, as made by :func:`e_stft`.

    The input must hold the full, mirrored spectrum (``window_length`` rows). Only the
    real part of each inverse FFT is kept, which is exact as long as the spectrum (or the
    mask that was applied to it) is conjugate symmetric.

    Args:
        stft (np.ndarray): complex valued 2D array with shape ``(window_length, n_frames)``.
        window_length (int): number of samples per window
        hop_length (int): number of samples between the start of adjacent windows, or "hop"
        window_type (str): type of window that was used in :func:`e_stft`.
        original_length (int, optional): if given, the output is truncated to this many
            samples, which undoes the trailing padding of :func:`e_stft`.

    Returns:
        1D numpy array containing the time domain signal.
    """
    window = make_window(window_type, window_length)
    n_frames = stft.shape[constants.STFT_LEN_INDEX]
    overlap = window_length - hop_length
    signal_length = (n_frames - 1) * hop_length + window_length

    frames = np.real(scifft.ifft(stft, axis=0))

    signal = np.zeros(signal_length)
    for frame in range(n_frames):
        start = frame * hop_length
        end = start + window_length
        signal[start:end] += frames[:window_length, frame]

    # remove zero-padding
    signal = signal[overlap:signal_length - overlap]

    # constant overlap-add gain
    signal = signal / np.sum(window[0:window_length:hop_length])

    if original_length is not None:
        signal = signal[:original_length]

    return signal


def add_reflection(matrix):
    """
    Rebuilds the frequencies above Nyquist from a one-sided representation with
    ``window_length // 2 + 1`` rows. Rows ``1 .. window_length // 2 - 1`` are mirrored
    in reverse order below the input; the DC and Nyquist rows are not repeated.
    Complex data is conjugated, real data (e.g. masks) is mirrored as-is.

    Args:
        matrix (np.ndarray): 2D or 3D array, frequency along axis 0.

    Returns:
        np.ndarray with ``window_length`` rows.
    """
    reflection = matrix[-2:0:-1, ...]
    reflection = reflection.conj()
    return np.concatenate([matrix, reflection], axis=constants.STFT_VERT_INDEX)


def remove_reflection(matrix):
    """
    Keeps the non-mirrored half of a full spectrum: rows ``0 .. window_length // 2``
    inclusive (DC and Nyquist included).
    """
    n_rows = matrix.shape[constants.STFT_VERT_INDEX]
    return matrix[:n_rows // 2 + 1, ...]
