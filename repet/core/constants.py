"""
A repository containing all of the constants used by the REPET separation
pipeline. Defaults for a separation live here and get filled into
:class:`repet.separation.primitive.RepetParams` when a field is left as ``None``.
"""

__all__ = ['DEFAULT_SAMPLE_RATE', 'DEFAULT_REPET_WIN_DURATION', 'DEFAULT_HIGH_PASS_CUTOFF',
           'DEFAULT_MIN_PERIOD', 'DEFAULT_MAX_PERIOD', 'MIN_REPETITIONS', 'EPSILON',
           'WINDOW_HAMMING', 'WINDOW_RECTANGULAR', 'WINDOW_HANN', 'WINDOW_BLACKMAN',
           'WINDOW_TRIANGULAR', 'WINDOW_SQRT_HANN', 'WINDOW_DEFAULT', 'ALL_WINDOWS',
           'LEN_INDEX', 'CHAN_INDEX', 'STFT_VERT_INDEX', 'STFT_LEN_INDEX', 'STFT_CHAN_INDEX']

DEFAULT_SAMPLE_RATE = 44100  #: (int): Default sample rate. 44.1 kHz, CD-quality
DEFAULT_REPET_WIN_DURATION = 0.040  #: (float): Audio is roughly stationary over 40ms windows
DEFAULT_HIGH_PASS_CUTOFF = 100.0  #: (float): Vocals are rarely below 100 Hz
DEFAULT_MIN_PERIOD = 1.0  #: (float): Shortest repeating period searched for, in seconds
DEFAULT_MAX_PERIOD = 10.0  #: (float): Longest repeating period searched for, in seconds
MIN_REPETITIONS = 3  #: (int): Minimum number of repetitions needed for the median model
EPSILON = 1e-16  #: (float): epsilon for determining small values

WINDOW_HAMMING = 'hamming'  #: (str): Name for calling Hamming window. 'hamming'
WINDOW_RECTANGULAR = 'rectangular'  #: (str): Name for calling Rectangular window. 'rectangular'
WINDOW_HANN = 'hann'  #: (str): Name for calling Hann window. 'hann'
WINDOW_BLACKMAN = 'blackman'  #: (str): Name for calling Blackman window. 'blackman'
WINDOW_TRIANGULAR = 'triang'  #: (str): Name for calling Triangular window. 'triangular'
WINDOW_SQRT_HANN = 'sqrt_hann'  #: (str): Name for calling square root of hann window. 'sqrt_hann'.

WINDOW_DEFAULT = WINDOW_HAMMING  #: (str): Default window, Hamming.
ALL_WINDOWS = [
    WINDOW_HAMMING, WINDOW_RECTANGULAR, WINDOW_HANN, WINDOW_BLACKMAN,
    WINDOW_TRIANGULAR, WINDOW_SQRT_HANN]
"""list(str): list of all available windows in *repet*
"""

# ############# Array Indices ############# #

# audio_data
LEN_INDEX = 1  #: (int): Index of the number of samples in an audio signal. Used in :ref:`audio_signal`
CHAN_INDEX = 0  #: (int): Index of the number of channels in an audio signal. Used in :ref:`audio_signal`

# stft_data
STFT_VERT_INDEX = 0
"""
(int) Index of the number of frequency (vertical) values in a time-frequency representation.
Used in :ref:`audio_signal` and in :ref:`mask_base`.
"""
STFT_LEN_INDEX = 1
"""
(int) Index of the number of time (horizontal) hops in a time-frequency representation.
Used in :ref:`audio_signal` and in :ref:`mask_base`.
"""
STFT_CHAN_INDEX = 2
"""
(int) Index of the number of channels in a time-frequency representation.
Used in :ref:`audio_signal` and in :ref:`mask_base`.
"""
