import copy
import numbers
from collections import namedtuple

import numpy as np

from . import constants
from . import masks
from . import stft_utils
from . import utils

__all__ = ['AudioSignal', 'STFTParams', 'AudioSignalException']

STFTParams = namedtuple('STFTParams',
                        ['window_length', 'hop_length', 'window_type']
                        )
STFTParams.__new__.__defaults__ = (None,) * len(STFTParams._fields)
"""
STFTParams object is a container that holds STFT parameters - window_length,
hop_length, and window_type. Not all parameters need to be specified. Ones that
are not specified will be inferred by the AudioSignal parameters and the settings
in `repet.core.constants`.
"""


class AudioSignal(object):
    """
    **Overview**

    :class:`AudioSignal` is the entry and exit point for the REPET separation pipeline.
    It is a container for multichannel time-series audio data, its sample rate and, once
    :func:`stft` has been run, its complex time-frequency representation.

    Time-series data lives in :attr:`audio_data` as a 2D ``numpy`` array with shape
    ``(n_channels, n_samples)``. STFT data lives in :attr:`stft_data` as a 3D ``numpy`` array
    with shape ``(n_frequency_bins, n_hops, n_channels)``, holding the full, mirrored spectrum.

    Decoding and encoding audio files is left to the caller: an :class:`AudioSignal` is
    initialized from either a sample array or STFT data, never both.

     .. code-block:: python
        :linenos:

        import numpy as np
        import repet

        aud_1d = np.sin(np.linspace(0.0, 1.0, 48000))
        sig_1d = repet.AudioSignal(audio_data_array=aud_1d, sample_rate=48000)

        # FYI: The shape doesn't matter, repet will correct for it
        aud_2d = np.array([aud_1d, -2 * aud_1d])
        sig_2d = repet.AudioSignal(audio_data_array=aud_2d.T, sample_rate=48000)

    Args:
        audio_data_array (:obj:`np.ndarray`): 1D or 2D real-valued time-series audio data.
        stft (:obj:`np.ndarray`): 2D or 3D complex-valued STFT data.
        sample_rate (int): Sample rate in Hz. Defaults to ``constants.DEFAULT_SAMPLE_RATE``.
        stft_params (:obj:`STFTParams`): STFT parameters, see :attr:`stft_params`.
    """

    def __init__(self, audio_data_array=None, stft=None, sample_rate=None, stft_params=None):

        self._audio_data = None
        self.original_signal_length = None
        self._stft_data = None
        self._sample_rate = None

        if audio_data_array is not None and stft is not None:
            raise AudioSignalException('Can only initialize AudioSignal object with one and only '
                                       'one of {audio, stft}!')

        self.sample_rate = constants.DEFAULT_SAMPLE_RATE if sample_rate is None else sample_rate

        if audio_data_array is not None:
            self.audio_data = np.array(audio_data_array)
            self.original_signal_length = self.signal_length

        self.stft_data = stft  # complex spectrogram data
        self.stft_params = stft_params

    def __str__(self):
        dur = f'{self.signal_duration:0.3f}' if self.signal_duration else '[unknown]'
        return (
            f"{self.__class__.__name__}: "
            f"{dur} sec, "
            f"{self.sample_rate} Hz, "
            f"{self.num_channels if self.num_channels else '[unknown]'} ch."
        )

    ##################################################
    #                 Properties
    ##################################################

    @property
    def signal_length(self):
        """
        ``int``
            Number of samples in :attr:`audio_data`.
        """
        if self.audio_data is None:
            return self.original_signal_length
        return self.audio_data.shape[constants.LEN_INDEX]

    @property
    def signal_duration(self):
        """
        ``float``
            Duration of :attr:`audio_data` in seconds.
        """
        if self.signal_length is None:
            return None
        return self.signal_length / self.sample_rate

    @property
    def num_channels(self):
        """
        ``int``
            Number of channels this :class:`AudioSignal` has.
            Defaults to returning number of channels in :attr:`audio_data`. If that is ``None``,
            returns number of channels in :attr:`stft_data`. If both are ``None`` then returns
            ``None``.
        """
        if self.audio_data is not None:
            return self.audio_data.shape[constants.CHAN_INDEX]
        if self.stft_data is not None:
            return self.stft_data.shape[constants.STFT_CHAN_INDEX]
        return None

    @property
    def audio_data(self):
        """
        ``np.ndarray``
            Time-domain audio data with shape ``(n_channels, n_samples)`` as an array of floats.

        Raises:
            :class:`AudioSignalException`
                If set incorrectly, will raise an error. Expects a real, finite-valued 1D or 2D
                ``numpy`` :obj:`np.ndarray`-typed array.

        Notes:
            If :attr:`audio_data` is set with an improperly transposed array (more channels than
            samples), it will automatically transpose it so that it is set the expected way.
        """
        return self._audio_data

    @audio_data.setter
    def audio_data(self, value):

        if value is None:
            self._audio_data = None
            return

        elif not isinstance(value, np.ndarray):
            raise AudioSignalException('Type of self.audio_data must be of type np.ndarray!')

        if np.iscomplexobj(value):
            raise AudioSignalException('audio_data must be real-valued!')

        value = value.astype(float)

        if not np.isfinite(value).all():
            raise AudioSignalException('Not all values of audio_data are finite!')

        if value.ndim > 2:
            raise AudioSignalException('self.audio_data cannot have more than 2 dimensions!')

        if (value.ndim > 1 and value.size > 0 and
                value.shape[constants.CHAN_INDEX] > value.shape[constants.LEN_INDEX]):
            value = value.T

        if value.ndim < 2:
            value = np.expand_dims(value, axis=constants.CHAN_INDEX)

        self._audio_data = value

    @property
    def stft_data(self):
        """
        ``np.ndarray``
            Complex STFT data with shape ``(n_frequency_bins, n_hops, n_channels)``. Computed
            by :func:`stft` with ``n_frequency_bins == window_length``.

        Raises:
            :class:`AudioSignalException` if set with something other than a 2D or 3D array.
        """
        return self._stft_data

    @stft_data.setter
    def stft_data(self, value):

        if value is None:
            self._stft_data = None
            return

        elif not isinstance(value, np.ndarray):
            raise AudioSignalException('Type of self.stft_data must be of type np.ndarray!')

        if value.ndim == 1:
            raise AudioSignalException('Cannot support arrays with less than 2 dimensions!')

        if value.ndim == 2:
            value = np.expand_dims(value, axis=constants.STFT_CHAN_INDEX)

        if value.ndim > 3:
            raise AudioSignalException('Cannot support arrays with more than 3 dimensions!')

        self._stft_data = value

    @property
    def stft_params(self):
        """
        ``STFTParams``
            STFT parameters are kept in this property. STFT parameters are a ``namedtuple``
            called ``STFTParams`` with the following signature:

            .. code-block:: python

                STFTParams(
                    window_length=2048,
                    hop_length=1024,
                    window_type='hamming'
                )

            The defaults are 40ms windows rounded up to a power of two, a hop of half a
            window, and a periodic Hamming window.

        """
        return self._stft_params

    @stft_params.setter
    def stft_params(self, value):
        if value and not isinstance(value, STFTParams):
            raise ValueError("stft_params must be of type STFTParams or None!")

        default_win_len = stft_utils.window_length_from_duration(
            constants.DEFAULT_REPET_WIN_DURATION, self.sample_rate)

        value = value._asdict() if value else STFTParams()._asdict()

        if value['window_length'] is None:
            value['window_length'] = default_win_len
        if value['hop_length'] is None:
            value['hop_length'] = value['window_length'] // 2
        if value['window_type'] is None:
            value['window_type'] = constants.WINDOW_DEFAULT

        self._stft_params = STFTParams(**value)

    @property
    def has_data(self):
        """
        ``bool``
            Returns ``False`` if :attr:`audio_data` and :attr:`stft_data` are empty. Else,
            returns ``True``.
        """
        has_audio_data = self.audio_data is not None and self.audio_data.size != 0
        has_stft_data = self.stft_data is not None and self.stft_data.size != 0
        return has_audio_data or has_stft_data

    @property
    def sample_rate(self):
        """
        ``int``
            Sample rate associated with this object, in Hz.

        Raises:
            :class:`AudioSignalException` if set to anything but a positive number.
        """
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, value):
        if (not isinstance(value, numbers.Real) or isinstance(value, bool)
                or not np.isfinite(value) or value <= 0):
            raise AudioSignalException(f'Sample rate must be a positive number, got {value}!')
        self._sample_rate = value

    @property
    def magnitude_spectrogram_data(self):
        """
        ``np.ndarray``
            Returns a real valued ``np.array`` with magnitude spectrogram data, ``abs(STFT)``,
            for the non-mirrored half of the spectrum: shape
            ``(window_length // 2 + 1, n_hops, n_channels)``.
        """
        if self.stft_data is None:
            raise AudioSignalException('Cannot calculate magnitude_spectrogram_data '
                                       'because self.stft_data is None')
        return np.abs(stft_utils.remove_reflection(self.stft_data))

    ##################################################
    #                     STFT
    ##################################################

    def stft(self, window_length=None, hop_length=None, window_type=None, overwrite=True):
        """
        Computes the Short Time Fourier Transform (STFT) of :attr:`audio_data`, one channel
        at a time, with :func:`repet.core.stft_utils.e_stft`.

        Warning:
            If overwrite=True (default) this will overwrite any data in :attr:`stft_data`!

        Args:
            window_length (int): Amount of time (in samples) to do an FFT on
            hop_length (int): Amount of time (in samples) to skip ahead for the new FFT
            window_type (str): Type of scaling to apply to the window.
            overwrite (bool): Overwrite :attr:`stft_data` with current calculation

        Returns:
            (:obj:`np.ndarray`) Calculated, complex-valued STFT from :attr:`audio_data`, 3D numpy
            array with shape `(window_length, n_hops, n_channels)`.

        """
        if self.audio_data is None or self.audio_data.size == 0:
            raise AudioSignalException(
                "No time domain signal (self.audio_data) to make STFT from!")

        window_length, hop_length, window_type = self._resolve_stft_params(
            window_length, hop_length, window_type)

        stft_data = []
        for chan in self.get_channels():
            stft_data.append(stft_utils.e_stft(chan, window_length, hop_length, window_type))

        stft_data = np.stack(stft_data, axis=constants.STFT_CHAN_INDEX)

        if overwrite:
            self.stft_data = stft_data

        return stft_data

    def istft(self, window_length=None, hop_length=None, window_type=None, overwrite=True,
              truncate_to_length=None):
        """ Computes and returns the inverse Short Time Fourier Transform (iSTFT).

        Warning:
            If overwrite=True (default) this will overwrite any data in :attr:`audio_data`!

        Args:
            window_length (int): Amount of time (in samples) to do an FFT on
            hop_length (int): Amount of time (in samples) to skip ahead for the new FFT
            window_type (str): Type of scaling to apply to the window.
            overwrite (bool): Overwrite :attr:`audio_data` with current calculation
            truncate_to_length (int): truncate resultant signal to specified length. Defaults
              to the length of the signal the STFT was made from.

        Returns:
            (:obj:`np.ndarray`) Calculated, real-valued iSTFT from :attr:`stft_data`, 2D numpy array
            with shape `(n_channels, n_samples)`.

        """
        if self.stft_data is None or self.stft_data.size == 0:
            raise AudioSignalException('Cannot do inverse STFT without self.stft_data!')

        window_length, hop_length, window_type = self._resolve_stft_params(
            window_length, hop_length, window_type)

        if truncate_to_length is None:
            truncate_to_length = self.original_signal_length
            if self.signal_length is not None:
                truncate_to_length = self.signal_length

        signals = []
        for stft in self.get_stft_channels():
            signals.append(stft_utils.e_istft(
                stft, window_length, hop_length, window_type,
                original_length=truncate_to_length))

        calculated_signal = np.array(signals)

        if overwrite or self.audio_data is None:
            self.audio_data = calculated_signal

        return calculated_signal

    def _resolve_stft_params(self, window_length, hop_length, window_type):
        window_length = (
            self.stft_params.window_length
            if window_length is None
            else int(window_length)
        )
        hop_length = (
            self.stft_params.hop_length
            if hop_length is None
            else int(hop_length)
        )
        window_type = (
            self.stft_params.window_type
            if window_type is None
            else window_type
        )
        return window_length, hop_length, window_type

    def apply_mask(self, mask, overwrite=False):
        """
        Applies the input mask to the time-frequency representation in this :class:`AudioSignal`
        object and returns a new :class:`AudioSignal` object with the mask applied.

        One-sided masks (``window_length // 2 + 1`` frequency rows) are mirrored across
        the Nyquist bin with :func:`repet.core.stft_utils.add_reflection` first, so the mask
        stays conjugate symmetric over the full spectrum.

        Args:
            mask (:obj:`MaskBase`-derived object): A ``MaskBase``-derived object
                containing a mask.
            overwrite (bool): If ``True``, this will alter ``stft_data`` in self.
                If ``False``, this function will create a new ``AudioSignal`` object
                with the mask applied.

        Returns:
            A new :class:`AudioSignal`` object with the input mask applied to the STFT,
            iff ``overwrite`` is False.

        """
        if not isinstance(mask, masks.MaskBase):
            raise AudioSignalException(f'Expected MaskBase-derived object, given {type(mask)}')

        if self.stft_data is None:
            raise AudioSignalException('There is no STFT data to apply a mask to!')

        mask_data = mask.mask.astype(float)
        n_bins = self.stft_data.shape[constants.STFT_VERT_INDEX]
        if mask_data.shape[constants.STFT_VERT_INDEX] == n_bins // 2 + 1:
            mask_data = stft_utils.add_reflection(mask_data)

        if mask_data.shape != self.stft_data.shape:
            raise AudioSignalException(
                'Input mask and self.stft_data are not the same shape! mask:'
                f' {mask.shape}, self.stft_data: {self.stft_data.shape}'
            )

        masked_stft = self.stft_data * mask_data

        if overwrite:
            self.stft_data = masked_stft
        else:
            return self.make_copy_with_stft_data(masked_stft)

    ##################################################
    #                   Utilities
    ##################################################

    def add(self, other):
        """Adds two audio signal objects.

        This does element-wise addition on the :attr:`audio_data` array.

        Raises:
            AudioSignalException: If ``self.sample_rate != other.sample_rate``,
                ``self.num_channels != other.num_channels``, or the lengths differ.

        Parameters:
            other (:class:`AudioSignal`): Other :class:`AudioSignal` to add.

        Returns:
            (:class:`AudioSignal`): New :class:`AudioSignal` object with the sum of
            ``self`` and ``other``.
        """
        if isinstance(other, numbers.Number) and other == 0:
            # for sum() over a list of signals
            return copy.deepcopy(self)

        self._verify_audio_arithmetic(other)
        return self.make_copy_with_audio_data(self.audio_data + other.audio_data)

    def subtract(self, other):
        """Subtracts two audio signal objects.

        This does element-wise subtraction on the :attr:`audio_data` array.

        Raises:
            AudioSignalException: If ``self.sample_rate != other.sample_rate``,
                ``self.num_channels != other.num_channels``, or the lengths differ.

        Parameters:
            other (:class:`AudioSignal`): Other :class:`AudioSignal` to subtract.

        Returns:
            (:class:`AudioSignal`): New :class:`AudioSignal` object with the difference
            between ``self`` and ``other``.
        """
        self._verify_audio_arithmetic(other)
        return self.make_copy_with_audio_data(self.audio_data - other.audio_data)

    def make_copy_with_audio_data(self, audio_data):
        """ Makes a copy of this :class:`AudioSignal` object with :attr:`audio_data` initialized to
        the input :param:`audio_data` numpy array. The :attr:`stft_data` of the new
        :class:`AudioSignal` object is ``None``.

        Args:
            audio_data (:obj:`np.ndarray`): Audio data to be put into the new :class:`AudioSignal`
                object.

        Returns:
            (:class:`AudioSignal`): A copy of this :class:`AudioSignal` object with :attr:`audio_data`
            initialized to the input :param:`audio_data` numpy array.

        """
        new_signal = copy.deepcopy(self)
        new_signal.audio_data = audio_data
        new_signal.stft_data = None
        return new_signal

    def make_copy_with_stft_data(self, stft_data):
        """ Makes a copy of this :class:`AudioSignal` object with :attr:`stft_data` initialized to the
        input :param:`stft_data` numpy array. The :attr:`audio_data` of the new :class:`AudioSignal`
        object is ``None``, and its length is remembered so :func:`istft` can truncate to it.

        Args:
            stft_data (:obj:`np.ndarray`): STFT data to be put into the new :class:`AudioSignal`
                object.

        Returns:
            (:class:`AudioSignal`): A copy of this :class:`AudioSignal` object with :attr:`stft_data`
            initialized to the input :param:`stft_data` numpy array.

        """
        new_signal = copy.deepcopy(self)
        new_signal.original_signal_length = self.signal_length
        new_signal.stft_data = stft_data
        new_signal.audio_data = None
        return new_signal

    def get_channel(self, n):
        """Gets audio data of n-th channel from :attr:`audio_data` as a 1D :obj:`np.ndarray`
        of shape ``(n_samples,)``.

        Parameters:
            n (int): index of channel to get. **0-based**

        Raises:
            :class:`AudioSignalException`: If not ``0 <= n < self.num_channels``.
        """
        self._verify_get_channel(n)
        return utils._get_axis(self.audio_data, constants.CHAN_INDEX, n)

    def get_channels(self):
        """Generator that will loop through channels of :attr:`audio_data`.

        Yields:
            (:obj:`np.ndarray`): Time-series data of one channel, in order.
        """
        for i in range(self.num_channels):
            yield self.get_channel(i)

    def get_stft_channel(self, n):
        """Returns STFT data of a channel from :attr:`stft_data` as a 2D ``np.ndarray``.

        Parameters:
            n (int): index of stft channel to get. **0-based**

        Raises:
            :class:`AudioSignalException`: If not ``0 <= n < self.num_channels``.
        """
        if self.stft_data is None:
            raise AudioSignalException('Cannot get STFT data before STFT is calculated!')

        self._verify_get_channel(n)
        return utils._get_axis(self.stft_data, constants.STFT_CHAN_INDEX, n)

    def get_stft_channels(self):
        """Generator that will loop through channels of :attr:`stft_data`.

        Yields:
            (:obj:`np.ndarray`): STFT data of one channel, in order.
        """
        for i in range(self.num_channels):
            yield self.get_stft_channel(i)

    def _verify_get_channel(self, n):
        if n >= self.num_channels:
            raise AudioSignalException(
                f'Cannot get channel {n} when this object only has {self.num_channels}'
                ' channels! (0-based)'
            )

        if n < 0:
            raise AudioSignalException(
                f'Cannot get channel {n}. This will cause unexpected results.'
            )

    def _verify_audio_arithmetic(self, other):
        if not isinstance(other, AudioSignal):
            raise AudioSignalException(f'Cannot do arithmetic with {type(other)}!')

        if self.num_channels != other.num_channels:
            raise AudioSignalException('Cannot do operation with two signals that have '
                                       'a different number of channels!')

        if self.sample_rate != other.sample_rate:
            raise AudioSignalException('Cannot do operation with two signals that have '
                                       'different sample rates!')

        if self.signal_length != other.signal_length:
            raise AudioSignalException('Cannot do arithmetic with signals of different length!')

    ##################################################
    #              Operator overloading
    ##################################################

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)


class AudioSignalException(Exception):
    """
    Exception class for :class:`AudioSignal`.
    """
    pass
