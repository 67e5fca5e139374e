import logging
import warnings
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import scipy.fftpack as scifft

from .. import MaskSeparationBase, SeparationException
from ...core import AudioSignal, constants, masks, utils
from ...core import STFTParams, stft_utils

RepetParams = namedtuple('RepetParams',
                         ['window_duration', 'high_pass_cutoff',
                          'min_period', 'max_period', 'period']
                         )
RepetParams.__new__.__defaults__ = (None,) * len(RepetParams._fields)
"""
RepetParams object is a container that holds the settings of a REPET separation -
window_duration (seconds), high_pass_cutoff (Hz), min_period and max_period (seconds,
the range searched for the repeating period) and period (seconds, an exact repeating
period that skips the search). Fields left as ``None`` are filled from
`repet.core.constants`: 40ms windows, a 100 Hz cutoff and a 1 to 10 second range,
with the maximum also capped at a third of the signal duration.
"""


class Repet(MaskSeparationBase):
    """Implements the original REpeating Pattern Extraction Technique algorithm
    using the beat spectrum.

    REPET is a simple method for separating a repeating background from a
    non-repeating foreground in an audio mixture. It assumes a single repeating
    period over the whole signal duration, and finds that period based on finding
    a peak in the beat spectrum. The period can also be provided exactly, or you
    can give ``Repet`` a guess of the min and max period. Once it has a period,
    it "overlays" spectrogram sections of length ``period`` to create a median
    model (the background).

    Frequency bins below ``high_pass_cutoff`` (DC excluded) always go to the
    background.

    References:

    [1] Rafii, Zafar, and Bryan Pardo.
        "Repeating pattern extraction technique (REPET): A simple method for
        music/voice separation." IEEE transactions on audio, speech,
        and language processing 21.1 (2012): 73-84.

    Args:
        input_audio_signal (AudioSignal): Signal to separate.

        min_period (float, optional): minimum time to look for repeating period in
          terms of seconds.

        max_period (float, optional): maximum time to look for repeating period in
          terms of seconds.

        period (float, optional): exact time that the repeating period is
          (in seconds).

        high_pass_cutoff (float, optional): value (in Hz) for the high pass
          cutoff filter.

        window_duration (float, optional): STFT window duration in seconds, rounded
          up to a power of two number of samples.

        repet_params (RepetParams, optional): all of the above in one container.
          Keyword arguments that are not ``None`` override its fields.

        mask_type (str, optional): Mask type. Defaults to 'soft'.

        mask_threshold (float, optional): Masking threshold. Defaults to 0.5.

        num_workers (int, optional): Number of threads used to build the per-channel
          masks. Defaults to 1 (no thread pool).

    """

    def __init__(self, input_audio_signal, min_period=None, max_period=None,
                 period=None, high_pass_cutoff=None, window_duration=None,
                 repet_params=None, mask_type='soft', mask_threshold=0.5,
                 num_workers=1):

        if repet_params is not None and not isinstance(repet_params, RepetParams):
            raise SeparationException('repet_params must be of type RepetParams or None!')

        overrides = {
            'min_period': min_period,
            'max_period': max_period,
            'period': period,
            'high_pass_cutoff': high_pass_cutoff,
            'window_duration': window_duration,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        repet_params = (repet_params or RepetParams())._replace(**overrides)

        # Check input parameters
        if ((repet_params.min_period is not None or repet_params.max_period is not None)
                and repet_params.period is not None):
            raise SeparationException(
                'Cannot set both period and (min_period or max_period)!')

        for name, value in repet_params._asdict().items():
            if value is not None and value <= 0 and name != 'high_pass_cutoff':
                raise SeparationException(f'{name} must be positive, got {value}!')
        if repet_params.high_pass_cutoff is not None and repet_params.high_pass_cutoff < 0:
            raise SeparationException(
                f'high_pass_cutoff cannot be negative, got {repet_params.high_pass_cutoff}!')

        if not isinstance(num_workers, int) or num_workers < 1:
            raise SeparationException(f'num_workers must be a positive int, got {num_workers}!')

        self._user_max_period = repet_params.max_period is not None
        self.repet_params = repet_params
        self.num_workers = num_workers

        self.magnitude_spectrogram = None
        self.repeating_period = None
        self.beat_spectrum = None
        self.period_range = None

        super().__init__(
            input_audio_signal=input_audio_signal,
            mask_type=mask_type,
            mask_threshold=mask_threshold)

        self.metadata.update(self.repet_params._asdict())

    @property
    def window_duration(self):
        return (constants.DEFAULT_REPET_WIN_DURATION
                if self.repet_params.window_duration is None
                else self.repet_params.window_duration)

    @property
    def high_pass_cutoff(self):
        return (constants.DEFAULT_HIGH_PASS_CUTOFF
                if self.repet_params.high_pass_cutoff is None
                else self.repet_params.high_pass_cutoff)

    def _preprocess_audio_signal(self):
        """
        Sets the STFT parameters REPET needs (a power of two window length, half a window
        hop, periodic Hamming window), converts the period settings into time frames, and
        only then takes the STFT. Period settings that cannot work for this signal are
        reported before any transform is computed.
        """
        window_length = stft_utils.window_length_from_duration(
            self.window_duration, self.audio_signal.sample_rate)
        if window_length < 2:
            raise SeparationException(
                f'window_duration of {self.window_duration}s gives a window of {window_length} '
                f'sample(s) at {self.audio_signal.sample_rate} Hz; at least 2 are needed!')
        self.audio_signal.stft_params = STFTParams(
            window_length=window_length,
            hop_length=window_length // 2,
            window_type=constants.WINDOW_HAMMING
        )
        logging.debug(f'REPET on {self.audio_signal}, '
                      f'STFT parameters: {self.audio_signal.stft_params}')

        self.magnitude_spectrogram = None
        self.repeating_period = None
        self.beat_spectrum = None

        if self.repet_params.period is not None:
            self.period_range = None
            self.repeating_period = self._update_period(self.repet_params.period)
            self._check_fixed_period(self.repeating_period)
        else:
            self.period_range = self._compute_period_range()

        super()._preprocess_audio_signal()

    @property
    def num_frames(self):
        """
        (int) Number of STFT time frames for the signal being separated.
        """
        return stft_utils.num_frames(
            self.audio_signal.signal_length,
            self.stft_params.window_length,
            self.stft_params.hop_length)

    def _compute_period_range(self):
        min_period = (constants.DEFAULT_MIN_PERIOD
                      if self.repet_params.min_period is None
                      else self.repet_params.min_period)
        if self.repet_params.max_period is None:
            max_period = min(constants.DEFAULT_MAX_PERIOD,
                             self.audio_signal.signal_duration / constants.MIN_REPETITIONS)
        else:
            max_period = self.repet_params.max_period

        min_frames = self._update_period(min_period)
        max_frames = self._update_period(max_period)

        # at least MIN_REPETITIONS repetitions are needed for the median
        frame_limit = self.num_frames // constants.MIN_REPETITIONS
        if max_frames > frame_limit:
            msg = (f'max_period of {max_period:0.3f}s ({max_frames} frames) gives fewer than '
                   f'{constants.MIN_REPETITIONS} repetitions; clamping it to {frame_limit} frames.')
            if self._user_max_period:
                warnings.warn(msg)
            else:
                logging.debug(msg)
            max_frames = frame_limit

        if min_frames > max_frames:
            raise SeparationException(
                f'Signal is too short for min_period of {min_period:0.3f}s: the period '
                f'range in frames [{min_frames}, {max_frames}] is empty!')

        logging.info(f'Searching for a repeating period between {min_frames} '
                     f'and {max_frames} frames.')
        return min_frames, max_frames

    def _check_fixed_period(self, period):
        if period < 1:
            raise SeparationException(
                f'period of {self.repet_params.period}s is shorter than one hop!')
        if period * constants.MIN_REPETITIONS > self.num_frames:
            warnings.warn(
                f'Repeating period of {period} frames repeats fewer than '
                f'{constants.MIN_REPETITIONS} times in {self.num_frames} frames!')

    def _update_period(self, period):
        """
        Converts a period in seconds into a lag in STFT time frames, the unit
        :func:`find_repeating_period_simple` returns. Halves are rounded down.
        """
        period = float(period)
        hop_length = self.stft_params.hop_length
        period_in_frames = np.ceil(
            period * self.audio_signal.sample_rate / hop_length - 0.5)
        return int(period_in_frames)

    def run(self):
        self.magnitude_spectrogram = self.audio_signal.magnitude_spectrogram_data
        self.repeating_period = self._calculate_repeating_period()
        self.metadata['repeating_period'] = self.repeating_period

        logging.info(
            f'Repeating period: {self.repeating_period} frames '
            f'({self.repeating_period * self.stft_params.hop_length / self.sample_rate:0.3f}s)')

        num_channels = self.audio_signal.num_channels
        if self.num_workers > 1 and num_channels > 1:
            with ThreadPoolExecutor(max_workers=self.num_workers) as pool:
                background_masks = list(
                    pool.map(self._compute_channel_mask, range(num_channels)))
        else:
            background_masks = [
                self._compute_channel_mask(ch) for ch in range(num_channels)]

        background_mask = masks.SoftMask(
            np.stack(background_masks, axis=constants.STFT_CHAN_INDEX))

        if self.mask_type == masks.BinaryMask:
            background_mask = background_mask.mask_to_binary(self.mask_threshold)

        foreground_mask = background_mask.invert_mask()
        self.result_masks = [background_mask, foreground_mask]

        return self.result_masks

    def _compute_channel_mask(self, ch):
        repeating_mask = self.compute_repeating_mask(
            self.magnitude_spectrogram[..., ch], self.repeating_period)

        # dual high pass: everything below the cutoff is background
        cutoff = self.high_pass_cutoff_bins()
        repeating_mask[1:cutoff + 1, :] = 1.0

        return repeating_mask

    def high_pass_cutoff_bins(self):
        """
        Number of frequency bins (above DC) that always go to the background.

        Returns:
            (int) ``ceil(high_pass_cutoff * (window_length - 1) / sample_rate)``
        """
        return int(np.ceil(
            self.high_pass_cutoff * (self.stft_params.window_length - 1) / self.sample_rate))

    def get_beat_spectrum(self):
        """
        Calculates and returns the beat spectrum for the audio signal associated
        with this object. The power spectrograms of all channels are averaged first.

        Returns:
            beat_spectrum (np.array): beat spectrum for the audio file

        Example:

        .. code-block:: python
            :linenos:

            signal = repet.AudioSignal(audio_data_array=mixture, sample_rate=44100)
            separator = repet.separation.primitive.Repet(signal)

            # I don't have to run repet to get a beat spectrum for signal
            beat_spec = separator.get_beat_spectrum()

        """
        if self.magnitude_spectrogram is None:
            self.magnitude_spectrogram = self.audio_signal.magnitude_spectrogram_data

        self.beat_spectrum = self.compute_beat_spectrum(
            np.mean(np.square(self.magnitude_spectrogram),
                    axis=constants.STFT_CHAN_INDEX)
        )
        return self.beat_spectrum

    def _calculate_repeating_period(self):
        # user provided a period, so no calculations to do
        if self.repet_params.period is not None:
            return self.repeating_period

        self.beat_spectrum = self.get_beat_spectrum()
        min_period, max_period = self.period_range

        return self.find_repeating_period_simple(self.beat_spectrum, min_period, max_period)

    @staticmethod
    def compute_beat_spectrum(power_spectrogram):
        """ Computes the beat spectrum: the mean over frequencies of the autocorrelation
        of each frequency bin of a one-sided power spectrogram.

        The autocorrelation of every row is computed according to the Wiener-Khinchin
        theorem: each row is zero-padded to (at least) twice its length, the inverse FFT
        of its power spectral density is taken, the symmetric half is dismissed, and lag
        ``k`` is divided by ``n_frames - k`` for an unbiased estimate.

        Args:
            power_spectrogram (:obj:`np.array`): 2D matrix with shape
              ``(n_frequencies, n_frames)`` containing a one-sided power spectrogram

        Returns:
            (:obj:`np.array`): array of length ``n_frames`` containing the beat spectrum,
            indexed by lag in frames

        See Also:
            J Foote's original derivation of the Beat Spectrum:
            Foote, Jonathan, and Shingo Uchihashi. "The beat spectrum: A new approach to rhythm analysis."
            Multimedia and Expo, 2001. ICME 2001. IEEE International Conference on. IEEE, 2001.

        """
        freq_bins, time_bins = power_spectrogram.shape

        # row-wise autocorrelation according to the Wiener-Khinchin theorem
        n_fft = utils.next_power_of_two(2 * time_bins)
        fft_power_spec = scifft.fft(power_spectrogram, n=n_fft, axis=1)
        abs_fft = np.abs(fft_power_spec) ** 2
        autocorrelation_rows = np.real(scifft.ifft(abs_fft, axis=1)[:, :time_bins])

        # normalization factor
        autocorrelation_rows = autocorrelation_rows / np.arange(time_bins, 0, -1)

        # average over frequencies
        beat_spectrum = np.mean(autocorrelation_rows, axis=0)

        return beat_spectrum

    @staticmethod
    def find_repeating_period_simple(beat_spectrum, min_period, max_period):
        """
        Computes the repeating period of the sound signal using the beat spectrum.
        This algorithm just looks for the max value in the interval
        ``[min_period, max_period]``, inclusive. It discards the first value (lag 0),
        caps ``max_period`` so that the period repeats at least three times, and
        returns the period in units of stft time bins.

        Args:
            beat_spectrum (:obj:`np.array`): input beat spectrum array
            min_period (int): minimum possible period value
            max_period (int): maximum possible period value

        Returns:
             period (int): The period of the sound signal in stft time bins

        Raises:
            SeparationException: if the search range is empty.

        """
        min_period, max_period = int(min_period), int(max_period)
        max_period = min(max_period, len(beat_spectrum) // constants.MIN_REPETITIONS)

        if min_period < 1:
            raise SeparationException(f'min_period must be at least 1 frame, got {min_period}!')

        # discard the first element of beat_spectrum (lag 0)
        beat_spectrum = beat_spectrum[1:]
        beat_spectrum = beat_spectrum[min_period - 1: max_period]

        if len(beat_spectrum) == 0:
            raise SeparationException('min_period is larger than the beat spectrum!')

        period = int(np.argmax(beat_spectrum)) + min_period

        return period

    @staticmethod
    def compute_repeating_mask(magnitude_spectrogram_channel, period):
        """
        Computes the soft mask for the repeating part using the magnitude
        spectrogram and the repeating period.

        The spectrogram is cut into ``ceil(n_frames / period)`` segments of ``period``
        frames; the last one may be partial. The repeating segment is the median over
        segments at every (frequency, frame-within-segment) position, where the frames
        past the end of the partial last segment only take the median over the full
        segments. The repeating spectrogram is the repeating segment tiled over time and
        capped by the mixture, so the mask is in ``(0, 1]``.

        Args:
            magnitude_spectrogram_channel (:obj:`np.array`): 2D matrix containing the
              magnitude spectrogram of one channel, ``(n_frequencies, n_frames)``
            period (int): repeating period in frames

        Returns:
            (:obj:`np.array`): 2D matrix (Lf by Lt) containing the soft mask for the
              repeating part, elements of M take on values in ``(0, 1]``

        """
        period = int(period)
        if period < 1:
            raise SeparationException(f'Repeating period must be at least 1 frame, got {period}!')

        freq_bins, time_bins = magnitude_spectrogram_channel.shape
        n_repetitions = int(np.ceil(time_bins / period))
        last_length = time_bins - (n_repetitions - 1) * period

        # pad to make an integer number of repetitions, padding is never used in a median
        padded = np.zeros((freq_bins, n_repetitions * period))
        padded[:, :time_bins] = magnitude_spectrogram_channel

        # (freq, repetition, frame within repetition)
        segments = padded.reshape(freq_bins, n_repetitions, period)

        repeating_segment = np.zeros((freq_bins, period))
        repeating_segment[:, :last_length] = np.median(
            segments[:, :, :last_length], axis=1)
        if last_length < period and n_repetitions > 1:
            repeating_segment[:, last_length:] = np.median(
                segments[:, :-1, last_length:], axis=1)

        # tile back to the original shape
        repeating_spectrogram = np.tile(repeating_segment, (1, n_repetitions))[:, :time_bins]

        # take minimum of computed model and original input and scale
        repeating_spectrogram = np.minimum(repeating_spectrogram, magnitude_spectrogram_channel)
        mask = (repeating_spectrogram + constants.EPSILON) / (
                magnitude_spectrogram_channel + constants.EPSILON)

        return mask


def separate_background(signal, sample_rate, period_range=None, repet_params=None,
                        num_workers=1):
    """
    Extracts the repeating background of a mixture with :class:`Repet`.

    Args:
        signal (:obj:`np.ndarray`): 1D or 2D real-valued samples. 2D arrays can be
          ``(n_channels, n_samples)`` or ``(n_samples, n_channels)``.
        sample_rate (int): Sample rate in Hz.
        period_range (tuple or float, optional): ``(min_period, max_period)`` in seconds
          to search for the repeating period, or a single number for an exact period.
          Defaults to ``(1, min(10, duration / 3))``.
        repet_params (RepetParams, optional): remaining settings, see :class:`RepetParams`.
        num_workers (int, optional): threads used for the per-channel masks.

    Returns:
        (:obj:`np.ndarray`) background with the same shape as ``signal``. The foreground
        is ``signal - background``.

    Raises:
        AudioSignalException: if ``sample_rate`` is not positive or ``signal`` is not a
          finite real array.
        SeparationException: if ``signal`` is empty or the period settings are invalid.
    """
    signal = np.asarray(signal)
    audio_signal = AudioSignal(audio_data_array=signal, sample_rate=sample_rate)

    kwargs = {}
    if period_range is not None:
        if np.ndim(period_range) == 0:
            kwargs['period'] = period_range
        else:
            if len(period_range) != 2:
                raise SeparationException(
                    f'period_range must be (min_period, max_period), got {period_range}!')
            kwargs['min_period'], kwargs['max_period'] = period_range

    separator = Repet(audio_signal, repet_params=repet_params,
                      num_workers=num_workers, **kwargs)
    background, _ = separator()

    background_data = background.audio_data
    if signal.ndim == 1:
        return background_data[0]
    if background_data.shape != signal.shape:
        background_data = background_data.T
    return background_data
