import copy

from ...core import AudioSignal


class SeparationBase(object):
    """Base class for separation algorithms in repet.

    A separator works on its own copy of the input signal, so the caller's
    :class:`AudioSignal` is never modified. Subclasses implement :func:`run` and
    :func:`make_audio_signals`, and can prepare the copy (e.g. take its STFT) in
    :func:`_preprocess_audio_signal`.

    Parameters:
        input_audio_signal (AudioSignal): Mixture to separate.
    """

    def __init__(self, input_audio_signal):
        self.metadata = {}
        self._audio_signal = None
        self.audio_signal = input_audio_signal

    @property
    def sample_rate(self):
        """
        (int): Sample rate of :attr:`audio_signal`.
        """
        return self.audio_signal.sample_rate

    @property
    def stft_params(self):
        """
        STFTParams of :attr:`audio_signal`.
        """
        return self.audio_signal.stft_params

    @property
    def audio_signal(self):
        """
        The separator's copy of the mixture. Setting it copies the new signal and runs
        :func:`_preprocess_audio_signal` again.

        Raises:
            ValueError: if the value is not an :class:`AudioSignal`.
            SeparationException: if it holds no audio data.
        """
        return self._audio_signal

    @audio_signal.setter
    def audio_signal(self, input_audio_signal):
        if not isinstance(input_audio_signal, AudioSignal):
            raise ValueError(
                f'Expected an AudioSignal to separate, got {type(input_audio_signal)}!')

        if input_audio_signal.audio_data is None or input_audio_signal.audio_data.size == 0:
            raise SeparationException('Cannot separate an AudioSignal with no audio data!')

        self._audio_signal = copy.deepcopy(input_audio_signal)
        self._preprocess_audio_signal()

    def _preprocess_audio_signal(self):
        pass

    def run(self, *args, **kwargs):
        raise NotImplementedError('Subclasses must implement run()!')

    def make_audio_signals(self):
        raise NotImplementedError('Subclasses must implement make_audio_signals()!')

    def __call__(self, *args, audio_signal=None, **kwargs):
        if audio_signal is not None:
            self.audio_signal = audio_signal

        self.run(*args, **kwargs)
        return self.make_audio_signals()

    def __repr__(self):
        return f"{self.__class__.__name__} on {str(self.audio_signal)}"


class SeparationException(Exception):
    pass
