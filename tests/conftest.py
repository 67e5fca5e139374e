import pytest
import numpy as np

import repet

# (onset in seconds, frequency in Hz) of the decaying tones in the repeating pattern
BURSTS = [(0.0, 220.0), (0.3, 440.0), (0.7, 330.0), (1.1, 660.0), (1.6, 550.0)]


def make_template(period_length, sample_rate, decay=0.08):
    """One period of a repeating "drum loop": decaying tones at irregular onsets."""
    template = np.zeros(period_length)
    for onset, freq in BURSTS:
        start = int(onset * sample_rate)
        if start >= period_length:
            continue
        t = np.arange(period_length - start) / sample_rate
        template[start:] += np.sin(2 * np.pi * freq * t) * np.exp(-t / decay)
    return template


def make_tone(length, sample_rate, freq, start, stop):
    """A Hann-faded sinusoid between ``start`` and ``stop`` samples, silent elsewhere."""
    tone = np.zeros(length)
    t = np.arange(stop - start) / sample_rate
    tone[start:stop] = 0.5 * np.sin(2 * np.pi * freq * t) * np.hanning(stop - start)
    return tone


@pytest.fixture(scope="module")
def repeating_mixture():
    """
    10 seconds at 44.1kHz: a 2 second pattern repeated 5 times plus white noise.
    """
    np.random.seed(0)
    sample_rate = 44100
    period_length = 2 * sample_rate
    template = make_template(period_length, sample_rate)
    background = np.tile(template, 5)
    noise = 0.01 * np.random.randn(len(background))
    return background + noise, background, sample_rate


@pytest.fixture(scope="module")
def hop_aligned_mixture():
    """
    A pattern that repeats every 86 hops of 1024 samples (~2s at 44.1kHz), five
    times, with a high tone that only plays during the second repetition.
    """
    sample_rate = 44100
    period_length = 86 * 1024
    template = make_template(period_length, sample_rate)
    background = np.tile(template, 5)
    foreground = make_tone(
        len(background), sample_rate, 3520.0, period_length, 2 * period_length)
    return background + foreground, background, foreground, sample_rate


@pytest.fixture
def stereo_mixture(repeating_mixture):
    mix, _, sample_rate = repeating_mixture
    # 8 seconds still holds 4 repetitions of the pattern
    mix = mix[:8 * sample_rate]
    stereo = np.vstack([mix, 0.5 * mix[::-1]])
    return stereo, sample_rate


@pytest.fixture
def random_signal():
    np.random.seed(1)
    return repet.AudioSignal(
        audio_data_array=np.random.rand(2, 10000) * 2 - 1, sample_rate=16000)
