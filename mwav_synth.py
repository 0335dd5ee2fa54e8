"""Morse synthesizer module.

Contains the TimingParameters dataclass, the element duration model and
MorseSynth which generates mono 16-bit PCM sample buffers for pattern
strings and for raw key-press timings.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import numpy as np
from mwav_utils import (DEFAULT_SAMPLE_RATE, DEFAULT_TONE_HZ, DEFAULT_WPM,
                        clamp_wpm, dot_ms, round_half_away, round_half_away_array)

logger = logging.getLogger(__name__)

# Audio envelope constants
FADE_DURATION_SECONDS = 0.005
AMPLITUDE = 0.8
TAIL_SILENCE_MS = 100

INT16_MIN = -32768
INT16_MAX = 32767


@dataclass(frozen=True)
class ElementDurations:
    """Element and gap durations in whole milliseconds."""
    dot: int
    dash: int
    symbol_gap: int
    letter_gap: int
    word_gap: int


@dataclass
class TimingParameters:
    """Configuration for the synthesizer.

    ``character_wpm`` enables Farnsworth timing: dots, dashes and the gaps
    inside a letter use it, while letter and word gaps keep the slower
    ``words_per_minute``.
    """
    words_per_minute: int = DEFAULT_WPM
    character_wpm: Optional[int] = None
    tone_frequency_hz: int = DEFAULT_TONE_HZ
    sample_rate: int = DEFAULT_SAMPLE_RATE

    def durations(self) -> ElementDurations:
        """Derive element durations, clamping both speeds into range."""
        wpm = clamp_wpm(self.words_per_minute)
        char_wpm = wpm if self.character_wpm is None else clamp_wpm(self.character_wpm)
        dot = dot_ms(char_wpm)
        gap_dot = dot_ms(wpm)
        return ElementDurations(
            dot=dot,
            dash=dot * 3,
            symbol_gap=dot,
            letter_gap=gap_dot * 3,
            word_gap=gap_dot * 7,
        )


def sample_count(duration_ms: int, sample_rate: int = DEFAULT_SAMPLE_RATE) -> int:
    """Number of samples covering ``duration_ms`` (never negative)."""
    return max(0, round_half_away(sample_rate * duration_ms / 1000))


def fade_envelope(n: int, fade: int) -> 'np.ndarray':
    """Linear fade-in/fade-out envelope of length ``n``.

    Ramps 0->1 over the first ``fade`` samples and 1->0 over the last
    ``fade``. On tones shorter than two fades the fade-in wins where the
    ramps overlap.
    """
    i = np.arange(n, dtype=np.float64)
    if fade <= 0:
        return np.ones(n, dtype=np.float64)
    env = np.ones(n, dtype=np.float64)
    tail = i > n - fade
    env[tail] = (n - i[tail]) / fade
    head = i < fade
    env[head] = i[head] / fade
    return env


def tone(duration_ms: int, freq: float, sample_rate: int = DEFAULT_SAMPLE_RATE) -> 'np.ndarray':
    """Synthesize a faded sine tone as int16 samples.

    Args:
        duration_ms: duration in milliseconds
        freq: frequency in Hz
        sample_rate: samples per second

    Returns:
        A numpy int16 array.
    """
    n = sample_count(duration_ms, sample_rate)
    t = np.arange(n, dtype=np.float64) / sample_rate
    sig = np.sin(2 * np.pi * freq * t)
    fade = round_half_away(sample_rate * FADE_DURATION_SECONDS)
    scaled = sig * fade_envelope(n, fade) * INT16_MAX * AMPLITUDE
    pcm = np.clip(round_half_away_array(scaled), INT16_MIN, INT16_MAX)
    return pcm.astype(np.int16)


def silence(duration_ms: int, sample_rate: int = DEFAULT_SAMPLE_RATE) -> 'np.ndarray':
    """Return a buffer of zero samples for ``duration_ms`` milliseconds."""
    return np.zeros(sample_count(duration_ms, sample_rate), dtype=np.int16)


class MorseSynth:
    """Generate Morse code sample buffers according to TimingParameters.

    Public methods:
      - pattern_samples(pattern): samples for a ``.-/ `` pattern string
      - timing_samples(press_ms, gap_ms): samples for raw key-press timings
    """
    def __init__(self, params: TimingParameters):
        """Store parameters and resolve element durations once.

        Args:
            params: TimingParameters instance.
        """
        self.params = params
        self.durations = params.durations()

    def _tone(self, duration_ms: int) -> 'np.ndarray':
        return tone(duration_ms, self.params.tone_frequency_hz, self.params.sample_rate)

    def _silence(self, duration_ms: int) -> 'np.ndarray':
        return silence(duration_ms, self.params.sample_rate)

    def pattern_samples(self, pattern: str) -> 'np.ndarray':
        """Expand a pattern string into a tone/silence sample stream.

        Every dot or dash followed by another symbol or by a letter-break
        space is followed by a symbol gap. The space then adds
        ``letter_gap - symbol_gap``, so a letter break totals exactly
        ``letter_gap``. ``/`` adds a full word gap. Any other character is
        ignored. A fixed tail of silence closes every stream.

        When the character speed is so slow that the symbol gap exceeds the
        letter gap, the space adds no silence and a warning is logged.
        """
        d = self.durations
        chunks: List[np.ndarray] = []
        warned = False
        for i, ch in enumerate(pattern):
            if ch in '.-':
                chunks.append(self._tone(d.dot if ch == '.' else d.dash))
                if i + 1 < len(pattern) and pattern[i + 1] in '.- ':
                    chunks.append(self._silence(d.symbol_gap))
            elif ch == ' ':
                extra = d.letter_gap - d.symbol_gap
                if extra < 0 and not warned:
                    logger.warning("symbol gap %dms exceeds letter gap %dms; letter breaks stretched to %dms",
                                   d.symbol_gap, d.letter_gap, d.symbol_gap)
                    warned = True
                chunks.append(self._silence(extra))
            elif ch == '/':
                chunks.append(self._silence(d.word_gap))
        chunks.append(self._silence(TAIL_SILENCE_MS))
        logger.debug("pattern %r -> %d chunks (dot=%dms)", pattern, len(chunks), d.dot)
        return np.concatenate(chunks)

    def timing_samples(self, press_ms: Sequence[int], gap_ms: Sequence[int]) -> 'np.ndarray':
        """Reproduce recorded key presses verbatim.

        Each press becomes a tone of exactly that length, followed by the
        gap at the same index when one exists. No dot/dash classification
        happens here.
        """
        chunks: List[np.ndarray] = []
        for i, press in enumerate(press_ms):
            chunks.append(self._tone(press))
            if i < len(gap_ms):
                chunks.append(self._silence(gap_ms[i]))
        chunks.append(self._silence(TAIL_SILENCE_MS))
        return np.concatenate(chunks)
