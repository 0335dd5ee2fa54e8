"""Envelope extraction and tone/gap segmentation.

The envelope is a normalised RMS over ~10 ms windows with a half-window
hop. Segmentation thresholds it into signal runs, drops runs that are too
short, and inserts a gap segment between every pair of kept runs.
"""
from dataclasses import dataclass
from typing import List
import logging
import numpy as np
from mwav_utils import round_half_away

logger = logging.getLogger(__name__)

ENVELOPE_WINDOW_SECONDS = 0.01
# Nominal hop duration used to convert envelope indices to milliseconds
HOP_MS = ENVELOPE_WINDOW_SECONDS * 1000 / 2

DEFAULT_SIGNAL_THRESHOLD = 0.15
DEFAULT_MIN_SIGNAL_MS = 20


@dataclass(frozen=True)
class Segment:
    """A run of tone (``is_signal``) or silence, in envelope indices."""
    is_signal: bool
    start_index: int
    end_index: int
    duration_ms: int


def compute_envelope(samples: 'np.ndarray', sample_rate: int) -> 'np.ndarray':
    """Compute the normalised RMS envelope of ``samples``.

    Args:
        samples: float samples in [-1, 1].
        sample_rate: samples per second.

    Returns:
        Envelope values in [0, 1], one per hop. Empty when the input is
        shorter than one window or entirely silent.
    """
    window = round_half_away(sample_rate * ENVELOPE_WINDOW_SECONDS)
    hop = window // 2
    if window <= 0 or hop <= 0 or len(samples) <= window:
        return np.zeros(0, dtype=np.float64)

    sq = np.asarray(samples, dtype=np.float64) ** 2
    csum = np.concatenate(([0.0], np.cumsum(sq)))
    starts = np.arange(0, len(samples) - window, hop)
    energy = np.maximum(csum[starts + window] - csum[starts], 0.0)
    env = np.sqrt(energy / window)

    peak = float(env.max())
    if peak <= 0:
        return np.zeros(0, dtype=np.float64)
    return env / peak


def _span_ms(start: int, end: int) -> int:
    return round_half_away((end - start) * HOP_MS)


def find_segments(
    envelope: 'np.ndarray',
    threshold: float = DEFAULT_SIGNAL_THRESHOLD,
    min_signal_ms: int = DEFAULT_MIN_SIGNAL_MS,
) -> List[Segment]:
    """Split an envelope into alternating signal/gap segments.

    A signal run opens when the envelope rises above ``threshold`` and
    closes when it falls back to or below it. Runs shorter than
    ``min_signal_ms`` are discarded, including one still open at the end
    of the envelope. Gaps are never filtered.

    Returns:
        Segments starting and ending with a signal; empty if no run survived.
    """
    signals: List[Segment] = []
    in_signal = False
    start = 0

    for i, value in enumerate(envelope):
        is_on = value > threshold
        if is_on and not in_signal:
            in_signal = True
            start = i
        elif not is_on and in_signal:
            in_signal = False
            duration = _span_ms(start, i)
            if duration >= min_signal_ms:
                signals.append(Segment(True, start, i, duration))

    if in_signal:
        duration = _span_ms(start, len(envelope))
        if duration >= min_signal_ms:
            signals.append(Segment(True, start, len(envelope), duration))

    segments: List[Segment] = []
    for i, seg in enumerate(signals):
        segments.append(seg)
        if i < len(signals) - 1:
            nxt = signals[i + 1]
            segments.append(Segment(False, seg.end_index, nxt.start_index,
                                    _span_ms(seg.end_index, nxt.start_index)))

    logger.debug("%d signal runs kept out of envelope of %d hops", len(signals), len(envelope))
    return segments
