"""Timing classification and confidence scoring.

The dot length is estimated blindly from the shorter half of the signal
runs, then every segment is classified against fixed multiples of it.
Thresholds sit between the canonical 1/3/7 unit ratios: a dash is at
least 2 dots, a letter gap at least 2 dots and a word gap at least 5.
"""
from typing import List, Sequence
import math
from mwav_signal import Segment
from mwav_utils import WPM_MAX, WPM_MIN, round_half_away

DEFAULT_DOT_MS = 60

DASH_THRESHOLD_UNITS = 2
LETTER_GAP_THRESHOLD_UNITS = 2
WORD_GAP_THRESHOLD_UNITS = 5


def signal_durations(segments: Sequence[Segment]) -> List[int]:
    return [s.duration_ms for s in segments if s.is_signal]


def estimate_dot_from_durations(durations: Sequence[int]) -> int:
    """Lower median of the shorter half of ``durations``.

    The shorter half is assumed to be dots, so a cluster of dashes does
    not pull the estimate up. Returns DEFAULT_DOT_MS for no input.
    """
    if not durations:
        return DEFAULT_DOT_MS
    ordered = sorted(durations)
    short_half = ordered[:math.ceil(len(ordered) / 2)]
    return short_half[len(short_half) // 2]


def estimate_dot_duration(segments: Sequence[Segment]) -> int:
    """Estimate the dot duration (ms) from the signal segments."""
    return estimate_dot_from_durations(signal_durations(segments))


def estimate_wpm(dot_ms: int) -> int:
    """PARIS speed for a dot duration, clamped into the practical range."""
    if dot_ms <= 0:
        return WPM_MAX
    return min(WPM_MAX, max(WPM_MIN, round_half_away(1200 / dot_ms)))


def segments_to_morse(segments: Sequence[Segment], dot_ms: int) -> str:
    """Classify segments into a pattern string.

    Signals become ``.`` or ``-``; gaps become ``" / "``, ``" "`` or
    nothing (an intra-letter gap). Surrounding whitespace is trimmed.
    """
    dash_threshold = dot_ms * DASH_THRESHOLD_UNITS
    letter_threshold = dot_ms * LETTER_GAP_THRESHOLD_UNITS
    word_threshold = dot_ms * WORD_GAP_THRESHOLD_UNITS

    out = []
    for seg in segments:
        if seg.is_signal:
            out.append('.' if seg.duration_ms < dash_threshold else '-')
        elif seg.duration_ms >= word_threshold:
            out.append(' / ')
        elif seg.duration_ms >= letter_threshold:
            out.append(' ')
    return ''.join(out).strip()


def confidence_from_durations(durations: Sequence[int], dot_ms: int) -> float:
    """Score how tightly ``durations`` cluster on 1x and 3x ``dot_ms``.

    Each duration contributes its relative error to the nearer of the two
    ideals; the score is one minus the mean error, clamped to [0, 1].
    Fewer than two durations cannot show consistency and score 0.5; none
    at all scores 0.
    """
    if not durations:
        return 0.0
    if len(durations) < 2:
        return 0.5
    if dot_ms <= 0:
        return 0.0

    dash_ms = dot_ms * 3
    total = 0.0
    for d in durations:
        total += min(abs(d - dot_ms) / dot_ms, abs(d - dash_ms) / dash_ms)
    return min(1.0, max(0.0, 1.0 - total / len(durations)))


def calculate_confidence(segments: Sequence[Segment], dot_ms: int) -> float:
    """Confidence for a segment list; see :func:`confidence_from_durations`."""
    return confidence_from_durations(signal_durations(segments), dot_ms)
