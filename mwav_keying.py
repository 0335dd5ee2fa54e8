"""Helpers for recorded key presses.

These work on press/gap durations captured from a straight key, at a
known speed, before any audio exists.
"""
from typing import List, Sequence, Tuple
from mwav_utils import dot_ms


def classify_presses(press_ms: Sequence[int], wpm: int) -> List[str]:
    """Map each press to ``.`` or ``-`` (a dash is at least two dots)."""
    threshold = dot_ms(wpm) * 2
    return ['.' if d < threshold else '-' for d in press_ms]


def classify_gap(gap_ms: int, wpm: int) -> str:
    """Return ``'word'``, ``'letter'`` or ``'symbol'`` for a gap."""
    dot = dot_ms(wpm)
    if gap_ms >= dot * 7:
        return 'word'
    if gap_ms >= dot * 3:
        return 'letter'
    return 'symbol'


def keying_to_morse(press_ms: Sequence[int], gap_ms: Sequence[int], wpm: int) -> str:
    """Build a pattern string from presses and the gaps after them."""
    out = []
    for i, symbol in enumerate(classify_presses(press_ms, wpm)):
        out.append(symbol)
        if i < len(gap_ms) and i < len(press_ms) - 1:
            kind = classify_gap(gap_ms[i], wpm)
            if kind == 'word':
                out.append(' / ')
            elif kind == 'letter':
                out.append(' ')
    return ''.join(out)


def estimate_keying_wpm(press_ms: Sequence[int], gap_ms: Sequence[int]) -> float:
    """Rough sending speed from total keying time.

    An average element is taken as two units (between a dot and a dash).
    """
    if not press_ms:
        return 0.0
    total = sum(press_ms) + sum(gap_ms)
    dot = total / len(press_ms) / 2
    if dot <= 0:
        return 0.0
    return 1200 / dot


def playback_timings(pattern: str, wpm: int) -> List[Tuple[int, bool]]:
    """(duration_ms, is_signal) steps for sounding one letter pattern."""
    dot = dot_ms(wpm)
    steps: List[Tuple[int, bool]] = []
    for i, ch in enumerate(pattern):
        if ch == '.':
            steps.append((dot, True))
        elif ch == '-':
            steps.append((dot * 3, True))
        if i < len(pattern) - 1:
            steps.append((dot, False))
    return steps
