"""Utility functions and constants for MorseWav.

This module holds the canonical Morse table (with the reverse table derived
from it once at import), shared audio defaults and small helpers used across
the package: WPM clamping, rounding and text <-> pattern conversion.
"""
from typing import Dict, Optional
import logging
import math
import re
import numpy as np

logger = logging.getLogger(__name__)

# Morse mapping for A-Z, 0-9 and standard punctuation
MORSE_MAP: Dict[str, str] = {
    'A': '.-',    'B': '-...',  'C': '-.-.', 'D': '-..',  'E': '.',
    'F': '..-.',  'G': '--.',   'H': '....', 'I': '..',   'J': '.---',
    'K': '-.-',   'L': '.-..',  'M': '--',   'N': '-.',   'O': '---',
    'P': '.--.',  'Q': '--.-',  'R': '.-.',  'S': '...',  'T': '-',
    'U': '..-',   'V': '...-',  'W': '.--',  'X': '-..-', 'Y': '-.--',
    'Z': '--..',
    '0': '-----', '1': '.----', '2': '..---','3': '...--','4': '....-',
    '5': '.....', '6': '-....', '7': '--...', '8': '---..','9': '----.',
    '.': '.-.-.-', ',': '--..--', '?': '..--..', "'": '.----.',
    '!': '-.-.--', '/': '-..-.',  '(': '-.--.',  ')': '-.--.-',
    '&': '.-...',  ':': '---...', ';': '-.-.-.', '=': '-...-',
    '+': '.-.-.',  '-': '-....-', '_': '..--.-', '"': '.-..-.',
    '$': '...-..-', '@': '.--.-.',
}

# Pattern -> character, derived once so both directions stay in sync
MORSE_REVERSE: Dict[str, str] = {code: ch for ch, code in MORSE_MAP.items()}

# Default audio/speed constants
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_TONE_HZ = 700
DEFAULT_WPM = 20

# Practical speed range; values outside are clamped, never rejected
WPM_MIN = 5
WPM_MAX = 50

_PATTERN_RE = re.compile(r'^[.\-]+$')


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in ``round`` uses banker's rounding, which would shift
    sample counts such as ``44100 * 0.005`` by one.
    """
    if x >= 0:
        return int(math.floor(x + 0.5))
    return -int(math.floor(-x + 0.5))


def round_half_away_array(x: 'np.ndarray') -> 'np.ndarray':
    """Vectorised :func:`round_half_away` for numpy arrays."""
    return np.sign(x) * np.floor(np.abs(x) + 0.5)


def clamp_wpm(wpm: int) -> int:
    """Clamp a words-per-minute value into ``[WPM_MIN, WPM_MAX]``.

    Args:
        wpm: Requested speed.

    Returns:
        The clamped speed as an int.
    """
    clamped = int(min(WPM_MAX, max(WPM_MIN, wpm)))
    if clamped != wpm:
        logger.warning("WPM %s outside %d-%d, clamped to %d", wpm, WPM_MIN, WPM_MAX, clamped)
    return clamped


def dot_ms(wpm: int) -> int:
    """Convert words-per-minute (PARIS) to the duration of a dot in ms.

    Args:
        wpm: Words per minute; clamped into the practical range first.

    Returns:
        Dot duration in whole milliseconds.
    """
    return round_half_away(1200 / clamp_wpm(wpm))


def char_to_morse(ch: str) -> Optional[str]:
    """Return the pattern for a single character (case-insensitive)."""
    return MORSE_MAP.get(ch.upper())


def morse_to_char(pattern: str) -> Optional[str]:
    """Return the character for a letter pattern, or None if unmapped."""
    return MORSE_REVERSE.get(pattern)


def text_to_morse(text: str) -> str:
    """Convert text into a pattern string.

    Letters are separated by single spaces and words by ``/``; characters
    missing from the table are dropped.
    """
    tokens = []
    for ch in text.upper():
        if ch == ' ':
            tokens.append('/')
            continue
        code = MORSE_MAP.get(ch)
        if code:
            tokens.append(code)
    return ' '.join(tokens)


def morse_to_text(pattern: str, unknown: str = '') -> str:
    """Convert a pattern string back into text.

    Words are split on ``" / "`` and letters on ``" "``. A letter pattern
    that is not in the table contributes ``unknown`` (nothing by default).

    Args:
        pattern: Pattern string as produced by the decoder.
        unknown: Replacement for unmapped letter patterns.

    Returns:
        The decoded text.
    """
    words = []
    for word in pattern.split(' / '):
        letters = [MORSE_REVERSE.get(code, unknown) for code in word.split(' ')]
        words.append(''.join(letters))
    return ' '.join(words)


def is_valid_pattern(pattern: str) -> bool:
    """True if ``pattern`` is a non-empty dot/dash string mapped to a character."""
    if not pattern or not _PATTERN_RE.match(pattern):
        return False
    return pattern in MORSE_REVERSE
