"""Public encode/decode operations for MorseWav.

Encoding turns a pattern, text or raw key timings into WAV bytes. Decoding
runs bytes -> container parse -> envelope -> segments -> classification ->
confidence and always returns a DecodeResult, never an exception.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import logging
from mwav_classify import (calculate_confidence, estimate_dot_duration,
                           estimate_wpm, segments_to_morse)
from mwav_signal import (DEFAULT_MIN_SIGNAL_MS, DEFAULT_SIGNAL_THRESHOLD,
                         compute_envelope, find_segments)
from mwav_synth import MorseSynth, TimingParameters
from mwav_utils import DEFAULT_SAMPLE_RATE, DEFAULT_TONE_HZ, morse_to_text, text_to_morse
from mwav_wav import encode_wav, extract_samples, parse_wav_header

logger = logging.getLogger(__name__)

INVALID_WAV_MESSAGE = '[Error: Invalid WAV file]'
NO_SIGNAL_MESSAGE = '[No morse code detected]'


class DecodeStatus(Enum):
    OK = 'ok'
    INVALID_CONTAINER = 'invalid_container'
    UNSUPPORTED_SAMPLE_FORMAT = 'unsupported_sample_format'
    NO_SIGNAL = 'no_signal'


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one decode call.

    Attributes:
        morse_pattern: recovered pattern, e.g. ``"... --- ..."``.
        decoded_text: text for the pattern, or an explanatory message.
        estimated_wpm: sending speed, 0 when nothing was decoded.
        confidence: timing consistency score in [0, 1].
        status: which decode path produced the result.
    """
    morse_pattern: str
    decoded_text: str
    estimated_wpm: int
    confidence: float
    status: DecodeStatus = DecodeStatus.OK

    @classmethod
    def empty(cls, message: str, status: DecodeStatus) -> 'DecodeResult':
        return cls(morse_pattern='', decoded_text=message, estimated_wpm=0,
                   confidence=0.0, status=status)


def encode_morse_to_wav(pattern: str, params: Optional[TimingParameters] = None) -> bytes:
    """Synthesize a pattern string (``.``, ``-``, space, ``/``) as WAV bytes."""
    params = params or TimingParameters()
    samples = MorseSynth(params).pattern_samples(pattern)
    return encode_wav(samples, params.sample_rate)


def encode_text_to_wav(text: str, params: Optional[TimingParameters] = None) -> bytes:
    """Convert text to a pattern and synthesize it as WAV bytes."""
    return encode_morse_to_wav(text_to_morse(text), params)


def encode_timings_to_wav(
    press_ms: Sequence[int],
    gap_ms: Sequence[int],
    tone_hz: int = DEFAULT_TONE_HZ,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> bytes:
    """Reproduce recorded key presses and gaps verbatim as WAV bytes."""
    params = TimingParameters(tone_frequency_hz=tone_hz, sample_rate=sample_rate)
    samples = MorseSynth(params).timing_samples(press_ms, gap_ms)
    return encode_wav(samples, sample_rate)


class MorseDecoder:
    """Blind Morse decoder for complete WAV buffers.

    Usage:
        decoder = MorseDecoder(signal_threshold=0.15, min_signal_ms=20)
        result = decoder.decode(wav_bytes)
    """

    def __init__(
        self,
        signal_threshold: float = DEFAULT_SIGNAL_THRESHOLD,
        min_signal_ms: int = DEFAULT_MIN_SIGNAL_MS,
    ):
        self.signal_threshold = signal_threshold
        self.min_signal_ms = min_signal_ms

    def decode(self, data: bytes) -> DecodeResult:
        info = parse_wav_header(data)
        if info is None:
            return DecodeResult.empty(INVALID_WAV_MESSAGE, DecodeStatus.INVALID_CONTAINER)

        samples = extract_samples(data, info)
        envelope = compute_envelope(samples, info.sample_rate)
        segments = find_segments(envelope, self.signal_threshold, self.min_signal_ms)

        if not segments:
            status = (DecodeStatus.NO_SIGNAL if info.bits_per_sample in (8, 16)
                      else DecodeStatus.UNSUPPORTED_SAMPLE_FORMAT)
            return DecodeResult.empty(NO_SIGNAL_MESSAGE, status)

        dot = estimate_dot_duration(segments)
        pattern = segments_to_morse(segments, dot)
        result = DecodeResult(
            morse_pattern=pattern,
            decoded_text=morse_to_text(pattern),
            estimated_wpm=estimate_wpm(dot),
            confidence=calculate_confidence(segments, dot),
        )
        logger.debug("decoded %r at %d WPM (dot=%dms, confidence=%.2f)",
                     pattern, result.estimated_wpm, dot, result.confidence)
        return result


def decode_wav(
    data: bytes,
    signal_threshold: float = DEFAULT_SIGNAL_THRESHOLD,
    min_signal_ms: int = DEFAULT_MIN_SIGNAL_MS,
) -> DecodeResult:
    """Decode Morse from a WAV byte buffer; see :class:`MorseDecoder`."""
    return MorseDecoder(signal_threshold, min_signal_ms).decode(data)
