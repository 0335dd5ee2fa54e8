"""RIFF/WAVE container encoding and parsing.

Encoding always writes the canonical 44-byte header for mono 16-bit PCM.
Parsing walks the chunk list so files carrying extra chunks (LIST, fact...)
still load; a malformed buffer yields None instead of raising.
"""
from dataclasses import dataclass
from typing import Optional
import logging
import struct
import numpy as np
from mwav_utils import DEFAULT_SAMPLE_RATE

logger = logging.getLogger(__name__)

HEADER_SIZE = 44
PCM_FORMAT = 1
BITS_PER_SAMPLE = 16
NUM_CHANNELS = 1

# RIFF id, size, WAVE, fmt id, fmt size, format, channels, rate,
# byte rate, block align, bits, data id, data size
_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
_CHUNK = struct.Struct('<4sI')


@dataclass(frozen=True)
class WavInfo:
    """Format fields and payload bounds found while parsing a container."""
    audio_format: int
    num_channels: int
    sample_rate: int
    bits_per_sample: int
    data_offset: int
    data_size: int


def encode_wav(samples: 'np.ndarray', sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """Pack int16 samples into a mono 16-bit PCM WAV byte buffer.

    Args:
        samples: 1-D array of samples in the int16 range.
        sample_rate: Samples per second written to the header.

    Returns:
        The complete container as bytes.
    """
    pcm = np.asarray(samples, dtype='<i2').tobytes()
    data_size = len(pcm)
    block_align = NUM_CHANNELS * BITS_PER_SAMPLE // 8
    header = _HEADER.pack(
        b'RIFF', 36 + data_size, b'WAVE',
        b'fmt ', 16, PCM_FORMAT, NUM_CHANNELS, sample_rate,
        sample_rate * block_align, block_align, BITS_PER_SAMPLE,
        b'data', data_size,
    )
    return header + pcm


def parse_wav_header(data: bytes) -> Optional[WavInfo]:
    """Locate the ``fmt `` and ``data`` chunks of a WAV buffer.

    Returns:
        A WavInfo, or None when the buffer is too short, the RIFF/WAVE
        markers are wrong, or either required chunk is missing.
    """
    if len(data) < HEADER_SIZE:
        logger.debug("buffer too short for a WAV header (%d bytes)", len(data))
        return None
    if data[0:4] != b'RIFF' or data[8:12] != b'WAVE':
        logger.debug("missing RIFF/WAVE markers")
        return None

    offset = 12
    while offset < len(data) - 8:
        chunk_id, chunk_size = _CHUNK.unpack_from(data, offset)
        if chunk_id == b'fmt ' and offset + 24 <= len(data):
            audio_format, num_channels, sample_rate = struct.unpack_from('<HHI', data, offset + 8)
            bits_per_sample, = struct.unpack_from('<H', data, offset + 22)

            data_offset = offset + 8 + chunk_size
            while data_offset < len(data) - 8:
                sub_id, sub_size = _CHUNK.unpack_from(data, data_offset)
                if sub_id == b'data':
                    return WavInfo(
                        audio_format=audio_format,
                        num_channels=num_channels,
                        sample_rate=sample_rate,
                        bits_per_sample=bits_per_sample,
                        data_offset=data_offset + 8,
                        data_size=sub_size,
                    )
                data_offset += 8 + sub_size
        offset += 8 + chunk_size

    logger.debug("no fmt/data chunk pair found")
    return None


def extract_samples(data: bytes, info: WavInfo) -> 'np.ndarray':
    """Read the first channel of the payload as floats in [-1, 1].

    16-bit samples are scaled by 1/32768 and 8-bit (unsigned) samples by
    ``(v - 128) / 128``. Any other bit depth yields zeros, one per frame.
    A payload that runs past the end of the buffer is truncated.
    """
    bytes_per_sample = info.bits_per_sample // 8
    frame = bytes_per_sample * info.num_channels
    if frame <= 0:
        return np.zeros(0, dtype=np.float64)

    n = info.data_size // frame
    room = len(data) - info.data_offset - bytes_per_sample
    n = min(n, room // frame + 1 if room >= 0 else 0)

    if info.bits_per_sample not in (8, 16):
        logger.warning("unsupported sample format: %d-bit, reading as silence", info.bits_per_sample)
        return np.zeros(n, dtype=np.float64)

    raw = np.frombuffer(data, dtype=np.uint8)
    idx = info.data_offset + np.arange(n) * frame
    if info.bits_per_sample == 16:
        v = raw[idx].astype(np.int32) | (raw[idx + 1].astype(np.int32) << 8)
        v = np.where(v >= 32768, v - 65536, v)
        return v / 32768.0
    return (raw[idx].astype(np.float64) - 128.0) / 128.0
