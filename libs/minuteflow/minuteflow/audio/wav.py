"""WAV encoding for prepared segments.

Every segment is written with the canonical 44-byte header followed by 16-bit
little-endian mono PCM, so each one decodes on its own.
"""

from __future__ import annotations

import struct

import numpy as np

WAVE_FORMAT_PCM = 0x0001

HEADER_SIZE = 44
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")

PCM16_MAX = 32767
PCM16_MIN = -32768


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples to int16, clipping out-of-range values."""
    x = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    x = np.clip(x, -1.0, 1.0)
    scaled = np.where(x < 0, x * -PCM16_MIN, x * PCM16_MAX)
    return np.clip(np.rint(scaled), PCM16_MIN, PCM16_MAX).astype("<i2")


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode mono float samples as a self-contained 16-bit PCM WAV file."""
    pcm = float_to_pcm16(np.asarray(samples).reshape(-1))
    payload = pcm.tobytes()
    channels = 1
    bits = 16
    block_align = channels * bits // 8
    header = _HEADER_STRUCT.pack(
        b"RIFF",
        36 + len(payload),
        b"WAVE",
        b"fmt ",
        16,
        WAVE_FORMAT_PCM,
        channels,
        int(sample_rate),
        int(sample_rate) * block_align,
        block_align,
        bits,
        b"data",
        len(payload),
    )
    return header + payload
