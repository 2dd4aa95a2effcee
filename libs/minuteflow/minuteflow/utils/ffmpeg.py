"""FFmpeg binary resolution helper.

Prefer a configured path or the system `ffmpeg`, then the `imageio-ffmpeg`
bundled binary.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import imageio_ffmpeg

logger = logging.getLogger(__name__)


def resolve_ffmpeg_bin(ffmpeg_bin: str = "ffmpeg") -> str:
    ffmpeg_bin = (ffmpeg_bin or "ffmpeg").strip()

    if Path(ffmpeg_bin).exists():
        return ffmpeg_bin

    found = shutil.which(ffmpeg_bin)
    if found:
        return found

    try:
        return str(imageio_ffmpeg.get_ffmpeg_exe())
    except RuntimeError as exc:
        logger.warning("failed to resolve bundled ffmpeg (%s); fallback to %r", exc, ffmpeg_bin)
        return ffmpeg_bin


def pcm_decode_args(ffmpeg_bin: str, output_path: str, *, sample_rate: int = 16000) -> list[str]:
    """Arguments that read any container from stdin and write raw mono float32 PCM.

    Down-mixing and resampling are left to ffmpeg (`-ac 1 -ar <rate>`).
    """
    return [
        ffmpeg_bin,
        "-hide_banner",
        "-loglevel",
        "error",
        "-y",
        "-i",
        "pipe:0",
        "-vn",
        "-ar",
        str(int(sample_rate)),
        "-ac",
        "1",
        "-f",
        "f32le",
        output_path,
    ]
