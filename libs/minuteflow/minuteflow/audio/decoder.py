"""Recording decoding: ffmpeg converts any container to 16 kHz mono float PCM."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from minuteflow.exceptions import DecodeError
from minuteflow.models.recording import Recording
from minuteflow.utils.ffmpeg import pcm_decode_args, resolve_ffmpeg_bin
from minuteflow.utils.subprocess import run_subprocess_sync

logger = logging.getLogger(__name__)

PCM_DTYPE = np.dtype("<f4")
PCM_FILENAME = "audio.f32"


@dataclass(frozen=True)
class DecodedAudio:
    """Raw mono float32 PCM spooled to a scratch directory.

    Windows are read back on demand so only one segment's samples are held in
    memory at a time. Call `cleanup()` (or use it as a context manager) once
    the last segment is built.
    """

    workdir: Path
    sample_rate: int
    frames: int

    @property
    def path(self) -> Path:
        return self.workdir / PCM_FILENAME

    @property
    def channels(self) -> int:
        return 1

    @property
    def duration_s(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frames / float(self.sample_rate)

    def read(self, start: int, end: int) -> np.ndarray:
        """Return frames `[start, end)` as float32."""
        start = max(0, int(start))
        end = min(self.frames, int(end))
        if end <= start:
            return np.zeros(0, dtype=np.float32)
        return np.fromfile(
            self.path,
            dtype=PCM_DTYPE,
            count=end - start,
            offset=start * PCM_DTYPE.itemsize,
        ).astype(np.float32, copy=False)

    def cleanup(self) -> None:
        shutil.rmtree(self.workdir, ignore_errors=True)

    def __enter__(self) -> "DecodedAudio":
        return self

    def __exit__(self, *args) -> None:
        self.cleanup()


def decode_recording(
    recording: Recording,
    *,
    sample_rate: int = 16000,
    ffmpeg_bin: str = "ffmpeg",
    timeout_s: float | None = None,
) -> DecodedAudio:
    """Decode, down-mix and resample a recording with ffmpeg.

    The recording is piped in on stdin, so webm/opus, mp4/aac, mp3, ogg and
    WAV all take the same path. Empty input or a failing ffmpeg raise
    `DecodeError`.
    """
    if not recording.data:
        raise DecodeError("recording is empty")

    binary = resolve_ffmpeg_bin(ffmpeg_bin)
    workdir = Path(tempfile.mkdtemp(prefix="minuteflow-"))
    out_path = workdir / PCM_FILENAME
    args = pcm_decode_args(binary, str(out_path), sample_rate=sample_rate)
    try:
        result = run_subprocess_sync(args, input_bytes=recording.data, timeout_s=timeout_s)
    except FileNotFoundError as exc:
        shutil.rmtree(workdir, ignore_errors=True)
        raise DecodeError(
            f"ffmpeg binary not found: {binary}. "
            "Install ffmpeg and ensure it is in PATH (or set AUDIO_FFMPEG_BIN)."
        ) from exc
    except subprocess.TimeoutExpired as exc:
        shutil.rmtree(workdir, ignore_errors=True)
        raise DecodeError(f"ffmpeg decode timed out after {timeout_s}s") from exc

    if not result.ok:
        shutil.rmtree(workdir, ignore_errors=True)
        raise DecodeError(
            f"could not decode {recording.media_type or 'audio'} "
            f"(ffmpeg code={result.returncode}): {result.stderr_text()}"
        )

    size = out_path.stat().st_size if out_path.exists() else 0
    decoded = DecodedAudio(
        workdir=workdir,
        sample_rate=int(sample_rate),
        frames=size // PCM_DTYPE.itemsize,
    )
    logger.debug(
        "ffmpeg decoded (media_type=%s, bytes=%s, frames=%s, sample_rate=%s)",
        recording.media_type,
        recording.size,
        decoded.frames,
        decoded.sample_rate,
    )
    return decoded
