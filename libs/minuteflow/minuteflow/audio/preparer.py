"""Audio preparation: decode to 16 kHz mono, window and encode as WAV."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator

from minuteflow.audio.decoder import DecodedAudio, decode_recording
from minuteflow.audio.wav import encode_wav
from minuteflow.config import AudioConfig
from minuteflow.models.recording import Recording
from minuteflow.models.segment import AudioSegment

logger = logging.getLogger(__name__)


def segment_bounds(total_frames: int, sample_rate: int, window_s: float) -> list[tuple[int, int]]:
    """Split `total_frames` into fixed windows of `window_s` seconds.

    Returns `(start, end)` frame ranges; only the last may be shorter.
    """
    if total_frames <= 0 or sample_rate <= 0:
        return []
    window = max(1, int(round(float(window_s) * sample_rate)))
    count = -(-int(total_frames) // window)
    return [(i * window, min(int(total_frames), (i + 1) * window)) for i in range(count)]


class AudioPreparer:
    """Turns a recording into ordered, self-contained 16 kHz mono WAV segments."""

    def __init__(self, config: AudioConfig | None = None) -> None:
        cfg = config or AudioConfig()
        self.window_s = float(cfg.segment_seconds)
        self.target_sample_rate = int(cfg.target_sample_rate)
        self.ffmpeg_bin = str(cfg.ffmpeg_bin)
        self.ffmpeg_timeout_s = cfg.ffmpeg_timeout_s

    def decode(self, recording: Recording) -> DecodedAudio:
        decoded = decode_recording(
            recording,
            sample_rate=self.target_sample_rate,
            ffmpeg_bin=self.ffmpeg_bin,
            timeout_s=self.ffmpeg_timeout_s,
        )
        logger.info(
            "audio decoded (bytes=%s, frames=%s, sample_rate=%s, duration_s=%.2f)",
            recording.size,
            decoded.frames,
            decoded.sample_rate,
            decoded.duration_s,
        )
        return decoded

    def segments_from_decoded(self, decoded: DecodedAudio) -> Iterator[AudioSegment]:
        bounds = segment_bounds(decoded.frames, decoded.sample_rate, self.window_s)
        rate = float(decoded.sample_rate)
        for index, (start, end) in enumerate(bounds):
            segment = AudioSegment(
                index=index,
                data=encode_wav(decoded.read(start, end), decoded.sample_rate),
                sample_rate=decoded.sample_rate,
                channels=1,
                start_s=start / rate,
                duration_s=(end - start) / rate,
            )
            logger.debug(
                "segment prepared (index=%s/%s, start_s=%.2f, duration_s=%.2f, bytes=%s)",
                index + 1,
                len(bounds),
                segment.start_s,
                segment.duration_s,
                segment.size,
            )
            yield segment

    def iter_segments(self, recording: Recording) -> Iterator[AudioSegment]:
        """Yield segments one at a time, in index order."""
        with self.decode(recording) as decoded:
            yield from self.segments_from_decoded(decoded)

    def prepare(self, recording: Recording) -> list[AudioSegment]:
        return list(self.iter_segments(recording))

    async def prepare_async(self, recording: Recording) -> list[AudioSegment]:
        return await asyncio.to_thread(self.prepare, recording)

    def segment_count(self, decoded: DecodedAudio) -> int:
        return len(segment_bounds(decoded.frames, decoded.sample_rate, self.window_s))

    async def aiter_segments(self, decoded: DecodedAudio) -> AsyncIterator[AudioSegment]:
        """Yield segments of already decoded audio; each one is built in a worker thread."""
        it = self.segments_from_decoded(decoded)
        while True:
            segment = await asyncio.to_thread(next, it, None)
            if segment is None:
                return
            yield segment
