"""Prepared audio segment model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AudioSegment:
    """A resampled, independently encoded slice of a recording.

    `data` is a complete WAV file; `start_s`/`duration_s` refer to the
    original recording timeline.
    """

    index: int
    data: bytes
    sample_rate: int
    channels: int
    start_s: float
    duration_s: float

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end_s(self) -> float:
        return self.start_s + self.duration_s
