"""Recording and processing mode models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".mp3": "audio/mp3",
    ".m4a": "audio/mp4",
    ".mp4": "audio/mp4",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".flac": "audio/flac",
}


def resolve_media_type(filename: str | None, declared: str | None, default: str) -> str:
    """Pick the media type to declare for a recording.

    A known file extension wins over the declared type, which wins over the
    caller default (browsers often report an empty or generic type).
    """
    if filename:
        suffix = Path(str(filename)).suffix.lower()
        if suffix in _EXTENSION_MEDIA_TYPES:
            return _EXTENSION_MEDIA_TYPES[suffix]
    declared = str(declared or "").strip()
    if declared:
        return declared
    return str(default or "").strip() or "application/octet-stream"


class ProcessingMode(str, Enum):
    ALL = "ALL"
    NOTES_ONLY = "NOTES_ONLY"
    TRANSCRIPT_ONLY = "TRANSCRIPT_ONLY"

    @property
    def wants_notes(self) -> bool:
        return self in {ProcessingMode.ALL, ProcessingMode.NOTES_ONLY}

    @property
    def wants_transcript(self) -> bool:
        return self in {ProcessingMode.ALL, ProcessingMode.TRANSCRIPT_ONLY}


@dataclass(frozen=True)
class Recording:
    """An opaque captured or uploaded audio payload."""

    data: bytes
    media_type: str = ""
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    def resolved_media_type(self, default: str) -> str:
        return resolve_media_type(self.filename, self.media_type, default)

    @classmethod
    def from_path(cls, path: str | Path, default_media_type: str = "") -> "Recording":
        p = Path(path)
        return cls(
            data=p.read_bytes(),
            media_type=resolve_media_type(p.name, None, default_media_type),
            filename=p.name,
        )
