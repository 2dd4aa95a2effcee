"""Remote analysis job model."""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from minuteflow.models.recording import ProcessingMode

RAW_LABEL = "raw"

_BASE36 = string.digits + string.ascii_lowercase


class JobStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in {JobStatus.COMPLETED, JobStatus.ERROR}

    @classmethod
    def parse(cls, value: Any) -> "JobStatus":
        """Map a wire status to JobStatus; unknown or missing means still processing."""
        name = str(value or "").strip().upper()
        try:
            status = cls(name)
        except ValueError:
            return cls.PROCESSING
        if status == cls.PENDING:
            return cls.PROCESSING
        return status


def generate_job_id(now_ms: int | None = None) -> str:
    """Return `job_<epoch-ms>_<random base36>`."""
    ts = int(now_ms if now_ms is not None else time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"job_{ts}_{suffix}"


@dataclass(frozen=True)
class SegmentManifestEntry:
    index: int
    size: int

    def to_dict(self) -> dict[str, int]:
        return {"index": int(self.index), "size": int(self.size)}


@dataclass
class Job:
    """One remote analysis run as the client declares it.

    Either `segments` (prepared uploads) or `task` (raw upload marker) is set.
    """

    id: str
    mode: ProcessingMode
    model: str
    mime_type: str
    total_bytes: int = 0
    segments: list[SegmentManifestEntry] | None = None
    task: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_raw(self) -> bool:
        return self.segments is None

    def start_payload(self, uid: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "jobId": self.id,
            "mimeType": self.mime_type,
            "mode": self.mode.value,
            "model": self.model,
            "fileSize": int(self.total_bytes),
        }
        if self.segments is not None:
            payload["segments"] = [s.to_dict() for s in self.segments]
        else:
            payload["task"] = self.task or RAW_LABEL
        if uid:
            payload["uid"] = uid
        payload.update(self.extra)
        return payload
