"""Pipeline step and progress event models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

EventSource = Literal["local", "remote"]


class StepStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @classmethod
    def parse(cls, value: Any) -> "StepStatus":
        name = str(value or "").strip().lower()
        try:
            return cls(name)
        except ValueError:
            return cls.PROCESSING


@dataclass(frozen=True)
class PipelineStep:
    number: int
    key: str
    title: str
    status: StepStatus = StepStatus.PENDING
    detail: str | None = None

    def with_status(self, status: StepStatus, detail: str | None = None) -> "PipelineStep":
        return replace(self, status=status, detail=detail)


PIPELINE_STEPS: tuple[PipelineStep, ...] = (
    PipelineStep(1, "optimization", "Optimization"),
    PipelineStep(2, "upload", "Secure Upload"),
    PipelineStep(3, "start", "Analysis Start"),
    PipelineStep(4, "transcription", "Transcription"),
    PipelineStep(5, "notes", "Notes"),
    PipelineStep(6, "finalize", "Finalizing"),
)

_STEP_BY_KEY: dict[str, PipelineStep] = {s.key: s for s in PIPELINE_STEPS}
_STEP_BY_NUMBER: dict[int, PipelineStep] = {s.number: s for s in PIPELINE_STEPS}


def step_for(ref: int | str) -> PipelineStep | None:
    if isinstance(ref, int):
        return _STEP_BY_NUMBER.get(ref)
    text = str(ref or "").strip()
    if text.isdigit():
        return _STEP_BY_NUMBER.get(int(text))
    return _STEP_BY_KEY.get(text.lower())


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds on the wire
        return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return _utcnow()
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return _utcnow()


@dataclass(frozen=True)
class PipelineEvent:
    """One status transition of one step."""

    step: int
    key: str
    status: StepStatus
    detail: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    source: EventSource = "local"

    @classmethod
    def for_step(
        cls,
        key: str,
        status: StepStatus,
        detail: str | None = None,
        *,
        source: EventSource = "local",
    ) -> "PipelineEvent":
        step = step_for(key)
        if step is None:
            raise ValueError(f"Unknown pipeline step: {key!r}")
        return cls(step=step.number, key=step.key, status=status, detail=detail, source=source)

    @classmethod
    def from_wire(cls, data: Any) -> "PipelineEvent":
        """Build an event from a status-response entry; never raises."""
        if not isinstance(data, dict):
            return cls(
                step=0,
                key="",
                status=StepStatus.PROCESSING,
                detail=str(data) if data is not None else None,
                source="remote",
            )
        ref = data.get("step", data.get("key", ""))
        step = step_for(ref) if isinstance(ref, (int, str)) else None
        detail = data.get("detail", data.get("message"))
        return cls(
            step=step.number if step else 0,
            key=step.key if step else str(ref or ""),
            status=StepStatus.parse(data.get("status")),
            detail=str(detail) if detail is not None else None,
            timestamp=_parse_timestamp(data.get("timestamp")),
            source="remote",
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "key": self.key,
            "status": self.status.value,
            "detail": self.detail,
            "timestamp": self.timestamp.isoformat(),
        }

    def describe(self) -> str:
        step = step_for(self.step)
        title = step.title if step else (self.key or "step")
        text = f"[{self.step}/{len(PIPELINE_STEPS)}] {title}: {self.status.value}"
        if self.detail:
            text = f"{text} ({self.detail})"
        return text
