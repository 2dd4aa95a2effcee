"""Pipeline result models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


def _coerce_usage(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None

    @classmethod
    def from_wire(cls, data: Any) -> "TokenUsage | None":
        """Parse usage accounting in snake_case or Gemini camelCase form."""
        if not isinstance(data, dict):
            return None
        if isinstance(data.get("usageMetadata"), dict):
            data = data["usageMetadata"]

        def _get(*names: str) -> int | None:
            for name in names:
                value = _coerce_usage(data.get(name))
                if value is not None:
                    return value
            return None

        prompt = _get("prompt_tokens", "promptTokenCount", "prompt_token_count")
        completion = _get(
            "completion_tokens", "candidatesTokenCount", "candidates_token_count"
        )
        total = _get("total_tokens", "totalTokenCount", "total_token_count")
        if prompt is None and completion is None and total is None:
            return None
        if total is None and prompt is not None and completion is not None:
            total = prompt + completion
        return cls(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)


@dataclass(frozen=True)
class MeetingData:
    transcription: str = ""
    summary: str = ""
    conclusions: tuple[str, ...] = field(default_factory=tuple)
    action_items: tuple[str, ...] = field(default_factory=tuple)
    usage: TokenUsage | None = None

    @classmethod
    def empty(cls) -> "MeetingData":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (
            self.transcription.strip()
            or self.summary.strip()
            or self.conclusions
            or self.action_items
        )

    def with_usage(self, usage: TokenUsage | None) -> "MeetingData":
        return replace(self, usage=usage)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transcription": self.transcription,
            "summary": self.summary,
            "conclusions": list(self.conclusions),
            "actionItems": list(self.action_items),
        }
        if self.usage is not None:
            out["usage"] = {
                "prompt_tokens": self.usage.prompt_tokens,
                "completion_tokens": self.usage.completion_tokens,
                "total_tokens": self.usage.total_tokens,
            }
        return out
