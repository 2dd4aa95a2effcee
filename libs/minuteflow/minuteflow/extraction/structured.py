"""Structured (JSON) result path.

The worker asks the model for a JSON object with `transcription`, `summary`,
`conclusions` and `actionItems`. When it complies, fields are read from the
object; nested values are flattened to plain strings.
"""

from __future__ import annotations

import json
from typing import Any

from minuteflow.models.meeting import MeetingData
from minuteflow.utils.json_repair import parse_json_object

_TEXT_KEYS = ("text", "task", "point", "note", "description", "content", "value", "summary")

_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "transcription": ("transcription", "transcript"),
    "summary": ("summary",),
    "conclusions": ("conclusions", "insights"),
    "action_items": ("actionItems", "action_items", "actionPoints", "actions"),
}


def smart_unwrap(item: Any) -> str:
    """Flatten a JSON value to text, preferring well-known text fields of objects."""
    if isinstance(item, str):
        return item
    if item is None:
        return ""
    if isinstance(item, list):
        return "\n".join(smart_unwrap(i) for i in item)
    if isinstance(item, dict):
        for key in _TEXT_KEYS:
            value = item.get(key)
            if isinstance(value, (str, int, float)) and not isinstance(value, bool) and value != "":
                return str(value)
        return json.dumps(item, ensure_ascii=False)
    return str(item)


def sanitize_array(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if not isinstance(value, list):
        return ()
    out: list[str] = []
    for item in value:
        text = smart_unwrap(item).strip()
        if text:
            out.append(text)
    return tuple(out)


def _first(obj: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in obj and obj[key] is not None:
            return obj[key]
    return None


def extract_structured(raw_text: str) -> MeetingData | None:
    """Return MeetingData when `raw_text` carries a JSON result object, else None."""
    obj = parse_json_object(raw_text)
    if obj is None:
        return None
    if not any(_first(obj, keys) is not None for keys in _FIELD_KEYS.values()):
        return None

    return MeetingData(
        transcription=smart_unwrap(_first(obj, _FIELD_KEYS["transcription"])).strip(),
        summary=smart_unwrap(_first(obj, _FIELD_KEYS["summary"])).strip(),
        conclusions=sanitize_array(_first(obj, _FIELD_KEYS["conclusions"])),
        action_items=sanitize_array(_first(obj, _FIELD_KEYS["action_items"])),
    )
