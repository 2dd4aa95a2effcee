"""Utilities for safely parsing JSON embedded in model output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")


def repair_truncated_json(text: str) -> str:
    """Attempt to repair a truncated JSON string.

    Closes an unterminated string, then any open arrays and objects in the
    reverse order they were opened.
    """
    if not text or not text.strip():
        return "{}"

    text = text.strip()

    in_string = False
    escape_next = False
    stack: list[str] = []

    for char in text:
        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
        elif not in_string:
            if char in "{[":
                stack.append("}" if char == "{" else "]")
            elif char in "}]" and stack and stack[-1] == char:
                stack.pop()

    result = text
    if in_string:
        result += '"'
    while stack:
        result += stack.pop()
    return result


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def parse_json_object(raw: str) -> dict[str, Any] | None:
    """Best-effort extraction of one JSON object from free text.

    Tries, in order: the whole text, the first fenced code block, the span
    between the first `{` and the last `}` (trailing commas removed), and a
    truncation repair of that span. Returns None when nothing parses.
    """
    if not raw or not raw.strip():
        return None

    text = raw.strip()

    data = _loads_object(text)
    if data is not None:
        return data

    match = _FENCED_RE.search(text)
    if match:
        data = _loads_object(match.group(1))
        if data is not None:
            return data

    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    if end > start:
        data = _loads_object(strip_trailing_commas(text[start : end + 1]))
        if data is not None:
            return data

    data = _loads_object(repair_truncated_json(strip_trailing_commas(text[start:])))
    if data is not None:
        return data

    logger.debug("failed to parse JSON even after repair: %s...", text[:100])
    return None
