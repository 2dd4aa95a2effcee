"""Utility helpers."""

from minuteflow.utils.json_repair import parse_json_object, repair_truncated_json
from minuteflow.utils.subprocess import RunResult, run_subprocess_sync

__all__ = [
    "RunResult",
    "parse_json_object",
    "repair_truncated_json",
    "run_subprocess_sync",
]
