"""Canonical error codes surfaced to callers and the CLI."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_CONFIG = "INVALID_CONFIG"

    DECODE_FAILED = "DECODE_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    START_FAILED = "START_FAILED"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    POLL_TIMEOUT = "POLL_TIMEOUT"

    SESSION_DISCARDED = "SESSION_DISCARDED"
