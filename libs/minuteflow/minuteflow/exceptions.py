"""MinuteFlow exception hierarchy."""

from __future__ import annotations

from minuteflow.error_codes import ErrorCode


class MinuteFlowError(Exception):
    """Base error for MinuteFlow."""

    error_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, error_code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class ConfigurationError(MinuteFlowError):
    """Raised when configuration or inputs are invalid."""

    error_code = ErrorCode.INVALID_CONFIG


class DecodeError(MinuteFlowError):
    """Raised when a recording cannot be decoded. Never retried."""

    error_code = ErrorCode.DECODE_FAILED


class TransportError(MinuteFlowError):
    """Raised when a chunk upload is rejected or fails."""

    error_code = ErrorCode.UPLOAD_FAILED

    def __init__(
        self,
        message: str,
        *,
        job_id: str,
        chunk_index: int,
        label: int | str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{message} (job_id={job_id}, label={label}, chunk_index={chunk_index})")
        self.job_id = job_id
        self.chunk_index = chunk_index
        self.label = label
        self.status_code = status_code


class OrchestrationError(MinuteFlowError):
    """Raised when the remote job could not be started."""

    error_code = ErrorCode.START_FAILED

    def __init__(self, message: str, *, job_id: str, status_code: int | None = None) -> None:
        super().__init__(f"{message} (job_id={job_id})")
        self.job_id = job_id
        self.status_code = status_code


class AnalysisError(MinuteFlowError):
    """Raised when the remote analysis reports failure.

    The message is the server-reported text, unmodified.
    """

    error_code = ErrorCode.ANALYSIS_FAILED

    def __init__(self, message: str, *, job_id: str) -> None:
        super().__init__(message)
        self.job_id = job_id


class JobTimeoutError(MinuteFlowError, TimeoutError):
    """Raised when polling gives up before the job reached a terminal state.

    The job may still complete remotely.
    """

    error_code = ErrorCode.POLL_TIMEOUT

    def __init__(self, message: str, *, job_id: str, attempts: int) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.attempts = attempts


class SessionDiscardedError(MinuteFlowError):
    """Raised when the owning session was discarded while a run was in flight."""

    error_code = ErrorCode.SESSION_DISCARDED
