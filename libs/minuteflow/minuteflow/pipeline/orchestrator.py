"""Remote job lifecycle: start, poll, replay events, resolve the result."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from minuteflow.config import PollingConfig
from minuteflow.exceptions import AnalysisError, JobTimeoutError, OrchestrationError, SessionDiscardedError
from minuteflow.extraction import ResultExtractor
from minuteflow.models.job import Job, JobStatus
from minuteflow.models.meeting import MeetingData, TokenUsage
from minuteflow.models.progress import PipelineEvent
from minuteflow.pipeline.events import EventCursor
from minuteflow.pipeline.observer import NullObserver, ProgressObserver
from minuteflow.services.staging_api import StagingAPI

logger = logging.getLogger(__name__)

DiscardCheck = Callable[[], bool]
Sleep = Callable[[float], Awaitable[None]]


def _result_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class JobOrchestrator:
    """Starts one remote job and waits for its terminal state.

    The server is authoritative: a missing job, `PENDING`, a failed poll
    request or an unrecognized status all mean "still processing". Only
    `COMPLETED`, `ERROR` or the wait budget (`interval_s * max_attempts` of wall time,
    in-flight poll included) end the loop.
    """

    def __init__(
        self,
        api: StagingAPI,
        poll: PollingConfig | None = None,
        *,
        extractor: ResultExtractor | None = None,
        is_discarded: DiscardCheck | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.api = api
        self.poll = poll or PollingConfig()
        self.extractor = extractor or ResultExtractor()
        self._is_discarded = is_discarded
        self._sleep = sleep

    def _check_discarded(self, job_id: str) -> None:
        if self._is_discarded is not None and self._is_discarded():
            raise SessionDiscardedError(f"session discarded while waiting for job {job_id}")

    async def start(self, job: Job, uid: str | None = None) -> None:
        payload = job.start_payload(uid)
        try:
            resp = await self.api.start_job(payload)
        except httpx.HTTPError as exc:
            raise OrchestrationError("could not start job", job_id=job.id) from exc
        if not resp.is_success:
            logger.error(
                "job start rejected (job_id=%s, status=%s, body=%s)",
                job.id,
                resp.status_code,
                resp.text[:500],
            )
            raise OrchestrationError("could not start job", job_id=job.id, status_code=resp.status_code)
        logger.info(
            "job started (job_id=%s, mode=%s, model=%s, segments=%s)",
            job.id,
            job.mode.value,
            job.model,
            len(job.segments) if job.segments is not None else job.task,
        )

    async def _poll_once(self, job_id: str, since: int) -> dict[str, Any] | None:
        try:
            resp = await self.api.check_status(job_id, since=since)
        except httpx.HTTPError as exc:
            logger.warning("status poll failed (job_id=%s, error=%s)", job_id, exc)
            return None
        if not resp.is_success:
            logger.warning("status poll rejected (job_id=%s, status=%s)", job_id, resp.status_code)
            return None
        try:
            data = resp.json()
        except ValueError:
            logger.warning("status poll returned non-JSON body (job_id=%s)", job_id)
            return None
        return data if isinstance(data, dict) else None

    async def _poll_within(self, job_id: str, since: int, remaining: float) -> dict[str, Any] | None:
        """Poll once, giving up on the request when the wait budget runs out."""
        return await asyncio.wait_for(self._poll_once(job_id, since), timeout=remaining)

    async def wait(self, job_id: str, observer: ProgressObserver | None = None) -> MeetingData:
        observer = observer or NullObserver()
        cursor = EventCursor()
        interval = max(0.0, float(self.poll.interval_s))
        max_attempts = max(1, int(self.poll.max_attempts))
        started_at = time.monotonic()
        deadline = started_at + self.poll.max_wait_s
        last_log = ""
        attempt = 0

        while attempt < max_attempts:
            self._check_discarded(job_id)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            attempt += 1
            await self._sleep(min(interval, remaining))
            self._check_discarded(job_id)

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                data = await self._poll_within(job_id, cursor.watermark, remaining)
            except TimeoutError:
                logger.warning("status poll cut off at the wait deadline (job_id=%s, attempt=%s)", job_id, attempt)
                break
            self._check_discarded(job_id)
            if data is None:
                continue

            for raw in cursor.consume(data.get("events"), data.get("eventsFrom", 0)):
                await observer.on_event(PipelineEvent.from_wire(raw))

            remote_log = data.get("lastLog")
            if isinstance(remote_log, str) and remote_log and remote_log != last_log:
                logger.info("remote: %s (job_id=%s)", remote_log, job_id)
                last_log = remote_log

            status = JobStatus.parse(data.get("status"))
            if status == JobStatus.COMPLETED:
                result = self.extractor.extract(_result_text(data.get("result")))
                usage = TokenUsage.from_wire(data.get("usage"))
                logger.info(
                    "job completed (job_id=%s, attempts=%s, elapsed_s=%.1f)",
                    job_id,
                    attempt,
                    time.monotonic() - started_at,
                )
                return result.with_usage(usage) if usage is not None else result
            if status == JobStatus.ERROR:
                message = str(data.get("error") or "Analysis failed")
                logger.error("job failed (job_id=%s, error=%s)", job_id, message)
                raise AnalysisError(message, job_id=job_id)

        elapsed = time.monotonic() - started_at
        logger.error("job polling gave up (job_id=%s, attempts=%s, elapsed_s=%.1f)", job_id, attempt, elapsed)
        raise JobTimeoutError(
            f"job {job_id} did not finish within {self.poll.max_wait_s:.0f}s ({attempt} polls)",
            job_id=job_id,
            attempts=attempt,
        )

    async def run(self, job: Job, observer: ProgressObserver | None = None, *, uid: str | None = None) -> MeetingData:
        await self.start(job, uid)
        return await self.wait(job.id, observer)
