"""Sequential chunked upload to the staging endpoint."""

from __future__ import annotations

import base64
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterator

import httpx

from minuteflow.exceptions import TransportError
from minuteflow.services.staging_api import StagingAPI

logger = logging.getLogger(__name__)

# Payload ceiling of the most restrictive hop (serverless request body limit).
UPLOAD_CHUNK_SIZE = 4 * 1024 * 1024

ProgressCallback = Callable[[int], Awaitable[None] | None]


def chunk_count(size: int, chunk_size: int = UPLOAD_CHUNK_SIZE) -> int:
    if size <= 0:
        return 0
    return -(-int(size) // int(chunk_size))


def iter_chunks(payload: bytes, chunk_size: int = UPLOAD_CHUNK_SIZE) -> Iterator[tuple[int, memoryview]]:
    """Yield `(chunk_index, view)` over fixed-size byte ranges of `payload`."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    view = memoryview(payload)
    for index, offset in enumerate(range(0, len(view), chunk_size)):
        yield index, view[offset : offset + chunk_size]


async def _notify(callback: ProgressCallback | None, percent: int) -> None:
    if callback is None:
        return
    result = callback(percent)
    if inspect.isawaitable(result):
        await result


class ChunkUploader:
    """Pushes a payload as `(job_id, label, chunk_index)` addressed chunks.

    Chunks go out strictly in order, one request in flight at a time, since
    the receiver reassembles by concatenation. The first failure aborts the
    upload; retry policy belongs to the caller.
    """

    def __init__(self, api: StagingAPI, *, chunk_size: int = UPLOAD_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.api = api
        self.chunk_size = int(chunk_size)

    async def upload(
        self,
        job_id: str,
        payload: bytes,
        label: int | str,
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """Upload `payload`; returns the number of chunks sent."""
        total = chunk_count(len(payload), self.chunk_size)
        if total == 0:
            logger.info("upload skipped, empty payload (job_id=%s, label=%s)", job_id, label)
            await _notify(on_progress, 100)
            return 0

        logger.info(
            "upload start (job_id=%s, label=%s, bytes=%s, chunks=%s)",
            job_id,
            label,
            len(payload),
            total,
        )
        for index, chunk in iter_chunks(payload, self.chunk_size):
            data_b64 = base64.b64encode(chunk).decode("ascii")
            try:
                response = await self.api.upload_chunk(job_id, label, index, data_b64)
            except httpx.HTTPError as exc:
                logger.warning(
                    "chunk upload failed (job_id=%s, label=%s, chunk_index=%s): %s",
                    job_id,
                    label,
                    index,
                    exc,
                )
                raise TransportError(
                    f"upload failed: {exc}", job_id=job_id, chunk_index=index, label=label
                ) from exc

            if not response.is_success:
                logger.warning(
                    "chunk upload rejected (job_id=%s, label=%s, chunk_index=%s, status=%s)",
                    job_id,
                    label,
                    index,
                    response.status_code,
                )
                raise TransportError(
                    f"upload rejected with HTTP {response.status_code}",
                    job_id=job_id,
                    chunk_index=index,
                    label=label,
                    status_code=response.status_code,
                )

            await _notify(on_progress, int((index + 1) * 100 // total))

        logger.info("upload done (job_id=%s, label=%s, chunks=%s)", job_id, label, total)
        return total
