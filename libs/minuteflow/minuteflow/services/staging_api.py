"""HTTP client for the staging/job backend (upload_chunk, start, check_status)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from minuteflow.config import Settings
from minuteflow.models.job import RAW_LABEL

logger = logging.getLogger(__name__)


class StagingAPI:
    """Thin async wrapper over the three backend calls.

    Response interpretation (status codes, payload shapes) belongs to the
    callers; this class only builds requests and owns the connection pool.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.staging_url = settings.endpoint("staging")
        self.start_url = settings.endpoint("start")
        self.timeout = float(settings.api.timeout_s)
        self.access_token = str(access_token or settings.api.access_token or "")
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create connection-pooled HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=4, max_keepalive_connections=2),
            )
            self._owns_client = True
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        client = await self._get_client()
        return await client.post(url, json=payload, headers=self._headers())

    async def upload_chunk(
        self,
        job_id: str,
        label: int | str,
        chunk_index: int,
        data_b64: str,
    ) -> httpx.Response:
        payload: dict[str, Any] = {
            "action": "upload_chunk",
            "jobId": job_id,
            "chunkIndex": int(chunk_index),
            "segmentIndex": label if label == RAW_LABEL else int(label),
            "data": data_b64,
        }
        return await self._post(self.staging_url, payload)

    async def start_job(self, payload: dict[str, Any]) -> httpx.Response:
        return await self._post(self.start_url, payload)

    async def check_status(self, job_id: str, since: int = 0) -> httpx.Response:
        payload = {"action": "check_status", "jobId": job_id, "since": int(since)}
        return await self._post(self.staging_url, payload)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "StagingAPI":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
