"""Session-scoped pipeline state.

Everything a run needs beyond its inputs (settings, identity, the HTTP
client) lives on a PipelineSession passed into the entry point. Two sessions
never share a client or a discard flag.
"""

from __future__ import annotations

import logging
import uuid

import httpx

from minuteflow.config import Settings
from minuteflow.services.staging_api import StagingAPI

logger = logging.getLogger(__name__)


class PipelineSession:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        uid: str | None = None,
        access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.id = uuid.uuid4().hex[:12]
        self.uid = uid
        self.api = StagingAPI(self.settings, access_token=access_token, client=client)
        self._discarded = False

    @property
    def discarded(self) -> bool:
        return self._discarded

    def discard(self) -> None:
        """Stop consuming poll responses for every run in this session.

        In-flight requests are not cancelled; the remote job keeps running.
        """
        if not self._discarded:
            logger.info("session discarded (session_id=%s)", self.id)
        self._discarded = True

    async def close(self) -> None:
        await self.api.close()

    async def __aenter__(self) -> "PipelineSession":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
