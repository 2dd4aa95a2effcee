"""Exactly-once replay of the server's growing event log."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class EventCursor:
    """Tracks how much of a job's event log has been delivered.

    Each status response carries a window `events` of the log starting at
    `offset` (0 when the server sends the whole prefix). The cursor hands out
    only entries at or beyond its watermark. A window that starts past the
    watermark would skip entries, so it is not consumed at all.
    """

    def __init__(self, start: int = 0) -> None:
        self.watermark = max(0, int(start))
        self.gaps = 0

    def consume(self, events: Any, offset: Any = 0) -> list[Any]:
        if not isinstance(events, list) or not events:
            return []
        try:
            first = max(0, int(offset or 0))
        except (TypeError, ValueError):
            first = 0

        if first > self.watermark:
            self.gaps += 1
            logger.warning(
                "event window starts past watermark, waiting (offset=%s, watermark=%s)",
                first,
                self.watermark,
            )
            return []

        fresh = events[self.watermark - first :]
        self.watermark += len(fresh)
        return fresh
