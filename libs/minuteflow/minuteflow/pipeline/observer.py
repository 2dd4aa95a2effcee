"""Progress observation for pipeline runs.

Producers (the runner for local steps, the orchestrator for remote events)
only see `ProgressObserver`; consumers pick an adapter: `StepTracker` for a
step list, `EventChannel` for `async for`, `CallbackObserver` for a plain
function.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol, runtime_checkable

from minuteflow.models.progress import PIPELINE_STEPS, PipelineEvent, PipelineStep, StepStatus, step_for

logger = logging.getLogger(__name__)

EventCallback = Callable[[PipelineEvent], Any]


@runtime_checkable
class ProgressObserver(Protocol):
    async def on_event(self, event: PipelineEvent) -> None: ...


class NullObserver:
    async def on_event(self, event: PipelineEvent) -> None:  # noqa: ARG002
        return None


class CallbackObserver:
    """Adapts a sync or async callable to ProgressObserver."""

    def __init__(self, callback: EventCallback) -> None:
        self._callback = callback

    async def on_event(self, event: PipelineEvent) -> None:
        result = self._callback(event)
        if inspect.isawaitable(result):
            await result


class StepTracker:
    """Keeps the six pipeline steps current as events arrive.

    Step order is fixed; events only change a step's status and detail.
    Events for unknown steps are ignored.
    """

    def __init__(self, on_change: EventCallback | None = None) -> None:
        self._steps: list[PipelineStep] = list(PIPELINE_STEPS)
        self._on_change = on_change
        self.events: list[PipelineEvent] = []

    @property
    def steps(self) -> tuple[PipelineStep, ...]:
        return tuple(self._steps)

    def step(self, ref: int | str) -> PipelineStep | None:
        known = step_for(ref)
        if known is None:
            return None
        return self._steps[known.number - 1]

    def apply(self, event: PipelineEvent) -> bool:
        known = step_for(event.step) if event.step else step_for(event.key)
        if known is None:
            logger.debug("ignoring event for unknown step (key=%s)", event.key)
            return False
        pos = known.number - 1
        self._steps[pos] = self._steps[pos].with_status(event.status, event.detail)
        self.events.append(event)
        return True

    async def on_event(self, event: PipelineEvent) -> None:
        if not self.apply(event):
            return
        if self._on_change is not None:
            result = self._on_change(event)
            if inspect.isawaitable(result):
                await result

    @property
    def failed(self) -> bool:
        return any(s.status == StepStatus.ERROR for s in self._steps)


_CLOSED = object()


class EventChannel:
    """Observer that is also an async iterator of the events it receives.

    One consumer iterates while the pipeline publishes; `close()` ends the
    iteration after the already queued events are drained.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def on_event(self, event: PipelineEvent) -> None:
        if self._closed:
            return
        await self._queue.put(event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[PipelineEvent]:
        return self

    async def __anext__(self) -> PipelineEvent:
        item = await self._queue.get()
        if item is _CLOSED:
            # keep the sentinel for any other waiter
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item


class FanOutObserver:
    def __init__(self, *observers: ProgressObserver) -> None:
        self._observers = [o for o in observers if o is not None]

    async def on_event(self, event: PipelineEvent) -> None:
        for observer in self._observers:
            await observer.on_event(event)


def as_observer(target: ProgressObserver | EventCallback | None) -> ProgressObserver:
    """Normalize what callers pass as `observer` into a ProgressObserver."""
    if target is None:
        return NullObserver()
    if isinstance(target, ProgressObserver):
        return target
    if callable(target):
        return CallbackObserver(target)
    raise TypeError(f"not a progress observer: {target!r}")


class ProgressPercentThrottle:
    """Rate-limits percent updates for one step (emit on step increase, interval, or 100 %)."""

    def __init__(
        self,
        observer: ProgressObserver,
        key: str,
        *,
        label: str = "",
        min_percent_step: int = 5,
        min_interval_s: float = 2.0,
    ) -> None:
        self._observer = observer
        self._key = key
        self._label = label
        self._min_percent_step = max(1, int(min_percent_step))
        self._min_interval_s = max(0.0, float(min_interval_s))
        self._lock = asyncio.Lock()
        self._last_progress = -1
        self._last_update_at = 0.0

    async def report(self, progress: int) -> None:
        pct = max(0, min(100, int(progress)))
        now = time.monotonic()
        async with self._lock:
            if pct <= self._last_progress:
                return

            should_emit = False
            if pct >= 100:
                should_emit = True
            elif pct >= self._last_progress + self._min_percent_step:
                should_emit = True
            elif self._min_interval_s > 0 and now - self._last_update_at >= self._min_interval_s:
                should_emit = True

            if not should_emit:
                return

            self._last_progress = pct
            self._last_update_at = now
            detail = f"{self._label} {pct}%".strip()
            await self._observer.on_event(PipelineEvent.for_step(self._key, StepStatus.PROCESSING, detail))

    __call__ = report


async def emit(observer: ProgressObserver, key: str, status: StepStatus, detail: str | None = None) -> None:
    await observer.on_event(PipelineEvent.for_step(key, status, detail))


