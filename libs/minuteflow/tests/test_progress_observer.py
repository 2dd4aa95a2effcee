from __future__ import annotations

import asyncio

import pytest

from minuteflow.models import PIPELINE_STEPS, PipelineEvent, StepStatus
from minuteflow.pipeline.observer import (
    CallbackObserver,
    EventChannel,
    FanOutObserver,
    ProgressPercentThrottle,
    StepTracker,
    as_observer,
)


def _ev(key: str, status: StepStatus, detail: str | None = None) -> PipelineEvent:
    return PipelineEvent.for_step(key, status, detail)


@pytest.mark.asyncio
async def test_step_tracker_updates_status_but_keeps_order() -> None:
    changes: list[str] = []
    tracker = StepTracker(on_change=lambda e: changes.append(e.key))

    await tracker.on_event(_ev("notes", StepStatus.PROCESSING, "Drafting"))
    await tracker.on_event(_ev("optimization", StepStatus.COMPLETED))
    await tracker.on_event(PipelineEvent.from_wire({"step": "bogus", "status": "completed"}))

    assert [s.key for s in tracker.steps] == [s.key for s in PIPELINE_STEPS]
    assert tracker.step(5).status == StepStatus.PROCESSING
    assert tracker.step(5).detail == "Drafting"
    assert tracker.step("optimization").status == StepStatus.COMPLETED
    assert tracker.step("upload").status == StepStatus.PENDING
    assert changes == ["notes", "optimization"]
    assert not tracker.failed

    await tracker.on_event(_ev("start", StepStatus.ERROR, "rejected"))
    assert tracker.failed


@pytest.mark.asyncio
async def test_event_channel_is_async_iterable() -> None:
    channel = EventChannel()

    async def _produce() -> None:
        for key in ("optimization", "upload", "start"):
            await channel.on_event(_ev(key, StepStatus.COMPLETED))
        channel.close()

    producer = asyncio.create_task(_produce())
    received = [event.key async for event in channel]
    await producer

    assert received == ["optimization", "upload", "start"]
    assert channel.closed
    await channel.on_event(_ev("notes", StepStatus.COMPLETED))
    assert [e async for e in channel] == []


@pytest.mark.asyncio
async def test_callback_observer_accepts_sync_and_async_callables() -> None:
    seen: list[str] = []

    async def _async_cb(event: PipelineEvent) -> None:
        seen.append(f"async:{event.key}")

    fan = FanOutObserver(CallbackObserver(lambda e: seen.append(f"sync:{e.key}")), as_observer(_async_cb))
    await fan.on_event(_ev("finalize", StepStatus.COMPLETED))

    assert seen == ["sync:finalize", "async:finalize"]


def test_as_observer_rejects_non_callables() -> None:
    tracker = StepTracker()
    assert as_observer(tracker) is tracker
    with pytest.raises(TypeError):
        as_observer(42)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_percent_throttle_emits_on_step_and_completion() -> None:
    tracker = StepTracker()
    throttle = ProgressPercentThrottle(tracker, "upload", label="Segment 1/1", min_percent_step=25, min_interval_s=0)

    for pct in (0, 10, 20, 30, 30, 60, 70, 99, 100, 100):
        await throttle(pct)

    assert [e.detail for e in tracker.events] == [
        "Segment 1/1 30%",
        "Segment 1/1 60%",
        "Segment 1/1 99%",
        "Segment 1/1 100%",
    ]
