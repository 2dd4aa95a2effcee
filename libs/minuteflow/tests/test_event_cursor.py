from __future__ import annotations

from minuteflow.pipeline.events import EventCursor

LOG = [f"e{i}" for i in range(6)]


def _replay(windows: list[tuple[list[str], int]]) -> list[str]:
    cursor = EventCursor()
    delivered: list[str] = []
    for events, offset in windows:
        delivered.extend(cursor.consume(events, offset))
    return delivered


def test_growing_prefixes_deliver_each_event_once() -> None:
    windows = [(LOG[:1], 0), (LOG[:1], 0), (LOG[:3], 0), (LOG[:3], 0), (LOG, 0)]
    assert _replay(windows) == LOG


def test_overlapping_windows_do_not_reemit() -> None:
    windows = [(LOG[0:2], 0), (LOG[1:4], 1), (LOG[2:5], 2), (LOG[3:6], 3)]
    assert _replay(windows) == LOG


def test_non_overlapping_windows_are_concatenated() -> None:
    windows = [(LOG[0:2], 0), (LOG[2:4], 2), (LOG[4:6], 4)]
    assert _replay(windows) == LOG


def test_window_past_watermark_waits_instead_of_skipping() -> None:
    cursor = EventCursor()
    assert cursor.consume(LOG[:2], 0) == ["e0", "e1"]

    assert cursor.consume(LOG[4:6], 4) == []
    assert cursor.watermark == 2
    assert cursor.gaps == 1

    assert cursor.consume(LOG[1:6], 1) == ["e2", "e3", "e4", "e5"]
    assert cursor.watermark == 6


def test_missing_or_malformed_events_are_ignored() -> None:
    cursor = EventCursor()
    assert cursor.consume(None) == []
    assert cursor.consume("e0") == []
    assert cursor.consume(LOG[:1], "not-a-number") == ["e0"]
    assert cursor.watermark == 1
