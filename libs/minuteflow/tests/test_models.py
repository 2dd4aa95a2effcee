from __future__ import annotations

import re
from datetime import timezone

import pytest

from minuteflow.models import (
    Job,
    JobStatus,
    MeetingData,
    PipelineEvent,
    ProcessingMode,
    Recording,
    SegmentManifestEntry,
    StepStatus,
    TokenUsage,
    generate_job_id,
    resolve_media_type,
)


def test_generate_job_id_format() -> None:
    job_id = generate_job_id(now_ms=1700000000123)
    assert re.fullmatch(r"job_1700000000123_[0-9a-z]{8}", job_id)
    assert generate_job_id() != generate_job_id()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("COMPLETED", JobStatus.COMPLETED),
        ("error", JobStatus.ERROR),
        ("PENDING", JobStatus.PROCESSING),
        (None, JobStatus.PROCESSING),
        ("QUEUED", JobStatus.PROCESSING),
    ],
)
def test_job_status_parse(raw, expected) -> None:
    assert JobStatus.parse(raw) == expected


def test_job_status_terminal_states() -> None:
    assert JobStatus.COMPLETED.is_terminal
    assert JobStatus.ERROR.is_terminal
    assert not JobStatus.PROCESSING.is_terminal
    assert not JobStatus.PENDING.is_terminal


def test_start_payload_for_segments_and_raw() -> None:
    seg_job = Job(
        id="job_1_a",
        mode=ProcessingMode.ALL,
        model="m",
        mime_type="audio/wav",
        total_bytes=30,
        segments=[SegmentManifestEntry(0, 10), SegmentManifestEntry(1, 20)],
    )
    assert seg_job.start_payload() == {
        "jobId": "job_1_a",
        "mimeType": "audio/wav",
        "mode": "ALL",
        "model": "m",
        "fileSize": 30,
        "segments": [{"index": 0, "size": 10}, {"index": 1, "size": 20}],
    }

    raw_job = Job(id="job_1_a", mode=ProcessingMode.NOTES_ONLY, model="m", mime_type="audio/webm", task="notes")
    payload = raw_job.start_payload(uid="u")
    assert raw_job.is_raw
    assert payload["task"] == "notes"
    assert payload["uid"] == "u"
    assert "segments" not in payload


@pytest.mark.parametrize(
    ("filename", "declared", "expected"),
    [
        ("call.MP3", "audio/webm", "audio/mp3"),
        ("call.m4a", None, "audio/mp4"),
        ("take.wav", "", "audio/wav"),
        (None, "audio/ogg", "audio/ogg"),
        ("blob", "", "audio/webm"),
    ],
)
def test_resolve_media_type(filename, declared, expected) -> None:
    assert resolve_media_type(filename, declared, "audio/webm") == expected


def test_recording_from_path(tmp_path) -> None:
    path = tmp_path / "standup.m4a"
    path.write_bytes(b"\x00\x00\x00\x18ftypM4A ")
    recording = Recording.from_path(path, "audio/webm")
    assert recording.size == 12
    assert recording.media_type == "audio/mp4"
    assert recording.filename == "standup.m4a"


def test_pipeline_event_from_wire_variants() -> None:
    by_number = PipelineEvent.from_wire({"step": 4, "status": "completed", "detail": "done", "timestamp": 0})
    assert (by_number.key, by_number.status, by_number.detail) == ("transcription", StepStatus.COMPLETED, "done")
    assert by_number.timestamp.year == 1970
    assert by_number.source == "remote"

    by_key = PipelineEvent.from_wire({"key": "notes", "status": "weird", "message": "m", "timestamp": "2026-01-02T03:04:05Z"})
    assert (by_key.step, by_key.status, by_key.detail) == (5, StepStatus.PROCESSING, "m")
    assert by_key.timestamp.tzinfo == timezone.utc

    junk = PipelineEvent.from_wire("plain log line")
    assert junk.step == 0 and junk.detail == "plain log line"


def test_pipeline_event_describe_and_wire() -> None:
    event = PipelineEvent.for_step("upload", StepStatus.PROCESSING, "Segment 1/2 50%")
    assert event.describe() == "[2/6] Secure Upload: processing (Segment 1/2 50%)"
    wire = event.to_wire()
    assert wire["step"] == 2 and wire["status"] == "processing"
    with pytest.raises(ValueError):
        PipelineEvent.for_step("nope", StepStatus.PENDING)


def test_token_usage_from_wire() -> None:
    camel = TokenUsage.from_wire({"usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5}})
    assert camel == TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15)
    snake = TokenUsage.from_wire({"prompt_tokens": 1, "completion_tokens": 2, "total_tokens": 9})
    assert snake is not None and snake.total_tokens == 9
    assert TokenUsage.from_wire({"other": 1}) is None
    assert TokenUsage.from_wire(None) is None


def test_meeting_data_to_dict_uses_wire_keys() -> None:
    data = MeetingData(summary="s", conclusions=("c",), action_items=("a",))
    out = data.to_dict()
    assert out["actionItems"] == ["a"]
    assert out["conclusions"] == ["c"]
    assert not data.is_empty
    assert MeetingData.empty().is_empty
