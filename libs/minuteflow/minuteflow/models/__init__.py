"""Core data models for MinuteFlow."""

from minuteflow.models.job import (
    RAW_LABEL,
    Job,
    JobStatus,
    SegmentManifestEntry,
    generate_job_id,
)
from minuteflow.models.meeting import MeetingData, TokenUsage
from minuteflow.models.progress import (
    PIPELINE_STEPS,
    PipelineEvent,
    PipelineStep,
    StepStatus,
    step_for,
)
from minuteflow.models.recording import ProcessingMode, Recording, resolve_media_type
from minuteflow.models.segment import AudioSegment

__all__ = [
    "AudioSegment",
    "Job",
    "JobStatus",
    "MeetingData",
    "PIPELINE_STEPS",
    "PipelineEvent",
    "PipelineStep",
    "ProcessingMode",
    "RAW_LABEL",
    "Recording",
    "SegmentManifestEntry",
    "StepStatus",
    "TokenUsage",
    "generate_job_id",
    "resolve_media_type",
    "step_for",
]
