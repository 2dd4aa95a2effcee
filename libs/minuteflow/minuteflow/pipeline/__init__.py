"""Pipeline orchestration.

Keep imports lazy so `minuteflow.pipeline.observer` can be imported without
pulling in the audio stack (numpy, ffmpeg resolution).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minuteflow.pipeline.orchestrator import JobOrchestrator
    from minuteflow.pipeline.runner import MeetingPipeline, process_meeting_audio
    from minuteflow.pipeline.session import PipelineSession

__all__ = ["JobOrchestrator", "MeetingPipeline", "PipelineSession", "process_meeting_audio"]


def __getattr__(name: str) -> Any:
    if name == "JobOrchestrator":
        from minuteflow.pipeline.orchestrator import JobOrchestrator

        return JobOrchestrator
    if name == "MeetingPipeline":
        from minuteflow.pipeline.runner import MeetingPipeline

        return MeetingPipeline
    if name == "process_meeting_audio":
        from minuteflow.pipeline.runner import process_meeting_audio

        return process_meeting_audio
    if name == "PipelineSession":
        from minuteflow.pipeline.session import PipelineSession

        return PipelineSession
    raise AttributeError(name)
