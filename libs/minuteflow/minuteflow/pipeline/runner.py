"""Pipeline entry point: recording in, MeetingData out."""

from __future__ import annotations

import asyncio
import logging

from minuteflow.audio import AudioPreparer
from minuteflow.exceptions import MinuteFlowError, SessionDiscardedError
from minuteflow.extraction import ResultExtractor
from minuteflow.models.job import RAW_LABEL, Job, SegmentManifestEntry, generate_job_id
from minuteflow.models.meeting import MeetingData
from minuteflow.models.progress import StepStatus
from minuteflow.models.recording import ProcessingMode, Recording
from minuteflow.pipeline.observer import (
    EventCallback,
    ProgressObserver,
    ProgressPercentThrottle,
    as_observer,
    emit,
)
from minuteflow.pipeline.orchestrator import JobOrchestrator
from minuteflow.pipeline.session import PipelineSession
from minuteflow.transport import ChunkUploader

logger = logging.getLogger(__name__)

NOTES_TASK = "notes"
SEGMENT_MIME_TYPE = "audio/wav"


class MeetingPipeline:
    """Runs one recording through prepare, transport and orchestration.

    NOTES_ONLY uploads the recording as-is; TRANSCRIPT_ONLY prepares and
    uploads 16 kHz segments; ALL does both under one job id, with the raw
    notes track running as a background task whose failure is only logged.
    """

    def __init__(
        self,
        session: PipelineSession,
        *,
        preparer: AudioPreparer | None = None,
        extractor: ResultExtractor | None = None,
        orchestrator: JobOrchestrator | None = None,
    ) -> None:
        self.session = session
        self.settings = session.settings
        self.preparer = preparer or AudioPreparer(self.settings.audio)
        self.uploader = ChunkUploader(session.api)
        self.orchestrator = orchestrator or JobOrchestrator(
            session.api,
            self.settings.poll,
            extractor=extractor,
            is_discarded=lambda: session.discarded,
        )

    async def _upload_raw(self, job: Job, recording: Recording, observer: ProgressObserver) -> None:
        throttle = ProgressPercentThrottle(observer, "upload", label="Uploading recording")
        await emit(observer, "upload", StepStatus.PROCESSING, "Uploading recording")
        await self.uploader.upload(job.id, recording.data, RAW_LABEL, on_progress=throttle)
        await emit(observer, "upload", StepStatus.COMPLETED)

    async def _start(self, job: Job, observer: ProgressObserver) -> None:
        await emit(observer, "start", StepStatus.PROCESSING)
        await self.orchestrator.start(job, self.session.uid)
        await emit(observer, "start", StepStatus.COMPLETED)

    def _raw_job(self, job_id: str, recording: Recording, mode: ProcessingMode, model: str, media_type: str) -> Job:
        return Job(
            id=job_id,
            mode=mode,
            model=model,
            mime_type=media_type,
            total_bytes=recording.size,
            task=NOTES_TASK,
        )

    async def notes_track(
        self,
        job_id: str,
        recording: Recording,
        mode: ProcessingMode,
        model: str,
        media_type: str,
        observer: ProgressObserver,
    ) -> MeetingData:
        job = self._raw_job(job_id, recording, mode, model, media_type)
        await emit(observer, "optimization", StepStatus.COMPLETED, "Original recording kept")
        await self._upload_raw(job, recording, observer)
        await self._start(job, observer)
        return await self.orchestrator.wait(job.id, observer)

    async def fast_notes_track(
        self,
        job_id: str,
        recording: Recording,
        model: str,
        media_type: str,
        observer: ProgressObserver,
    ) -> bool:
        """Raw upload plus notes start for ALL mode; failures are logged, never raised.

        The result arrives through the thorough track's polling, so this track
        does not poll.
        """
        job = self._raw_job(job_id, recording, ProcessingMode.ALL, model, media_type)
        try:
            await self.uploader.upload(job.id, recording.data, RAW_LABEL)
            await self.orchestrator.start(job, self.session.uid)
        except Exception as exc:
            logger.warning("fast notes track failed, continuing with transcript track (job_id=%s): %s", job_id, exc)
            return False
        await emit(observer, "notes", StepStatus.PROCESSING, "Fast notes requested")
        return True

    async def transcript_track(
        self,
        job_id: str,
        recording: Recording,
        mode: ProcessingMode,
        model: str,
        observer: ProgressObserver,
    ) -> MeetingData:
        await emit(observer, "optimization", StepStatus.PROCESSING, "Decoding audio")
        decoded = await asyncio.to_thread(self.preparer.decode, recording)
        with decoded:
            total = self.preparer.segment_count(decoded)
            if total == 0:
                logger.info("zero-duration recording, nothing to analyze (job_id=%s)", job_id)
                await emit(observer, "optimization", StepStatus.COMPLETED, "No audio")
                return MeetingData.empty()

            manifest: list[SegmentManifestEntry] = []
            async for segment in self.preparer.aiter_segments(decoded):
                if self.session.discarded:
                    raise SessionDiscardedError(f"session discarded while uploading job {job_id}")
                label = f"Segment {segment.index + 1}/{total}"
                await emit(observer, "optimization", StepStatus.PROCESSING, f"{label} prepared")
                throttle = ProgressPercentThrottle(observer, "upload", label=label)
                await self.uploader.upload(job_id, segment.data, segment.index, on_progress=throttle)
                manifest.append(SegmentManifestEntry(index=segment.index, size=segment.size))
        await emit(observer, "optimization", StepStatus.COMPLETED, f"{len(manifest)} segment(s)")
        await emit(observer, "upload", StepStatus.COMPLETED)

        job = Job(
            id=job_id,
            mode=mode,
            model=model,
            mime_type=SEGMENT_MIME_TYPE,
            total_bytes=sum(entry.size for entry in manifest),
            segments=manifest,
        )
        await self._start(job, observer)
        return await self.orchestrator.wait(job.id, observer)

    async def run(
        self,
        recording: Recording,
        mode: ProcessingMode = ProcessingMode.ALL,
        model: str | None = None,
        observer: ProgressObserver | EventCallback | None = None,
        *,
        default_media_type: str | None = None,
    ) -> MeetingData:
        obs = as_observer(observer)
        model_name = model or self.settings.default_model
        media_type = recording.resolved_media_type(default_media_type or self.settings.default_media_type)
        job_id = generate_job_id()
        logger.info(
            "pipeline start (job_id=%s, mode=%s, model=%s, media_type=%s, bytes=%s)",
            job_id,
            mode.value,
            model_name,
            media_type,
            recording.size,
        )

        try:
            if mode == ProcessingMode.NOTES_ONLY:
                result = await self.notes_track(job_id, recording, mode, model_name, media_type, obs)
            elif mode == ProcessingMode.TRANSCRIPT_ONLY:
                result = await self.transcript_track(job_id, recording, mode, model_name, obs)
            else:
                result = await self._run_dual(job_id, recording, model_name, media_type, obs)
        except MinuteFlowError as exc:
            logger.error("pipeline failed (job_id=%s, error_code=%s): %s", job_id, exc.error_code.value, exc.message)
            raise

        logger.info("pipeline done (job_id=%s, empty=%s)", job_id, result.is_empty)
        return result

    async def _run_dual(
        self,
        job_id: str,
        recording: Recording,
        model: str,
        media_type: str,
        observer: ProgressObserver,
    ) -> MeetingData:
        fast = asyncio.create_task(
            self.fast_notes_track(job_id, recording, model, media_type, observer),
            name=f"fast-notes-{job_id}",
        )
        try:
            return await self.transcript_track(job_id, recording, ProcessingMode.ALL, model, observer)
        finally:
            # the fast track finishes on its own; it is never cancelled
            await fast


async def process_meeting_audio(
    recording: Recording,
    default_media_type: str | None = None,
    mode: ProcessingMode = ProcessingMode.ALL,
    model: str | None = None,
    observer: ProgressObserver | EventCallback | None = None,
    session: PipelineSession | None = None,
) -> MeetingData:
    """Analyze one recording and return its notes and/or transcript.

    Without a session a temporary one is created from environment settings
    and closed afterwards.
    """
    if session is not None:
        return await MeetingPipeline(session).run(
            recording, mode, model, observer, default_media_type=default_media_type
        )
    async with PipelineSession() as owned:
        return await MeetingPipeline(owned).run(
            recording, mode, model, observer, default_media_type=default_media_type
        )
