from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from minuteflow.config import Settings
from minuteflow.exceptions import MinuteFlowError
from minuteflow.export import export_filename, render_notes_markdown, render_transcript_markdown
from minuteflow.models import PipelineEvent, ProcessingMode, Recording
from minuteflow.pipeline.observer import StepTracker
from minuteflow.pipeline.runner import process_meeting_audio
from minuteflow.pipeline.session import PipelineSession
from minuteflow.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn a meeting recording into notes and a transcript.")
    parser.add_argument("--audio", required=True, help="Path to a local audio file")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ProcessingMode],
        default=ProcessingMode.ALL.value,
        help="What to produce (default: ALL)",
    )
    parser.add_argument("--model", default=None, help="Requested model (defaults to DEFAULT_MODEL)")
    parser.add_argument("--title", default=None, help="Meeting title used in exported documents")
    parser.add_argument("--out-dir", default=".", help="Directory for the exported markdown files")
    parser.add_argument("--uid", default=None, help="User id forwarded to the job-start request")
    parser.add_argument("--verbose", action="store_true", help="Debug logging, including HTTP requests")
    parser.add_argument("--log-file", default=None, help="Log file name (relative names go under LOG_DIR)")
    return parser.parse_args(argv)


def _print_event(event: PipelineEvent) -> None:
    print(event.describe(), flush=True)


async def _run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    audio_path = Path(args.audio)
    if not audio_path.exists():
        raise SystemExit(f"Audio not found: {audio_path}")

    settings = Settings()
    setup_logging(settings, verbose=args.verbose, file=args.log_file)
    logger.info("settings loaded (%s)", settings.summary())

    recording = Recording.from_path(audio_path, settings.default_media_type)
    mode = ProcessingMode(args.mode)
    recorded_at = datetime.fromtimestamp(audio_path.stat().st_mtime)
    tracker = StepTracker(on_change=_print_event)

    try:
        async with PipelineSession(settings, uid=args.uid) as session:
            data = await process_meeting_audio(
                recording,
                settings.default_media_type,
                mode,
                args.model,
                observer=tracker,
                session=session,
            )
    except MinuteFlowError as exc:
        print(f"{exc.error_code.value}: {exc.message}", file=sys.stderr)
        return 1

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    if mode.wants_notes:
        path = out_dir / export_filename(args.title, recorded_at, "notes")
        path.write_text(render_notes_markdown(data, args.title, recorded_at), encoding="utf-8")
        written.append(path)
    if mode.wants_transcript:
        path = out_dir / export_filename(args.title, recorded_at, "transcript")
        path.write_text(render_transcript_markdown(data, args.title, recorded_at), encoding="utf-8")
        written.append(path)

    for path in written:
        print(f"wrote {path}")
    if data.usage is not None:
        print(f"tokens prompt={data.usage.prompt_tokens} completion={data.usage.completion_tokens}")
    return 0


def main(argv: list[str] | None = None) -> None:
    raise SystemExit(asyncio.run(_run(argv)))


if __name__ == "__main__":
    main()
