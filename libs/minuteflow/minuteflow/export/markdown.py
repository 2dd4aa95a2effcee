"""Markdown rendering of meeting results (notes and transcript documents)."""

from __future__ import annotations

import re
from datetime import datetime

from minuteflow.models.meeting import MeetingData

_FILENAME_UNSAFE_RE = re.compile(r'[/\\?%*:|"<>]')

NO_SUMMARY = "No summary returned."
NO_CONCLUSIONS = "No conclusions recorded."
NO_ACTION_ITEMS = "No action items identified."
NO_TRANSCRIPT = "No transcript returned."


def clean_title(title: str | None) -> str:
    return (title or "").replace("(", "").replace(")", "").strip() or "Meeting"


def format_recorded_at(recorded_at: datetime) -> str:
    """`19 October 2026 at 14:05`"""
    return f"{recorded_at.day} {recorded_at.strftime('%B %Y')} at {recorded_at:%H:%M}"


def render_notes_markdown(data: MeetingData, title: str | None, recorded_at: datetime) -> str:
    conclusions = "\n".join(f"- {c}" for c in data.conclusions) or NO_CONCLUSIONS
    actions = "\n".join(f"- [ ] {a}" for a in data.action_items) or NO_ACTION_ITEMS
    lines = [
        f"# Notes {clean_title(title)}",
        f"Recorded on {format_recorded_at(recorded_at)}",
        "",
        "## Summary",
        data.summary.strip() or NO_SUMMARY,
        "",
        "## Conclusions & Insights",
        conclusions,
        "",
        "## Action Points",
        actions,
    ]
    return "\n".join(lines) + "\n"


def render_transcript_markdown(data: MeetingData, title: str | None, recorded_at: datetime) -> str:
    return (
        f"# Transcript {clean_title(title)}\n"
        f"Recorded on {format_recorded_at(recorded_at)}\n\n"
        f"{data.transcription.strip() or NO_TRANSCRIPT}\n"
    )


def export_filename(title: str | None, recorded_at: datetime, suffix: str, extension: str = "md") -> str:
    """`<title> on <date> at HHhMMmSSs - <suffix>.<ext>` with path-unsafe characters replaced."""
    stamp = f"{recorded_at.day} {recorded_at.strftime('%B %Y')} at {recorded_at:%Hh%Mm%Ss}"
    stem = _FILENAME_UNSAFE_RE.sub("-", f"{clean_title(title)} on {stamp} - {suffix}")
    return f"{stem}.{extension.lstrip('.')}"
