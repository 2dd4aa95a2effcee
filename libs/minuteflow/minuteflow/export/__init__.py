"""Result export."""

from minuteflow.export.markdown import export_filename, render_notes_markdown, render_transcript_markdown

__all__ = ["export_filename", "render_notes_markdown", "render_transcript_markdown"]
