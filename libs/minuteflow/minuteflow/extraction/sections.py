"""Section header table for result extraction.

Each entry lists the header spellings a model may use for one section. New
languages are added here; the extractor's control flow does not change.
Synonyms are compared after normalization (lowercase, markup and trailing
punctuation removed, whitespace collapsed).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SectionKey = Literal["summary", "conclusions", "action_items", "transcription"]


@dataclass(frozen=True)
class SectionSpec:
    key: SectionKey
    synonyms: tuple[str, ...]


SECTION_TABLE: tuple[SectionSpec, ...] = (
    SectionSpec(
        key="summary",
        synonyms=(
            "summary",
            "meeting summary",
            "executive summary",
            "overview",
            # nl
            "samenvatting",
            "inleiding",
            "focus",
            # de / fr / es
            "zusammenfassung",
            "résumé",
            "resumen",
        ),
    ),
    SectionSpec(
        key="conclusions",
        synonyms=(
            "conclusions",
            "conclusion",
            "conclusions & insights",
            "conclusions and insights",
            "key insights",
            "insights",
            "key points",
            "key takeaways",
            "takeaways",
            # nl
            "conclusies",
            "conclusies & inzichten",
            "conclusies en inzichten",
            "belangrijkste punten",
            "inzichten",
            # de / fr / es
            "schlussfolgerungen",
            "conclusiones",
        ),
    ),
    SectionSpec(
        key="action_items",
        synonyms=(
            "action items",
            "action points",
            "actions",
            "next steps",
            "to-do",
            "todo",
            "tasks",
            # nl
            "actiepunten",
            "acties",
            "taken",
            "volgende stappen",
            # de / fr / es
            "aufgaben",
            "actions à mener",
            "tareas",
        ),
    ),
    SectionSpec(
        key="transcription",
        synonyms=(
            "transcript",
            "transcription",
            "full transcript",
            "verbatim transcript",
            "meeting transcript",
            # nl
            "transcriptie",
            "volledige transcriptie",
            "uitgeschreven tekst",
            # de / fr / es
            "transkript",
            "transcripción",
        ),
    ),
)


def synonym_index(table: tuple[SectionSpec, ...] = SECTION_TABLE) -> dict[str, SectionSpec]:
    """Map every normalized synonym to its section; first entry wins on clashes."""
    out: dict[str, SectionSpec] = {}
    for spec in table:
        for name in spec.synonyms:
            out.setdefault(" ".join(name.lower().split()), spec)
    return out
