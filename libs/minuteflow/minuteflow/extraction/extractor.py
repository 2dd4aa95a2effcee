"""Best-effort sectioning of model output into MeetingData.

The model is asked for labelled sections, but header markup, bullet style,
capitalization and language vary from run to run. Extraction is therefore
heuristic: a missing section is an empty field, never an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from minuteflow.extraction.sections import SECTION_TABLE, SectionSpec, synonym_index
from minuteflow.extraction.structured import extract_structured
from minuteflow.models.meeting import MeetingData

logger = logging.getLogger(__name__)

_LEADING_MARKUP_RE = re.compile(r"^(?:[#>*_\[]+\s*|\d+[.)]\s+)+")
_TRAILING_MARKUP_RE = re.compile(r"[\s:*_\]#.\-–—]+$")
_INLINE_HEADER_RE = re.compile(r"^(?P<name>[^:]{1,60}?)[\s*_\]]*:[\s*_]*(?P<rest>\S.*)$")

_BULLET_RE = re.compile(r"^(?:[-*+•·–—☐☑✅]\s*|\d+[.)]\s+|\[\s?[xX✓✔]?\s?\]\s*)+")
_HRULE_RE = re.compile(r"^[-*_=]{3,}$")
_BOLD_RE = re.compile(r"(\*\*|__)")
_STAR_EMPHASIS_RE = re.compile(r"(?<![\w*])\*(?=\S)(.+?)(?<=\S)\*(?![\w*])")
_UNDERSCORE_EMPHASIS_RE = re.compile(r"(?<!\w)_(?=\S)(.+?)(?<=\S)_(?!\w)")
_CODE_RE = re.compile(r"`+")

_MIN_ITEM_CHARS = 3


@dataclass(frozen=True)
class _HeaderHit:
    line_no: int
    section: SectionSpec
    inline: str | None = None


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def strip_emphasis(text: str) -> str:
    out = _BOLD_RE.sub("", text)
    out = _STAR_EMPHASIS_RE.sub(r"\1", out)
    out = _UNDERSCORE_EMPHASIS_RE.sub(r"\1", out)
    return _CODE_RE.sub("", out)


def clean_list_item(line: str) -> str | None:
    """Strip bullet/numbering/checkbox markup and emphasis; None drops the line."""
    raw = line.strip()
    if len(raw) < _MIN_ITEM_CHARS or _HRULE_RE.match(raw):
        return None
    text = strip_emphasis(_BULLET_RE.sub("", raw)).strip()
    return text or None


class ResultExtractor:
    """Partitions raw model text into summary, conclusions, action items, transcript."""

    def __init__(self, table: tuple[SectionSpec, ...] = SECTION_TABLE, *, parse_json: bool = True) -> None:
        self.table = table
        self.parse_json = parse_json
        self._synonyms = synonym_index(table)

    def match_header(self, line: str) -> tuple[SectionSpec, str | None] | None:
        """Return the section a line introduces (plus inline content), if any."""
        stripped = line.strip()
        if not stripped or len(stripped) > 120:
            return None

        leading = _LEADING_MARKUP_RE.match(stripped)
        body = stripped[leading.end() :] if leading else stripped

        name = _normalize(_TRAILING_MARKUP_RE.sub("", body))
        section = self._synonyms.get(name)
        if section is not None:
            return section, None

        # `Summary: text` or `**Summary:** text`; the name must be a known synonym
        inline = _INLINE_HEADER_RE.match(body)
        if inline is None:
            return None
        section = self._synonyms.get(_normalize(_TRAILING_MARKUP_RE.sub("", inline.group("name"))))
        if section is None:
            return None
        return section, inline.group("rest").strip()

    def _find_headers(self, lines: list[str]) -> list[_HeaderHit]:
        hits: list[_HeaderHit] = []
        for line_no, line in enumerate(lines):
            matched = self.match_header(line)
            if matched is not None:
                section, inline = matched
                hits.append(_HeaderHit(line_no=line_no, section=section, inline=inline))
        return hits

    def sections(self, raw_text: str) -> dict[str, list[str]]:
        """Return the raw body lines of every section whose header was found."""
        lines = (raw_text or "").splitlines()
        hits = self._find_headers(lines)
        out: dict[str, list[str]] = {}
        for pos, hit in enumerate(hits):
            if hit.section.key in out:
                continue
            end = hits[pos + 1].line_no if pos + 1 < len(hits) else len(lines)
            body = lines[hit.line_no + 1 : end]
            if hit.inline:
                body = [hit.inline, *body]
            out[hit.section.key] = body
        return out

    @staticmethod
    def _as_text(lines: list[str]) -> str:
        return strip_emphasis("\n".join(lines)).strip()

    @staticmethod
    def _as_list(lines: list[str]) -> tuple[str, ...]:
        items: list[str] = []
        for line in lines:
            item = clean_list_item(line)
            if item is not None:
                items.append(item)
        return tuple(items)

    def extract_sections(self, raw_text: str) -> MeetingData:
        found = self.sections(raw_text)

        def _text(key: str) -> str:
            return self._as_text(found[key]) if key in found else ""

        def _items(key: str) -> tuple[str, ...]:
            return self._as_list(found[key]) if key in found else ()

        return MeetingData(
            transcription=_text("transcription"),
            summary=_text("summary"),
            conclusions=_items("conclusions"),
            action_items=_items("action_items"),
        )

    def extract(self, raw_text: str | None) -> MeetingData:
        """Never raises; unparseable input yields empty fields."""
        text = str(raw_text or "")
        if not text.strip():
            return MeetingData.empty()
        try:
            if self.parse_json:
                structured = extract_structured(text)
                if structured is not None:
                    return structured
            return self.extract_sections(text)
        except Exception:
            logger.exception("result extraction failed (chars=%s)", len(text))
            return MeetingData.empty()


_DEFAULT = ResultExtractor()


def extract(raw_text: str | None) -> MeetingData:
    return _DEFAULT.extract(raw_text)
