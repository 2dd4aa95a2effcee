from __future__ import annotations

import pytest

from minuteflow.extraction import ResultExtractor, SectionSpec, clean_list_item, extract, smart_unwrap
from minuteflow.models import MeetingData


def test_extract_standard_markdown_sections() -> None:
    raw = "## Summary\nFoo bar.\n## Conclusions\n- A\n- B\n## Action Points\n- [ ] C\n## Transcript\nHello world."
    data = extract(raw)
    assert data.summary == "Foo bar."
    assert data.conclusions == ("A", "B")
    assert data.action_items == ("C",)
    assert data.transcription == "Hello world."


@pytest.mark.parametrize("raw", ["", "   \n ", None, "no headers at all, just prose"])
def test_extract_degrades_to_empty(raw) -> None:
    assert extract(raw) == MeetingData.empty()


def test_extract_dutch_headers_with_mixed_markup() -> None:
    raw = "\n".join(
        [
            "**Samenvatting:**",
            "De vergadering ging over **Q3**.",
            "",
            "### 2. Conclusies",
            "1. Eerste punt",
            "2) Tweede punt",
            "",
            "**Actiepunten**",
            "- [x] Jan mailt klant",
            "* [ ] Piet plant demo",
            "",
            "# Transcriptie",
            "Spreker 1: Hallo.",
        ]
    )
    data = extract(raw)
    assert data.summary == "De vergadering ging over Q3."
    assert data.conclusions == ("Eerste punt", "Tweede punt")
    assert data.action_items == ("Jan mailt klant", "Piet plant demo")
    assert data.transcription == "Spreker 1: Hallo."


def test_inline_header_content_is_kept() -> None:
    data = extract("**Summary:** Budget approved.\n**Action items:**\n- Send minutes")
    assert data.summary == "Budget approved."
    assert data.action_items == ("Send minutes",)


def test_plain_inline_header_without_markup() -> None:
    data = extract("Summary: The team agreed on the budget.\nAction items:\n- Send minutes to Ann")
    assert data.summary == "The team agreed on the budget."
    assert data.action_items == ("Send minutes to Ann",)


def test_plain_speaker_lines_are_not_headers() -> None:
    data = extract("## Transcript\nAnn: Summary first?\nBob: Sure.")
    assert data.transcription == "Ann: Summary first?\nBob: Sure."


def test_list_cleaning_drops_noise_and_strips_emphasis() -> None:
    raw = "## Key Insights\n- A\n--\n***\n-\n\n- **Bold** item with _under_ and *star* and `code`\n"
    data = extract(raw)
    assert data.conclusions == ("A", "Bold item with under and star and code")


def test_first_header_wins_and_sections_end_at_next_header() -> None:
    raw = "# Summary\nFirst.\n# Next steps\n- Do it\n# Summary\nSecond."
    data = extract(raw)
    assert data.summary == "First."
    assert data.action_items == ("Do it",)


def test_missing_sections_are_empty() -> None:
    data = extract("## Transcript\nOnly words here.")
    assert data.transcription == "Only words here."
    assert data.summary == ""
    assert data.conclusions == ()
    assert data.action_items == ()


def test_json_result_takes_precedence() -> None:
    raw = (
        "Here you go:\n```json\n"
        '{"summary": "S", "conclusions": [{"point": "P1"}, "P2", ""], '
        '"actionItems": [{"task": "T1", "owner": "Ann"}], "transcription": "Hi",}\n'
        "```"
    )
    data = extract(raw)
    assert data == MeetingData(transcription="Hi", summary="S", conclusions=("P1", "P2"), action_items=("T1",))


def test_json_without_known_keys_falls_back_to_sections() -> None:
    data = extract('{"foo": 1}\n## Summary\nText.')
    assert data.summary == "Text."


def test_smart_unwrap_flattens_nested_values() -> None:
    assert smart_unwrap({"description": "d", "other": 1}) == "d"
    assert smart_unwrap(["a", {"note": "b"}]) == "a\nb"
    assert smart_unwrap({"x": 1}) == '{"x": 1}'
    assert smart_unwrap(None) == ""


def test_clean_list_item() -> None:
    assert clean_list_item("  - [ ] Call Bob ") == "Call Bob"
    assert clean_list_item("12. Numbered") == "Numbered"
    assert clean_list_item("- ") is None
    assert clean_list_item("---") is None


def test_extraction_is_idempotent() -> None:
    raw = "## Summary\nFoo.\n## Conclusions\n- A\n## Action Points\n- B"
    extractor = ResultExtractor()
    assert extractor.extract(raw) == extractor.extract(raw)


def test_custom_section_table_extends_languages() -> None:
    table = (
        SectionSpec(key="summary", synonyms=("resumo",)),
        SectionSpec(key="action_items", synonyms=("próximos passos",)),
    )
    data = ResultExtractor(table).extract("## Resumo\nTexto.\n## Próximos passos\n- Enviar ata")
    assert data.summary == "Texto."
    assert data.action_items == ("Enviar ata",)


def test_extract_never_raises(monkeypatch) -> None:
    def _boom(self, _raw):  # noqa: ANN001
        raise RuntimeError("unexpected")

    monkeypatch.setattr(ResultExtractor, "extract_sections", _boom)
    assert ResultExtractor().extract("## Summary\nx") == MeetingData.empty()
