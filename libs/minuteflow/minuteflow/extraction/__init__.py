"""Result extraction from model output."""

from minuteflow.extraction.extractor import ResultExtractor, clean_list_item, extract, strip_emphasis
from minuteflow.extraction.sections import SECTION_TABLE, SectionSpec
from minuteflow.extraction.structured import extract_structured, smart_unwrap

__all__ = [
    "ResultExtractor",
    "SECTION_TABLE",
    "SectionSpec",
    "clean_list_item",
    "extract",
    "extract_structured",
    "smart_unwrap",
    "strip_emphasis",
]
