"""PDF outline section extraction helpers.

Responsibilities:
- Read first-level PDF outline/bookmark entries when available.
- Convert outline page ranges into ordered text sections.
- Return explicit extraction status so detection fallback stays observable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import Destination

from ..models.datatypes import OutlineExtraction, OutlineSection
from .pdf_text_extractor import PdfTextExtractor

OUTLINE_FOUND = "pdf_outline"
OUTLINE_MISSING = "outline_missing"
OUTLINE_INVALID = "outline_invalid"


@dataclass(frozen=True, slots=True)
class _OutlineEntry:
    """Internal representation of a first-level outline entry."""

    title: str
    page_index: int


class PdfOutlineExtractor:
    """Extract chapter sections from first-level PDF outline entries."""

    # Bookmarks pointing at the table of contents are never chapters.
    _SKIPPED_TITLES = frozenset({"contents", "table of contents"})

    def __init__(self, text_extractor: PdfTextExtractor | None = None) -> None:
        """Initialize with an optional custom PDF text extractor."""

        self._text_extractor = text_extractor or PdfTextExtractor()

    def extract(self, pdf_path: Path) -> OutlineExtraction:
        """Extract sections from PDF outline/bookmarks if available.

        Status values:
        - `pdf_outline`: extraction succeeded and returned sections.
        - `outline_missing`: no usable first-level outline entries were found.
        - `outline_invalid`: outline entries existed but could not form page ranges.
        """

        reader = self._text_extractor.open_reader(pdf_path)
        try:
            entries = self._read_first_level_entries(reader)
        except PdfReadError:
            return OutlineExtraction(sections=(), status=OUTLINE_INVALID)

        entries = self._normalize_entries(entries)
        if not entries:
            return OutlineExtraction(sections=(), status=OUTLINE_MISSING)

        pages = self._text_extractor.page_texts(reader)
        sections = self._sections_from_entries(entries, pages)
        if not sections:
            return OutlineExtraction(sections=(), status=OUTLINE_INVALID)
        return OutlineExtraction(sections=sections, status=OUTLINE_FOUND)

    def _read_first_level_entries(self, reader: PdfReader) -> list[_OutlineEntry]:
        """Read first-level outline entries, ignoring nested subsections."""

        entries: list[_OutlineEntry] = []
        for item in reader.outline or []:
            # Nested lists hold subsections of the preceding entry.
            if not isinstance(item, Destination):
                continue
            title = self._normalize_title(item.title)
            if not title or title.lower() in self._SKIPPED_TITLES:
                continue
            page_index = reader.get_destination_page_number(item)
            if page_index is None:
                continue
            entries.append(_OutlineEntry(title=title, page_index=page_index))
        return entries

    def _normalize_entries(self, entries: list[_OutlineEntry]) -> list[_OutlineEntry]:
        """Drop invalid and non-increasing page entries to keep boundaries stable."""

        normalized: list[_OutlineEntry] = []
        last_page = -1
        for entry in entries:
            if entry.page_index < 0 or entry.page_index <= last_page:
                continue
            normalized.append(entry)
            last_page = entry.page_index
        return normalized

    def _sections_from_entries(
        self, entries: list[_OutlineEntry], pages: list[str]
    ) -> tuple[OutlineSection, ...]:
        """Slice page text between outline boundaries."""

        sections: list[OutlineSection] = []
        page_count = len(pages)
        for position, entry in enumerate(entries):
            if entry.page_index >= page_count:
                continue

            next_page = page_count
            if position + 1 < len(entries):
                next_page = min(page_count, entries[position + 1].page_index)

            lines = tuple(
                line.strip()
                for page in pages[entry.page_index:next_page]
                for line in page.splitlines()
                if line.strip()
            )
            sections.append(
                OutlineSection(
                    title=entry.title,
                    start_page=entry.page_index,
                    end_page=next_page,
                    lines=lines,
                )
            )
        return tuple(sections)

    @staticmethod
    def _normalize_title(value: object) -> str:
        """Normalize outline title into single-line whitespace-collapsed text."""

        return " ".join(str(value).split())
