"""Source book reading and metadata resolution.

Responsibilities:
- Read PDF or plain-text books into a `SourceDocument`.
- Resolve title/author with config overrides taking precedence.
"""

from __future__ import annotations

from pathlib import Path
import re

from ..config import MetadataOverrides
from ..errors import SourceReadError
from ..models.datatypes import BookMeta, SourceDocument
from .pdf_text_extractor import PdfTextExtractor

UNKNOWN_AUTHOR = "Unknown"


class BookSourceReader:
    """Read a book file by extension."""

    def __init__(self, pdf_extractor: PdfTextExtractor | None = None) -> None:
        """Initialize with an optional custom PDF extractor."""

        self._pdf_extractor = pdf_extractor or PdfTextExtractor()

    def read(self, path: Path) -> SourceDocument:
        """Read `path` as PDF when it has a `.pdf` suffix, as UTF-8 text otherwise."""

        if not path.exists():
            raise SourceReadError(f"Input file not found: {path}")
        if not path.is_file():
            raise SourceReadError(f"Input path is not a file: {path}")

        if path.suffix.lower() == ".pdf":
            return self._pdf_extractor.extract(path)

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SourceReadError(f"Input file is not valid UTF-8 text: {path}") from exc
        return SourceDocument(source_path=path, text=text)


def title_from_filename(path: Path) -> str:
    """Derive a readable title from a file name.

    `nick-lane__the_vital-question.pdf` becomes `Nick Lane: The Vital Question`.
    """

    parts = [part for part in path.stem.split("__") if part]
    titled = [
        " ".join(word.capitalize() for word in re.split(r"[-_\s]+", part) if word)
        for part in parts
    ]
    return ": ".join(part for part in titled if part) or path.stem


def resolve_book_meta(document: SourceDocument, overrides: MetadataOverrides) -> BookMeta:
    """Resolve book metadata: config overrides, then document info, then defaults."""

    title = overrides.title or document.title or title_from_filename(document.source_path)
    author = overrides.author or document.author or UNKNOWN_AUTHOR
    return BookMeta(title=title, author=author, source_path=document.source_path)
