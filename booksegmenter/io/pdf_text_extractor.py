"""PDF text extraction.

Responsibilities:
- Extract plain text from text-based PDFs, joining pages with newlines.
- Expose embedded document info (title, author) for book metadata.
"""

from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..models.datatypes import SourceDocument
from ..parsing import normalize_optional_string


class PdfExtractionError(RuntimeError):
    """Raised when text extraction from PDF cannot be completed."""


class PdfTextExtractor:
    """Extractor for text-based PDFs using `pypdf`."""

    def extract(self, pdf_path: Path) -> SourceDocument:
        """Extract all text and document info from a PDF file."""

        reader = self.open_reader(pdf_path)
        pages = self.page_texts(reader)
        text = "\n".join(pages).strip()
        if not text:
            raise PdfExtractionError(
                f"No extractable text found in PDF: {pdf_path}. "
                "Only text-based PDFs are supported."
            )

        info = reader.metadata
        return SourceDocument(
            source_path=pdf_path,
            text=text,
            title=normalize_optional_string(info.title) if info is not None else None,
            author=normalize_optional_string(info.author) if info is not None else None,
            page_count=len(pages),
        )

    def open_reader(self, pdf_path: Path) -> PdfReader:
        """Open `pdf_path` with `pypdf`, mapping read failures to `PdfExtractionError`."""

        if not pdf_path.exists():
            raise PdfExtractionError(f"Input PDF not found: {pdf_path}")
        try:
            return PdfReader(str(pdf_path))
        except PdfReadError as exc:
            raise PdfExtractionError(f"pypdf could not read {pdf_path}: {exc}") from exc

    @staticmethod
    def page_texts(reader: PdfReader) -> list[str]:
        """Return trimmed text for every page, in page order."""

        pages: list[str] = []
        for page in reader.pages:
            extracted_text = page.extract_text()
            pages.append((extracted_text or "").replace("\f", "\n").strip())
        return pages
