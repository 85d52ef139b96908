"""Unit tests for source reading, PDF extraction errors, and metadata resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfWriter

from booksegmenter.config import MetadataOverrides
from booksegmenter.errors import SourceReadError
from booksegmenter.io.pdf_text_extractor import PdfExtractionError, PdfTextExtractor
from booksegmenter.io.source_reader import (
    UNKNOWN_AUTHOR,
    BookSourceReader,
    resolve_book_meta,
    title_from_filename,
)
from booksegmenter.io.storage import ArtifactStore
from booksegmenter.models.datatypes import SourceDocument


def _write_blank_pdf(path: Path) -> Path:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Title": "Embedded Title", "/Author": "Embedded Author"})
    with path.open("wb") as handle:
        writer.write(handle)
    return path


def test_reader_loads_utf8_text_files(tmp_path: Path) -> None:
    """Non-PDF inputs are read as UTF-8 text without embedded metadata."""

    path = tmp_path / "book.txt"
    path.write_text("Příliš žluťoučký kůň.\nSecond line.", encoding="utf-8")

    document = BookSourceReader().read(path)

    assert document.text == "Příliš žluťoučký kůň.\nSecond line."
    assert document.source_path == path
    assert document.title is None
    assert document.author is None


def test_reader_rejects_missing_and_non_utf8_inputs(tmp_path: Path) -> None:
    """Missing files, directories, and undecodable bytes raise `SourceReadError`."""

    binary = tmp_path / "book.txt"
    binary.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(SourceReadError, match="not found"):
        BookSourceReader().read(tmp_path / "missing.txt")
    with pytest.raises(SourceReadError, match="not a file"):
        BookSourceReader().read(tmp_path)
    with pytest.raises(SourceReadError, match="UTF-8"):
        BookSourceReader().read(binary)


def test_reader_routes_pdf_suffix_to_extractor(tmp_path: Path) -> None:
    """`.pdf` inputs are handed to the PDF extractor."""

    path = tmp_path / "Book.PDF"
    path.write_bytes(b"%PDF-placeholder")
    calls: list[Path] = []

    class _RecordingExtractor(PdfTextExtractor):
        def extract(self, pdf_path: Path) -> SourceDocument:
            calls.append(pdf_path)
            return SourceDocument(source_path=pdf_path, text="text", title="T")

    document = BookSourceReader(pdf_extractor=_RecordingExtractor()).read(path)

    assert calls == [path]
    assert document.title == "T"


def test_pdf_extractor_rejects_pdf_without_text(tmp_path: Path) -> None:
    """Image-only or blank PDFs are rejected with a clear error."""

    path = _write_blank_pdf(tmp_path / "blank.pdf")

    with pytest.raises(PdfExtractionError, match="No extractable text"):
        PdfTextExtractor().extract(path)


def test_pdf_extractor_rejects_missing_and_corrupt_files(tmp_path: Path) -> None:
    """Missing and unreadable PDFs raise `PdfExtractionError`."""

    corrupt = tmp_path / "corrupt.pdf"
    corrupt.write_bytes(b"this is not a pdf")

    with pytest.raises(PdfExtractionError, match="not found"):
        PdfTextExtractor().extract(tmp_path / "missing.pdf")
    with pytest.raises(PdfExtractionError):
        PdfTextExtractor().extract(corrupt)


def test_title_from_filename_formats_author_and_title_parts() -> None:
    """File names become readable titles."""

    assert title_from_filename(Path("nick-lane__the_vital-question.pdf")) == (
        "Nick Lane: The Vital Question"
    )
    assert title_from_filename(Path("notes.txt")) == "Notes"


def test_resolve_book_meta_prefers_overrides_then_document_then_defaults() -> None:
    """Config overrides beat embedded info, which beats filename-derived defaults."""

    document = SourceDocument(
        source_path=Path("the-book.pdf"),
        text="text",
        title="Embedded Title",
        author="Embedded Author",
    )
    bare = SourceDocument(source_path=Path("the-book.txt"), text="text")

    overridden = resolve_book_meta(document, MetadataOverrides(title="Configured"))
    embedded = resolve_book_meta(document, MetadataOverrides())
    derived = resolve_book_meta(bare, MetadataOverrides())

    assert (overridden.title, overridden.author) == ("Configured", "Embedded Author")
    assert (embedded.title, embedded.author) == ("Embedded Title", "Embedded Author")
    assert (derived.title, derived.author) == ("The Book", UNKNOWN_AUTHOR)
    assert derived.source_path == Path("the-book.txt")


def test_artifact_store_writes_text_and_unicode_json(tmp_path: Path) -> None:
    """Artifacts are written under the store root with nested directories created."""

    store = ArtifactStore(tmp_path / "artifacts")

    text_path = store.save_text(Path("debug/raw-text.txt"), "hello")
    json_path = store.save_json(Path("book.json"), {"title": "Kůň", "b": 1, "a": 2})

    assert text_path.read_text(encoding="utf-8") == "hello"
    assert '"title": "Kůň"' in json_path.read_text(encoding="utf-8")
    assert json_path.read_text(encoding="utf-8").index('"b"') < json_path.read_text(
        encoding="utf-8"
    ).index('"a"')
