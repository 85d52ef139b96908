"""Core datatypes shared across booksegmenter modules.

Responsibilities:
- Represent immutable records exchanged between segmentation stages.
- Provide explicit typing for deterministic JSON serialization.

Key types:
- `Chunk`, `DetectedChapter`, `Chapter`, `BookMeta`, `Book`,
  `SourceDocument`, `OutlineSection`, `OutlineExtraction`, and
  `SegmentationResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Chunk:
    """A sentence-aligned, word-bounded text segment of one chapter.

    Attributes:
        index: 0-based chunk index within chapter.
        text: Chunk text content.
        words: Whitespace-split word tokens of `text`.
        start_index: Inclusive word offset of the first word in the chapter.
        end_index: Inclusive word offset of the last word in the chapter.
        type: Chunk kind; always `text` for segmented prose.
    """

    index: int
    text: str
    words: tuple[str, ...]
    start_index: int
    end_index: int
    type: str = "text"

    @property
    def word_count(self) -> int:
        """Return number of word tokens in the chunk."""

        return len(self.words)


@dataclass(frozen=True, slots=True)
class DetectedChapter:
    """A chapter boundary found in raw book text, before chunking.

    Attributes:
        chapter_number: 1-based chapter number in detection order.
        title: Configured or heuristically derived chapter title.
        content_lines: Ordered content lines belonging to the chapter.
        heading_line: 0-based line index of the heading, or `None` for
            implicit, fallback, and outline chapters.
        start_page: 1-based first page for outline chapters.
        end_page: 1-based last page (inclusive) for outline chapters.
    """

    chapter_number: int
    title: str
    content_lines: tuple[str, ...]
    heading_line: int | None = None
    start_page: int | None = None
    end_page: int | None = None

    @property
    def text(self) -> str:
        """Return chapter content joined into one string."""

        return " ".join(self.content_lines)


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chunked chapter ready for serialization."""

    chapter_number: int
    title: str
    chunks: tuple[Chunk, ...]

    @property
    def word_count(self) -> int:
        """Return the sum of chunk word counts."""

        return sum(chunk.word_count for chunk in self.chunks)


@dataclass(frozen=True, slots=True)
class BookMeta:
    """Metadata describing the source book.

    Attributes:
        title: Human-readable title.
        author: Author name, `Unknown` when not available.
        source_path: Path to the input file, when known.
    """

    title: str
    author: str
    source_path: Path | None = None


@dataclass(frozen=True, slots=True)
class Book:
    """Aggregate output of one segmentation run."""

    meta: BookMeta
    chapters: tuple[Chapter, ...]
    chapter_source: str

    @property
    def total_chapters(self) -> int:
        """Return number of chapters."""

        return len(self.chapters)

    @property
    def total_words(self) -> int:
        """Return total word count across all chapters."""

        return sum(chapter.word_count for chapter in self.chapters)

    @property
    def total_chunks(self) -> int:
        """Return total chunk count across all chapters."""

        return sum(len(chapter.chunks) for chapter in self.chapters)


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw text read from a source file plus embedded document metadata."""

    source_path: Path
    text: str
    title: str | None = None
    author: str | None = None
    page_count: int | None = None


@dataclass(frozen=True, slots=True)
class OutlineSection:
    """Text under one first-level PDF bookmark.

    Attributes:
        title: Whitespace-collapsed bookmark title.
        start_page: 0-based page the bookmark points to.
        end_page: 0-based page (exclusive) where the next bookmark starts.
        lines: Trimmed non-empty text lines of the covered pages.
    """

    title: str
    start_page: int
    end_page: int
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class OutlineExtraction:
    """Result of reading chapter sections from a PDF outline.

    `status` is `pdf_outline` when sections were found, otherwise the
    reason they were not: `outline_missing` or `outline_invalid`.
    """

    sections: tuple[OutlineSection, ...]
    status: str


@dataclass(frozen=True, slots=True)
class SegmentationResult:
    """Outputs of one full segmentation run.

    Attributes:
        book: Segmented book.
        output_path: Written book JSON document.
        summary_path: Written `summary.json` next to the output.
        debug_paths: Debug dump files, empty when dumps are disabled.
    """

    book: Book
    output_path: Path
    summary_path: Path
    debug_paths: tuple[Path, ...] = ()
