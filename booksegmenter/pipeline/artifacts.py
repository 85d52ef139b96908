"""Serialization helpers for segmentation output artifacts.

Responsibilities:
- Build the book JSON document consumed by persistence and upload tooling.
- Build the summary and debug payloads written next to it.
"""

from __future__ import annotations

from typing import Any

from .. import __version__
from ..config import ChunkingSettings
from ..models.datatypes import Book, Chapter, Chunk, DetectedChapter

_PREVIEW_CHARS = 500


def chunk_payload(chunk: Chunk, include_word_offsets: bool = False) -> dict[str, Any]:
    """Serialize one chunk."""

    payload: dict[str, Any] = {
        "index": chunk.index,
        "text": chunk.text,
        "wordCount": chunk.word_count,
        "type": chunk.type,
    }
    if include_word_offsets:
        payload["startIndex"] = chunk.start_index
        payload["endIndex"] = chunk.end_index
    return payload


def chapter_payload(chapter: Chapter, include_word_offsets: bool = False) -> dict[str, Any]:
    """Serialize one chunked chapter."""

    return {
        "chapterNumber": chapter.chapter_number,
        "title": chapter.title,
        "content": {
            "chunks": [
                chunk_payload(chunk, include_word_offsets) for chunk in chapter.chunks
            ]
        },
        "wordCount": chapter.word_count,
    }


def book_payload(
    book: Book,
    settings: ChunkingSettings,
    include_word_offsets: bool = False,
) -> dict[str, Any]:
    """Serialize a segmented book into the downstream JSON document."""

    source_file = book.meta.source_path.name if book.meta.source_path is not None else None
    return {
        "book": {
            "title": book.meta.title,
            "author": book.meta.author,
            "totalChapters": book.total_chapters,
            "totalWords": book.total_words,
            "totalChunks": book.total_chunks,
            "chapterSource": book.chapter_source,
        },
        "chapters": [
            chapter_payload(chapter, include_word_offsets) for chapter in book.chapters
        ],
        "metadata": {
            "generator": "booksegmenter",
            "version": __version__,
            "sentenceStrategy": settings.sentence_strategy.value,
            "minWords": settings.min_words,
            "maxWords": settings.max_words,
            "sourceFile": source_file,
        },
    }


def summary_payload(book: Book) -> dict[str, Any]:
    """Summarize totals and per-chapter counts for a segmented book."""

    total_chunks = book.total_chunks
    return {
        "book": {"title": book.meta.title, "author": book.meta.author},
        "processing": {
            "chapterSource": book.chapter_source,
            "totalChapters": book.total_chapters,
            "totalChunks": total_chunks,
            "totalWords": book.total_words,
            "avgWordsPerChapter": (
                round(book.total_words / book.total_chapters) if book.total_chapters else 0
            ),
            "avgWordsPerChunk": (
                round(book.total_words / total_chunks, 2) if total_chunks else 0
            ),
        },
        "chapters": [
            {
                "chapterNumber": chapter.chapter_number,
                "title": chapter.title,
                "wordCount": chapter.word_count,
                "chunkCount": len(chapter.chunks),
            }
            for chapter in book.chapters
        ],
    }


def detected_chapters_payload(
    chapters: tuple[DetectedChapter, ...], source: str
) -> dict[str, Any]:
    """Describe detected chapter boundaries for debug dumps."""

    return {
        "source": source,
        "chapters": [
            {
                "chapterNumber": chapter.chapter_number,
                "title": chapter.title,
                "headingLine": chapter.heading_line,
                "startPage": chapter.start_page,
                "endPage": chapter.end_page,
                "contentLines": len(chapter.content_lines),
                "contentPreview": chapter.text[:_PREVIEW_CHARS],
            }
            for chapter in chapters
        ],
    }
