"""Shared typed data models for booksegmenter.

This package contains dataclasses used across segmentation modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    Book,
    BookMeta,
    Chapter,
    Chunk,
    DetectedChapter,
    OutlineExtraction,
    OutlineSection,
    SegmentationResult,
    SourceDocument,
)

__all__ = [
    "Book",
    "BookMeta",
    "Chapter",
    "Chunk",
    "DetectedChapter",
    "OutlineExtraction",
    "OutlineSection",
    "SegmentationResult",
    "SourceDocument",
]
