"""Input/output stage components for booksegmenter.

This package contains source reading, PDF text and outline extraction, and
artifact storage used by the pipeline.
"""

from .pdf_outline_extractor import PdfOutlineExtractor
from .pdf_text_extractor import PdfExtractionError, PdfTextExtractor
from .source_reader import BookSourceReader, resolve_book_meta
from .storage import ArtifactStore

__all__ = [
    "ArtifactStore",
    "BookSourceReader",
    "PdfExtractionError",
    "PdfOutlineExtractor",
    "PdfTextExtractor",
    "resolve_book_meta",
]
