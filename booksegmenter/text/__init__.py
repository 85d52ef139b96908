"""Text segmentation components.

This package provides sentence splitting, chunk assembly and merging, and
chapter detection over raw extracted book text.
"""

from .chapter_detection import ChapterDetection, ChapterDetector
from .chunking import ChunkAssembler, ChunkMerger, TextChunker
from .matching import fuzzy_match, normalize_title
from .sentences import SentenceSplitter

__all__ = [
    "ChapterDetection",
    "ChapterDetector",
    "ChunkAssembler",
    "ChunkMerger",
    "SentenceSplitter",
    "TextChunker",
    "fuzzy_match",
    "normalize_title",
]
