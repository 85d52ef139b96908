"""Top-level package for booksegmenter.

This package turns raw book text into chapters of sentence-aligned chunks for
narration and downstream storage. The main orchestration entry point is
`BookSegmenterPipeline`.
"""

__version__ = "0.1.0"

from .pipeline import BookSegmenterPipeline  # noqa: E402

__all__ = ["BookSegmenterPipeline", "__version__"]
