"""Domain exceptions for segmentation, pipeline, and CLI diagnostics."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Raised when book or chunking configuration values are rejected."""


class SourceReadError(RuntimeError):
    """Raised when a source book file cannot be read."""


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
