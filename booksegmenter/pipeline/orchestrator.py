"""Pipeline orchestration for booksegmenter.

Responsibilities:
- Define the stage order for the book segmentation flow.
- Coordinate stage outputs into a `Book` and its written artifacts.

Key types:
- `BookSegmenterPipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ..config import BookConfig, DebugOptions, SegmentationRequest
from ..errors import PipelineStageError
from ..io.source_reader import resolve_book_meta
from ..models.datatypes import Book, BookMeta, SegmentationResult
from ..telemetry.logger import RunLogger
from ..text.chapter_detection import ChapterDetection
from .execution import PipelineExecutionMixin
from .telemetry import PipelineTelemetryMixin


class BookSegmenterPipeline(PipelineExecutionMixin, PipelineTelemetryMixin):
    """Coordinate all stages for a single segmentation run."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> None:
        """Initialize optional runtime logging and progress reporting hooks."""

        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback

    def segment_text(
        self,
        text: str,
        config: BookConfig | None = None,
        meta: BookMeta | None = None,
        debug: DebugOptions | None = None,
    ) -> Book:
        """Detect chapters in `text` and chunk each one into a `Book`."""

        resolved_config = self._validated_config(config)
        resolved_meta = meta or BookMeta(title="Untitled", author="Unknown")
        detection = self._detect_stage(text, resolved_config, debug or DebugOptions())
        return self._chunk_stage(detection, resolved_config, resolved_meta)

    def detect_chapters(
        self,
        input_path: Path,
        config: BookConfig | None = None,
        debug: DebugOptions | None = None,
    ) -> ChapterDetection:
        """Read a book file and detect chapters without chunking or writing."""

        resolved_config = self._validated_config(config)
        document = self._run_stage(
            "extract",
            lambda: self._extract(input_path),
            lambda document: {"chars": len(document.text)},
        )
        return self._detect_stage(
            document.text,
            resolved_config,
            debug or DebugOptions(),
            document.source_path,
        )

    def run(self, request: SegmentationRequest) -> SegmentationResult:
        """Run the full pipeline and return the book with its artifact paths."""

        config = self._validated_config(request.config)
        document = self._run_stage(
            "extract",
            lambda: self._extract(request.input_path),
            lambda document: {"chars": len(document.text)},
        )
        meta = resolve_book_meta(document, config.metadata)
        detection = self._detect_stage(
            document.text, config, request.debug, document.source_path
        )
        book = self._chunk_stage(detection, config, meta)
        return self._run_stage(
            "write",
            lambda: self._write(request, book, document, detection),
            lambda result: {"output": result.output_path},
        )

    def _detect_stage(
        self,
        text: str,
        config: BookConfig,
        debug: DebugOptions,
        source_path: Path | None = None,
    ) -> ChapterDetection:
        return self._run_stage(
            "detect",
            lambda: self._detect(text, config, debug, source_path),
            self._detection_context,
        )

    @staticmethod
    def _detection_context(detection: ChapterDetection) -> dict[str, object]:
        context: dict[str, object] = {
            "chapters": len(detection.chapters),
            "source": detection.source,
        }
        if detection.outline_status is not None:
            context["outline"] = detection.outline_status
        return context

    def _chunk_stage(
        self,
        detection: ChapterDetection,
        config: BookConfig,
        meta: BookMeta,
    ) -> Book:
        chapters = self._run_stage(
            "chunk",
            lambda: self._chunk(detection, config),
            lambda chapters: {"chunks": sum(len(chapter.chunks) for chapter in chapters)},
        )
        return Book(meta=meta, chapters=chapters, chapter_source=detection.source)

    @staticmethod
    def _validated_config(config: BookConfig | None) -> BookConfig:
        """Return a validated config, mapping rejection to a `config` stage error."""

        resolved = config or BookConfig()
        try:
            resolved.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Invalid book configuration: {exc}",
                hint="Fix config values and rerun.",
            ) from exc
        return resolved
