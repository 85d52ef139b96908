"""Core stage execution helpers for the segmentation pipeline.

Responsibilities:
- Execute deterministic extract/detect/chunk content stages.
- Persist the book document, summary, and optional debug dumps.
- Convert stage failures into `PipelineStageError` diagnostics.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ..config import BookConfig, DebugOptions, SegmentationRequest
from ..errors import PipelineStageError
from ..io.pdf_outline_extractor import PdfOutlineExtractor
from ..io.source_reader import BookSourceReader
from ..io.storage import ArtifactStore
from ..models.datatypes import Book, Chapter, SegmentationResult, SourceDocument
from ..text.chapter_detection import ChapterDetection, ChapterDetector
from ..text.chunking import TextChunker
from .artifacts import (
    book_payload,
    detected_chapters_payload,
    summary_payload,
)


class PipelineExecutionMixin:
    """Provide stage execution methods for the pipeline facade."""

    def _extract(self, input_path: Path) -> SourceDocument:
        """Read raw text and document info from the input file."""

        try:
            return BookSourceReader().read(input_path)
        except PipelineStageError:
            raise
        except Exception as exc:
            raise PipelineStageError(
                stage="extract",
                detail=f"Failed to read book text from `{input_path}`: {exc}",
                hint="Verify the input exists and is a text-based PDF or UTF-8 text file.",
            ) from exc

    def _detect(
        self,
        text: str,
        config: BookConfig,
        debug: DebugOptions,
        source_path: Path | None = None,
    ) -> ChapterDetection:
        """Detect chapters, trying the PDF outline first for PDF sources."""

        try:
            detector = ChapterDetector(config, debug)
            if source_path is None or source_path.suffix.lower() != ".pdf":
                return detector.detect(text)
            extraction = PdfOutlineExtractor().extract(source_path)
            detection = detector.detect(text, extraction.sections)
            return replace(detection, outline_status=extraction.status)
        except PipelineStageError:
            raise
        except Exception as exc:
            raise PipelineStageError(
                stage="detect",
                detail=f"Failed to detect chapters: {exc}",
                hint=(
                    "Check `chapter_patterns` and `exclude_patterns` in the book config "
                    "and the PDF bookmarks."
                ),
            ) from exc

    def _chunk(self, detection: ChapterDetection, config: BookConfig) -> tuple[Chapter, ...]:
        """Chunk every detected chapter; empty chapters keep an empty chunk list."""

        try:
            chunker = TextChunker(config.chunking)
            return tuple(
                Chapter(
                    chapter_number=detected.chapter_number,
                    title=detected.title,
                    chunks=tuple(chunker.chunk(detected.text)),
                )
                for detected in detection.chapters
            )
        except PipelineStageError:
            raise
        except Exception as exc:
            raise PipelineStageError(
                stage="chunk",
                detail=f"Failed to chunk chapters: {exc}",
                hint="Verify `min_words` and `max_words` are positive and ordered.",
            ) from exc

    def _write(
        self,
        request: SegmentationRequest,
        book: Book,
        document: SourceDocument,
        detection: ChapterDetection,
    ) -> SegmentationResult:
        """Write the book document, summary, and requested debug dumps."""

        output_path = request.resolved_output_path()
        try:
            store = ArtifactStore(output_path.parent)
            written_output = store.save_json(
                Path(output_path.name),
                book_payload(
                    book,
                    request.config.chunking,
                    include_word_offsets=request.include_word_offsets,
                ),
            )
            summary_path = store.save_json(Path("summary.json"), summary_payload(book))
            debug_paths = self._write_debug_dumps(request, book, document, detection)
        except OSError as exc:
            raise PipelineStageError(
                stage="write",
                detail=f"Failed to write output artifacts to `{output_path.parent}`: {exc}",
                hint="Verify the output directory is writable.",
            ) from exc

        return SegmentationResult(
            book=book,
            output_path=written_output,
            summary_path=summary_path,
            debug_paths=debug_paths,
        )

    def _write_debug_dumps(
        self,
        request: SegmentationRequest,
        book: Book,
        document: SourceDocument,
        detection: ChapterDetection,
    ) -> tuple[Path, ...]:
        """Write intermediate artifacts when a dump directory is configured."""

        dump_dir = request.debug.dump_dir
        if dump_dir is None:
            return ()

        store = ArtifactStore(dump_dir)
        return (
            store.save_text(Path("raw-text.txt"), document.text),
            store.save_json(
                Path("detected-chapters.json"),
                detected_chapters_payload(detection.chapters, detection.source),
            ),
            store.save_json(
                Path("chapters-with-chunks.json"),
                book_payload(book, request.config.chunking, include_word_offsets=True),
            ),
        )
