"""Command-line interface for booksegmenter.

Responsibilities:
- Expose user-facing commands for segmentation, chapter listing, and chunking.
- Convert CLI arguments into `BookConfig` overrides and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_book_summary,
    echo_chapter_list,
    echo_chapter_source,
    echo_chunk_rows,
    exit_with_command_error,
)
from .config import (
    BookConfig,
    ConfigLoader,
    DebugOptions,
    SegmentationRequest,
    SentenceStrategy,
)
from .errors import PipelineStageError
from .io.source_reader import BookSourceReader
from .pipeline import BookSegmenterPipeline
from .telemetry.logger import RunLogger
from .text.chunking import TextChunker

app = typer.Typer(
    name="booksegmenter",
    no_args_is_help=True,
    help="Split books into chapters of sentence-aligned chunks.",
)

MinWordsOption = Annotated[
    int | None,
    typer.Option("--min-words", help="Finalize a chunk once it holds this many words."),
]
MaxWordsOption = Annotated[
    int | None,
    typer.Option("--max-words", help="Start a new chunk before exceeding this many words."),
]
StrategyOption = Annotated[
    SentenceStrategy | None,
    typer.Option("--strategy", case_sensitive=False, help="Sentence splitting strategy."),
]


class StageProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _load_book_config(config_path: Path | None) -> BookConfig:
    """Load a JSON or YAML book config when requested and map failures to stage errors."""

    if config_path is None:
        return BookConfig()

    try:
        return ConfigLoader.from_file(config_path)
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _apply_chunking_overrides(
    config: BookConfig,
    min_words: int | None,
    max_words: int | None,
    strategy: SentenceStrategy | None,
) -> BookConfig:
    """Apply explicit CLI chunking options over file values."""

    try:
        return config.with_chunking(
            min_words=min_words,
            max_words=max_words,
            sentence_strategy=strategy,
        )
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid chunking options: {exc}",
            hint="Use positive `--min-words`/`--max-words` with min not above max.",
        ) from exc


@app.command("parse")
def parse_command(
    input_path: Annotated[Path, typer.Argument(help="Path to source PDF or text file.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to a JSON or YAML book config."),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option(
            "--out",
            help="Output JSON path (default: `<input stem>.segmented.json` beside the input).",
        ),
    ] = None,
    min_words: MinWordsOption = None,
    max_words: MaxWordsOption = None,
    strategy: StrategyOption = None,
    word_offsets: Annotated[
        bool,
        typer.Option("--word-offsets", help="Include chunk `startIndex`/`endIndex` offsets."),
    ] = False,
    trace: Annotated[
        bool,
        typer.Option("--trace", help="Log chapter detection decisions."),
    ] = False,
    debug_dir: Annotated[
        Path | None,
        typer.Option("--debug-dir", help="Directory for intermediate debug dumps."),
    ] = None,
) -> None:
    """Segment a book into chapters and chunks and write the JSON document."""

    try:
        config = _apply_chunking_overrides(
            _load_book_config(config_file), min_words, max_words, strategy
        )
        request = SegmentationRequest(
            input_path=input_path,
            output_path=out,
            config=config,
            include_word_offsets=word_offsets,
            debug=DebugOptions(trace_detection=trace, dump_dir=debug_dir),
        )
        progress = StageProgressIndicator(command_name="parse")
        pipeline = BookSegmenterPipeline(
            run_logger=RunLogger(verbose=trace),
            stage_progress_callback=progress.on_stage_start,
        )
        result = pipeline.run(request)
    except Exception as exc:
        exit_with_command_error("parse", exc)

    echo_book_summary(result.book)
    typer.echo(f"Output: {result.output_path}")
    typer.echo(f"Summary: {result.summary_path}")
    for debug_path in result.debug_paths:
        typer.echo(f"Debug artifact: {debug_path}")


@app.command("chapters")
def chapters_command(
    input_path: Annotated[Path, typer.Argument(help="Path to source PDF or text file.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to a JSON or YAML book config."),
    ] = None,
) -> None:
    """List detected chapter numbers, titles, and content line counts."""

    try:
        config = _load_book_config(config_file)
        detection = BookSegmenterPipeline().detect_chapters(input_path, config)
    except Exception as exc:
        exit_with_command_error("chapters", exc)

    echo_chapter_source(detection.source)
    echo_chapter_list(detection.chapters)


@app.command("chunk")
def chunk_command(
    input_path: Annotated[
        Path, typer.Argument(help="Path to a UTF-8 text file or text-based PDF.")
    ],
    min_words: MinWordsOption = None,
    max_words: MaxWordsOption = None,
    strategy: StrategyOption = None,
) -> None:
    """Chunk a whole text or PDF file as one chapter and print the chunks."""

    try:
        config = _apply_chunking_overrides(BookConfig(), min_words, max_words, strategy)
        text = _read_text_input(input_path)
        chunks = TextChunker(config.chunking).chunk(text)
    except Exception as exc:
        exit_with_command_error("chunk", exc)

    echo_chunk_rows(chunks)


def _read_text_input(input_path: Path) -> str:
    """Read a text input for the `chunk` command as a stage-scoped operation."""

    try:
        return BookSourceReader().read(input_path).text
    except Exception as exc:
        raise PipelineStageError(
            stage="extract",
            detail=f"Failed to read text from `{input_path}`: {exc}",
            hint="Provide an existing UTF-8 text file or text-based PDF.",
        ) from exc


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
