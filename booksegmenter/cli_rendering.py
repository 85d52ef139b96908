"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
book totals, chapter listing rows, and chunk rows.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import Book, Chunk, DetectedChapter


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_book_summary(book: Book) -> None:
    """Print book metadata and segmentation totals."""

    typer.echo(f"Title: {book.meta.title}")
    typer.echo(f"Author: {book.meta.author}")
    typer.echo(f"Chapter source: {book.chapter_source}")
    typer.echo(f"Chapters: {book.total_chapters}")
    typer.echo(f"Chunks: {book.total_chunks}")
    typer.echo(f"Words: {book.total_words}")


def echo_chapter_source(source: str) -> None:
    """Print which detection path produced the chapters."""

    typer.echo(f"Chapter source: {source}")


def echo_chapter_list(chapters: tuple[DetectedChapter, ...]) -> None:
    """Print compact deterministic chapter number/title rows."""

    for chapter in chapters:
        typer.echo(
            f"{chapter.chapter_number}. {chapter.title} "
            f"({len(chapter.content_lines)} lines)"
        )


def echo_chunk_rows(chunks: list[Chunk]) -> None:
    """Print one `index [wordCount] text` row per chunk."""

    for chunk in chunks:
        typer.echo(f"{chunk.index} [{chunk.word_count}] {chunk.text}")
