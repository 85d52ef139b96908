"""Shared pytest fixtures for the booksegmenter test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

_PROSE_LINES = (
    "The morning light crept slowly over the quiet hills and valleys.",
    "Farmers walked out into the fields before the first bell rang.",
    "Nobody in the village expected the letter that arrived that day.",
    "It was sealed with red wax and addressed in a careful hand.",
    "The old postmaster carried it himself to the house by the river.",
)


def prose_block(count: int = 5) -> list[str]:
    """Return `count` substantial prose lines without heading-like shapes."""

    return [_PROSE_LINES[index % len(_PROSE_LINES)] for index in range(count)]


@pytest.fixture
def named_chapter_book_text() -> str:
    """Book text with a table of contents followed by the real chapters."""

    lines = [
        "Contents",
        "Intro 1",
        "Body 12",
        "Conclusion 40",
        "Intro",
        *prose_block(),
        "Body",
        *prose_block(6),
        "Conclusion",
        *prose_block(5),
    ]
    return "\n".join(lines)


@pytest.fixture
def heading_book_text() -> str:
    """Book text with front matter, numbered chapter headings, and back matter."""

    lines = [
        "Copyright 2020 by the Author.",
        "Printed in the forest of books.",
        "Chapter 1: The Beginning",
        *prose_block(),
        "Chapter 2: The Middle Years",
        *prose_block(),
        "Bibliography",
        "Smith, J. (2001) A Study of Everything.",
    ]
    return "\n".join(lines)


@pytest.fixture
def prose():
    """Provide the prose line builder used to fill chapters with content."""

    return prose_block


@pytest.fixture
def write_text(tmp_path: Path):
    """Write UTF-8 text under `tmp_path` and return the file path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
