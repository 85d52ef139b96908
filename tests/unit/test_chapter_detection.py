"""Unit tests for chapter detection by names, heading patterns, and fallback."""

from __future__ import annotations

from collections.abc import Callable
import io

from loguru import logger

from booksegmenter.config import BookConfig, DebugOptions
from booksegmenter.text.chapter_detection import (
    SOURCE_CHAPTER_NAMES,
    SOURCE_FULL_TEXT_FALLBACK,
    SOURCE_HEADING_PATTERNS,
    ChapterDetector,
)

ProseFactory = Callable[..., list[str]]


def test_named_chapters_skip_table_of_contents_entries(named_chapter_book_text: str) -> None:
    """The occurrence followed by real content wins over the contents entry."""

    config = BookConfig(chapter_names=("Intro", "Body", "Conclusion"))

    detection = ChapterDetector(config).detect(named_chapter_book_text)

    assert detection.source == SOURCE_CHAPTER_NAMES
    assert [chapter.title for chapter in detection.chapters] == ["Intro", "Body", "Conclusion"]
    assert [chapter.chapter_number for chapter in detection.chapters] == [1, 2, 3]
    assert [chapter.heading_line for chapter in detection.chapters] == [4, 10, 17]
    assert len(detection.chapters[1].content_lines) == 6


def test_named_chapters_are_ordered_by_position_not_config_order(
    named_chapter_book_text: str,
) -> None:
    """Chapter order follows the document, whatever order names are configured in."""

    config = BookConfig(chapter_names=("Conclusion", "Body", "Intro"))

    detection = ChapterDetector(config).detect(named_chapter_book_text)

    assert [chapter.title for chapter in detection.chapters] == ["Intro", "Body", "Conclusion"]


def test_named_chapter_without_content_is_dropped(prose: ProseFactory) -> None:
    """A configured name followed only by short lines produces no chapter."""

    text = "\n".join(["Prologue", *prose(), "Afterword", "Fin.", "The end."])
    config = BookConfig(chapter_names=("Prologue", "Afterword"))

    detection = ChapterDetector(config).detect(text)

    assert [chapter.title for chapter in detection.chapters] == ["Prologue"]


def test_named_chapter_heading_split_across_two_lines_is_found(prose: ProseFactory) -> None:
    """A title broken over two lines is matched on the combined lines."""

    text = "\n".join(["The Origin", "of Everything", *prose()])
    config = BookConfig(chapter_names=("The Origin of Everything",))

    detection = ChapterDetector(config).detect(text)

    assert [chapter.title for chapter in detection.chapters] == ["The Origin of Everything"]
    assert detection.chapters[0].content_lines == tuple(prose())


def test_long_named_heading_does_not_claim_preceding_prose_line(
    prose: ProseFactory,
) -> None:
    """The line before a long title stays in the previous chapter."""

    closing_line = "This is the final sentence of the first chapter right here."
    text = "\n".join(
        [
            "The Opening Chapter",
            *prose(),
            closing_line,
            "The Second Long Chapter",
            *prose(),
        ]
    )
    config = BookConfig(chapter_names=("The Opening Chapter", "The Second Long Chapter"))

    detection = ChapterDetector(config).detect(text)

    assert [chapter.heading_line for chapter in detection.chapters] == [0, 7]
    assert detection.chapters[0].content_lines == (*prose(), closing_line)
    assert detection.chapters[1].content_lines == tuple(prose())


def test_named_chapter_content_drops_page_numbers_and_metadata(prose: ProseFactory) -> None:
    """Page numbers, short lines, and metadata lines are left out of named chapters."""

    text = "\n".join(
        ["Body", "17", "Copyright 2020 Someone Else", "tiny line", *prose()]
    )
    config = BookConfig(chapter_names=("Body",))

    detection = ChapterDetector(config).detect(text)

    assert detection.chapters[0].content_lines == tuple(prose())


def test_heading_patterns_skip_front_matter_and_stop_at_back_matter(
    heading_book_text: str,
) -> None:
    """Pattern detection ignores front matter and stops at the bibliography."""

    detection = ChapterDetector().detect(heading_book_text)

    assert detection.source == SOURCE_HEADING_PATTERNS
    assert [chapter.title for chapter in detection.chapters] == [
        "The Beginning",
        "The Middle Years",
    ]
    assert all(
        "Smith, J." not in line
        for chapter in detection.chapters
        for line in chapter.content_lines
    )


def test_heading_titles_are_stripped_of_numbering(prose: ProseFactory) -> None:
    """`Chapter N:` prefixes and `N.` numbering are removed from titles."""

    text = "\n".join(
        [
            "Chapter One",
            *prose(),
            "2. The Second Movement",
            *prose(),
            "Epilogue",
            *prose(),
        ]
    )

    detection = ChapterDetector().detect(text)

    assert [chapter.title for chapter in detection.chapters] == [
        "Chapter 1",
        "The Second Movement",
        "Epilogue",
    ]


def test_implausible_heading_matches_are_treated_as_content(prose: ProseFactory) -> None:
    """Lines with commas or dangling words are not accepted as headings."""

    text = "\n".join(
        [
            "Chapter 1: Arrival",
            "Chapter 3, which we saw before",
            *prose(),
            "THE STATE OF",
            *prose(),
        ]
    )
    config = BookConfig(skip_front_matter=False)

    detection = ChapterDetector(config).detect(text)

    assert [chapter.title for chapter in detection.chapters] == ["Arrival"]
    assert "Chapter 3, which we saw before" in detection.chapters[0].content_lines


def test_prose_before_first_heading_opens_implicit_chapter(prose: ProseFactory) -> None:
    """Long lines before any heading form an implicit opening chapter."""

    text = "\n".join([*prose(), "Chapter 1: Arrival", *prose()])
    config = BookConfig(skip_front_matter=False)

    detection = ChapterDetector(config).detect(text)

    assert [chapter.title for chapter in detection.chapters] == ["Introduction", "Arrival"]
    assert detection.chapters[0].heading_line is None


def test_short_chapters_are_rejected_by_content_length(prose: ProseFactory) -> None:
    """Chapters with 200 characters of content or less are dropped."""

    text = "\n".join(
        ["Chapter 1: Short", prose(1)[0], "Chapter 2: Long", *prose()]
    )

    detection = ChapterDetector().detect(text)

    assert [chapter.title for chapter in detection.chapters] == ["Long"]
    assert detection.chapters[0].chapter_number == 1


def test_fallback_chapter_holds_substantial_lines_when_nothing_is_detected(
    prose: ProseFactory,
) -> None:
    """When no chapter survives, one fallback chapter keeps the long lines."""

    text = "\n".join(["42", "short line", *prose()])
    config = BookConfig(chapter_names=("Missing Chapter Title",))

    detection = ChapterDetector(config).detect(text)

    assert detection.source == SOURCE_FULL_TEXT_FALLBACK
    assert len(detection.chapters) == 1
    assert detection.chapters[0].title == "Full Text"
    assert detection.chapters[0].content_lines == tuple(prose())


def test_fallback_title_is_configurable(prose: ProseFactory) -> None:
    """The fallback chapter uses the configured title."""

    config = BookConfig(
        chapter_names=("Missing Chapter Title",),
        fallback_chapter_title="Whole Book",
    )

    detection = ChapterDetector(config).detect("\n".join(prose()))

    assert detection.chapters[0].title == "Whole Book"


def test_empty_text_yields_no_chapters() -> None:
    """Empty input produces zero chapters."""

    detection = ChapterDetector().detect("")

    assert detection.chapters == ()


def test_trace_detection_emits_debug_events(named_chapter_book_text: str) -> None:
    """Detection decisions are logged at debug level only when tracing is on."""

    sink = io.StringIO()
    handler_id = logger.add(sink, level="DEBUG", format="{message}")
    try:
        config = BookConfig(chapter_names=("Intro", "Body", "Conclusion"))
        ChapterDetector(config).detect(named_chapter_book_text)
        assert "[detect]" not in sink.getvalue()

        ChapterDetector(config, DebugOptions(trace_detection=True)).detect(
            named_chapter_book_text
        )
    finally:
        logger.remove(handler_id)

    assert "[detect] scored occurrence" in sink.getvalue()
    assert "[detect] detection finished" in sink.getvalue()
