"""Unit tests for chapter title normalization and fuzzy line matching."""

from __future__ import annotations

from booksegmenter.text.matching import first_matching_title, fuzzy_match, normalize_title


def test_normalize_title_unifies_quotes_spacing_and_page_numbers() -> None:
    """Normalization maps smart quotes, collapses spaces, and drops page numbers."""

    assert normalize_title("  The “Big”   Idea’s End   42 ") == "The \"Big\" Idea's End"
    assert normalize_title("Preface xi") == "Preface"
    assert normalize_title("Back\\slash Title") == "Backslash Title"


def test_fuzzy_match_accepts_prefix_and_toc_entries() -> None:
    """Lines starting with the title match, with or without a page number."""

    assert fuzzy_match("Body", "Body")
    assert fuzzy_match("Body 12", "Body")
    assert fuzzy_match("Intro to the story", "Intro")


def test_fuzzy_match_short_titles_require_prefix() -> None:
    """Titles of ten characters or fewer never match mid-line."""

    assert not fuzzy_match("Somebody said hello", "Body")
    assert not fuzzy_match("In Conclusion", "Conclusion")


def test_fuzzy_match_long_titles_match_when_contained() -> None:
    """Titles longer than ten characters match anywhere in the line."""

    assert fuzzy_match("Part One: The Origin of Life", "The Origin of Life")


def test_fuzzy_match_tolerates_clipped_leading_characters() -> None:
    """Long titles match when their first one to three characters are missing."""

    assert fuzzy_match("nergy and Evolution", "Energy and Evolution")
    assert fuzzy_match("rgy and Evolution", "Energy and Evolution")
    assert not fuzzy_match("and Evolution", "Energy and Evolution")


def test_fuzzy_match_never_matches_blank_title() -> None:
    """Blank configured titles are ignored."""

    assert not fuzzy_match("Anything", "   ")


def test_first_matching_title_uses_configured_order() -> None:
    """The first matching title in configuration order wins."""

    titles = ("Intro", "Introduction")

    assert first_matching_title("Introduction", titles) == "Intro"
    assert first_matching_title("Epilogue", titles) is None
