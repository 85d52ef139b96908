"""Chapter title normalization and tolerant line matching.

Extracted PDF text mangles headings in predictable ways: smart quotes,
doubled spaces, trailing page numbers from tables of contents, and
decorative first letters that end up on a separate line. These helpers
compare a text line against a configured title while tolerating them.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_PAGE_NUMBER_RE = re.compile(r"\s+(ix|xi{1,3}|[0-9]+)\s*$", re.IGNORECASE)
_QUOTE_TRANSLATION = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "″": '"',
        "‶": '"',
        "‘": "'",
        "’": "'",
        "\\": None,
    }
)

# Titles shorter than this only match exactly or as a line prefix.
_CONTAINS_MIN_TITLE_LENGTH = 10
_MAX_CLIPPED_CHARS = 3
_CLIPPED_MIN_LENGTH = 8


def normalize_title(text: str) -> str:
    """Normalize a heading line or configured title for comparison."""

    collapsed = _WHITESPACE_RE.sub(" ", text).translate(_QUOTE_TRANSLATION)
    return _TRAILING_PAGE_NUMBER_RE.sub("", collapsed).strip()


def fuzzy_match(line: str, title: str) -> bool:
    """Return whether `line` looks like the heading for `title`.

    Matches, after normalization:
    - exact equality,
    - the line starting with the title,
    - the line containing a title longer than 10 characters,
    - the line equal to or starting with the title minus its first 1-3
      characters, for long titles whose first letters were clipped.
    """

    normalized_line = normalize_title(line)
    normalized_title = normalize_title(title)
    if not normalized_title:
        return False

    if normalized_line.startswith(normalized_title):
        return True

    if len(normalized_title) <= _CONTAINS_MIN_TITLE_LENGTH:
        return False

    if normalized_title in normalized_line:
        return True

    for skip in range(1, _MAX_CLIPPED_CHARS + 1):
        clipped = normalized_title[skip:]
        if len(clipped) > _CLIPPED_MIN_LENGTH and normalized_line.startswith(clipped):
            return True
    return False


def first_matching_title(line: str, titles: tuple[str, ...]) -> str | None:
    """Return the first configured title that `line` matches, in config order."""

    for title in titles:
        if fuzzy_match(line, title):
            return title
    return None
