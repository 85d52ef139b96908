"""Shared parsing helpers for config payload normalization."""

from __future__ import annotations

from collections.abc import Sequence

_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_positive_int(value: object) -> int | None:
    """Parse a strictly positive integer, returning `None` for anything else.

    Booleans are rejected even though they are `int` subclasses.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        parsed = int(normalized)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def parse_string_list(value: object) -> tuple[str, ...] | None:
    """Parse a list of strings, keeping order and dropping blank entries.

    Returns `None` when the value is not a list-like of scalars.
    """

    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None

    items: list[str] = []
    for item in value:
        if isinstance(item, (dict, list, tuple)):
            return None
        normalized = normalize_optional_string(item)
        if normalized is not None:
            items.append(normalized)
    return tuple(items)
