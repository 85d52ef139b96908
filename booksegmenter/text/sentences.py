"""Sentence splitting strategies used ahead of chunk assembly.

Responsibilities:
- Turn chapter text into ordered sentence strings with terminal punctuation.
- Keep abbreviation handling explicit and strategy-selected.
"""

from __future__ import annotations

from collections.abc import Iterator
import re

from ..config import (
    DEFAULT_ABBREVIATIONS,
    DEFAULT_NUMBERED_ABBREVIATIONS,
    DEFAULT_PREFIX_ABBREVIATIONS,
    SentenceStrategy,
)


class SentenceSplitter:
    """Split text into sentences using the configured strategy.

    The abbreviation-aware strategy walks whitespace tokens and closes a
    sentence after a token ending in `.`, `!` or `?`, unless the token is a
    known abbreviation that is followed by a lowercase word, an honorific
    (`Dr.`, `Mrs.`) followed by any word, or a reference abbreviation
    (`No.`, `Vol.`) followed by a number or roman numeral.

    The punctuation-run strategy splits on every `[.!?]+` run and reattaches
    each run to the text before it.
    """

    _TERMINAL_RE = re.compile(r"[.!?]+$")
    _PUNCTUATION_RUN_RE = re.compile(r"([.!?]+)")
    # A bare "I" is read as the pronoun, not a roman numeral.
    _REFERENCE_NUMBER_RE = re.compile(r"^(?:\d|(?:(?!I\W*$)[IVXLCDM]+|[ivxlcdm]+)\W*$)")

    def __init__(
        self,
        strategy: SentenceStrategy = SentenceStrategy.ABBREVIATION_AWARE,
        abbreviations: frozenset[str] = DEFAULT_ABBREVIATIONS,
        prefix_abbreviations: frozenset[str] = DEFAULT_PREFIX_ABBREVIATIONS,
        numbered_abbreviations: frozenset[str] = DEFAULT_NUMBERED_ABBREVIATIONS,
    ) -> None:
        """Initialize splitter strategy and abbreviation sets."""

        self.strategy = strategy
        self.abbreviations = abbreviations
        self.prefix_abbreviations = prefix_abbreviations & abbreviations
        self.numbered_abbreviations = numbered_abbreviations & abbreviations

    def split(self, text: str) -> list[str]:
        """Return ordered sentences for `text`."""

        return list(self.iter_sentences(text))

    def iter_sentences(self, text: str) -> Iterator[str]:
        """Yield sentences lazily in original order."""

        if self.strategy is SentenceStrategy.PUNCTUATION_RUN:
            return self._iter_punctuation_runs(text)
        return self._iter_abbreviation_aware(text)

    def _iter_abbreviation_aware(self, text: str) -> Iterator[str]:
        words = text.split()
        current: list[str] = []
        for position, word in enumerate(words):
            current.append(word)
            if not self._TERMINAL_RE.search(word):
                continue
            next_word = words[position + 1] if position + 1 < len(words) else None
            if self._is_false_break(word, next_word):
                continue
            yield " ".join(current)
            current = []

        if current:
            yield " ".join(current)

    def _is_false_break(self, word: str, next_word: str | None) -> bool:
        """Return whether terminal punctuation on `word` belongs to an abbreviation."""

        if next_word is None:
            return False
        stripped = self._TERMINAL_RE.sub("", word)
        if stripped not in self.abbreviations:
            return False
        if stripped in self.prefix_abbreviations:
            return True
        if stripped in self.numbered_abbreviations and self._REFERENCE_NUMBER_RE.match(
            next_word
        ):
            return True
        return next_word[0].islower()

    def _iter_punctuation_runs(self, text: str) -> Iterator[str]:
        parts = self._PUNCTUATION_RUN_RE.split(text)
        pending: str | None = None
        for position in range(0, len(parts), 2):
            body = " ".join(parts[position].split())
            punctuation = parts[position + 1] if position + 1 < len(parts) else ""
            if not body:
                # A bare punctuation run belongs to the sentence before it.
                if pending is not None:
                    pending += punctuation
                elif punctuation:
                    pending = punctuation
                continue
            if pending is not None:
                yield pending
            pending = body + punctuation

        if pending is not None:
            yield pending
