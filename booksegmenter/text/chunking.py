"""Chapter-to-chunk segmentation logic.

Responsibilities:
- Group sentences into word-bounded chunks without splitting any sentence.
- Merge leftover small chunks into their neighbours.
- Preserve word offsets required to align chunks with word-timing data.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from ..config import ChunkingSettings
from ..models.datatypes import Chunk
from .sentences import SentenceSplitter


class ChunkAssembler:
    """Greedy single-pass grouping of sentences into raw chunks."""

    def __init__(self, min_words: int = 5, max_words: int = 15) -> None:
        """Initialize assembler word bounds."""

        self.min_words = min_words
        self.max_words = max_words

    def assemble(self, sentences: Iterable[str]) -> list[Chunk]:
        """Build raw chunks from ordered sentences.

        A chunk is closed before a sentence that would push it past
        `max_words`, and after any sentence that brings it to `min_words`.
        A sentence longer than `max_words` becomes its own oversized chunk.

        Args:
            sentences: Ordered sentence strings.

        Returns:
            Raw chunks with provisional indices and chapter word offsets.
        """

        chunks: list[Chunk] = []
        current_text: list[str] = []
        current_words: list[str] = []
        word_offset = 0

        def flush() -> None:
            chunks.append(
                Chunk(
                    index=len(chunks),
                    text=" ".join(current_text).strip(),
                    words=tuple(current_words),
                    start_index=word_offset - len(current_words),
                    end_index=word_offset - 1,
                )
            )
            current_text.clear()
            current_words.clear()

        for sentence in sentences:
            sentence_words = sentence.split()
            if not sentence_words:
                continue

            if current_words and len(current_words) + len(sentence_words) > self.max_words:
                flush()

            current_text.append(sentence.strip())
            current_words.extend(sentence_words)
            word_offset += len(sentence_words)

            if len(current_words) >= self.min_words:
                flush()

        if current_words:
            flush()
        return chunks


class ChunkMerger:
    """Fold small chunks into adjacent chunks after assembly."""

    def __init__(
        self,
        max_words: int = 15,
        merge_threshold_words: int = 10,
        very_small_words: int = 5,
        very_small_slack_words: int = 5,
    ) -> None:
        """Initialize merge thresholds."""

        self.max_words = max_words
        self.merge_threshold_words = merge_threshold_words
        self.very_small_words = very_small_words
        self.very_small_slack_words = very_small_slack_words

    def merge(self, chunks: list[Chunk]) -> list[Chunk]:
        """Merge small chunks and return final chunks indexed from zero.

        For a chunk below the merge threshold, try the next raw chunk, then
        the previous output chunk, within the allowed size. Very small chunks
        get extra slack and, failing that, are merged into whichever
        neighbour exists regardless of size.
        """

        merged: list[Chunk] = []
        position = 0
        while position < len(chunks):
            chunk = chunks[position]
            following = chunks[position + 1] if position + 1 < len(chunks) else None
            position += 1

            if chunk.word_count >= self.merge_threshold_words:
                merged.append(chunk)
                continue

            very_small = chunk.word_count <= self.very_small_words
            max_allowed = self.max_words + (self.very_small_slack_words if very_small else 0)

            if following is not None and chunk.word_count + following.word_count <= max_allowed:
                merged.append(self._join(chunk, following))
                position += 1
            elif merged and merged[-1].word_count + chunk.word_count <= max_allowed:
                merged[-1] = self._join(merged[-1], chunk)
            elif very_small and following is not None:
                merged.append(self._join(chunk, following))
                position += 1
            elif very_small and merged:
                merged[-1] = self._join(merged[-1], chunk)
            else:
                merged.append(chunk)

        return [replace(chunk, index=index) for index, chunk in enumerate(merged)]

    @staticmethod
    def _join(first: Chunk, second: Chunk) -> Chunk:
        """Concatenate two adjacent chunks."""

        return Chunk(
            index=first.index,
            text=f"{first.text} {second.text}",
            words=first.words + second.words,
            start_index=first.start_index,
            end_index=second.end_index,
            type=first.type,
        )


class TextChunker:
    """Split chapter text into sentence-aligned, merged chunks."""

    def __init__(self, settings: ChunkingSettings | None = None) -> None:
        """Validate settings and build splitter, assembler, and merger."""

        self.settings = settings or ChunkingSettings()
        self.settings.validate()
        self._splitter = SentenceSplitter(
            strategy=self.settings.sentence_strategy,
            abbreviations=self.settings.abbreviations,
            prefix_abbreviations=self.settings.prefix_abbreviations,
            numbered_abbreviations=self.settings.numbered_abbreviations,
        )
        self._assembler = ChunkAssembler(
            min_words=self.settings.min_words,
            max_words=self.settings.max_words,
        )
        self._merger = ChunkMerger(
            max_words=self.settings.max_words,
            merge_threshold_words=self.settings.merge_threshold_words,
            very_small_words=self.settings.very_small_words,
            very_small_slack_words=self.settings.very_small_slack_words,
        )

    def chunk(self, text: str) -> list[Chunk]:
        """Return final chunks for one chapter's text."""

        sentences = self._splitter.iter_sentences(text)
        return self._merger.merge(self._assembler.assemble(sentences))
