"""Chapter detection over raw extracted book text.

Responsibilities:
- Prefer first-level PDF outline sections when a bookmarked PDF provides them.
- Locate chapter starts from a configured chapter-name list, choosing the
  real heading over table-of-contents entries.
- Fall back to heading-pattern heuristics when no name list is configured.
- Guarantee a single whole-document chapter when nothing else survives.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import re

from loguru import logger

from ..config import BookConfig, DebugOptions
from ..models.datatypes import DetectedChapter, OutlineSection
from .matching import first_matching_title, fuzzy_match, normalize_title

SOURCE_PDF_OUTLINE = "pdf_outline"
SOURCE_CHAPTER_NAMES = "chapter_names"
SOURCE_HEADING_PATTERNS = "heading_patterns"
SOURCE_FULL_TEXT_FALLBACK = "full_text_fallback"


@dataclass(frozen=True, slots=True)
class ChapterDetection:
    """Detected chapters plus the detection path that produced them.

    `outline_status` is set for PDF inputs to the outline extraction status.
    """

    chapters: tuple[DetectedChapter, ...]
    source: str
    outline_status: str | None = None


@dataclass(frozen=True, slots=True)
class _Occurrence:
    """One line position where a configured chapter name was found."""

    title: str
    line_index: int
    line: str
    heading_span: int = 1


@dataclass(slots=True)
class _Draft:
    """A chapter being collected before acceptance and numbering."""

    title: str
    heading_line: int | None
    content: list[str] = field(default_factory=list)
    start_page: int | None = None
    end_page: int | None = None

    def content_length(self) -> int:
        return len(" ".join(self.content))


class ChapterDetector:
    """Split book text into chapters using names, patterns, or a fallback."""

    _PAGE_NUMBER_RE = re.compile(r"^\d+$")
    _PAGE_LABEL_RE = re.compile(r"^page\s+\d+$", re.IGNORECASE)
    _METADATA_RE = re.compile(
        r"^(isbn|copyright|typeset|printed|published|all rights|first published|volume)",
        re.IGNORECASE,
    )
    _BIBLIOGRAPHY_RE = re.compile(
        r"\(\w+,|\d{4}\)|press|oxford|university|journal", re.IGNORECASE
    )
    _DANGLING_WORD_RE = re.compile(r"\b(of|the|and)$", re.IGNORECASE)
    _CHAPTER_PREFIX_RE = re.compile(
        r"^chapter\s+(\d+|one|two|three|four|five|six|seven|eight|nine|ten)\s*:?\s*",
        re.IGNORECASE,
    )
    _NUMBERED_TITLE_RE = re.compile(r"^(\d+)\.\s+([A-Za-z][a-zA-Z\s]{8,40})$")

    # Name-list path.
    _LOOKAHEAD_LINES = 100
    _SUBSTANTIAL_LINE_LENGTH = 20
    _MIN_NAMED_CONTENT_LINE_LENGTH = 10
    # Pattern path.
    _FRONT_MATTER_CONTENT_LENGTH = 100
    _MIN_HEADING_LENGTH = 5
    _MAX_HEADING_LENGTH = 50
    _MIN_PATTERN_CONTENT_LINE_LENGTH = 20
    _IMPLICIT_CHAPTER_LINE_LENGTH = 50
    # Acceptance and fallback.
    _MIN_CHAPTER_CONTENT_LENGTH = 200
    _FALLBACK_LINE_LENGTH = 50

    def __init__(
        self,
        config: BookConfig | None = None,
        debug: DebugOptions | None = None,
    ) -> None:
        """Validate config and compile heading and back-matter patterns."""

        self.config = config or BookConfig()
        self.config.validate()
        self.debug = debug or DebugOptions()
        self._chapter_patterns = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.config.chapter_patterns
        ]
        self._exclude_patterns = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.config.exclude_patterns
        ]

    def detect(
        self,
        text: str,
        outline: Sequence[OutlineSection] = (),
    ) -> ChapterDetection:
        """Detect chapters in full book text.

        PDF outline sections win when any of them survive acceptance.
        Otherwise uses the configured chapter names when present, heading
        patterns when not. Chapters with 200 characters of content or less
        are dropped; if none survive, one fallback chapter holds every
        substantial line. Empty input yields no chapters.
        """

        if outline:
            accepted = self._accepted(self._detect_from_outline(outline))
            if accepted:
                return self._detection(accepted, SOURCE_PDF_OUTLINE)
            self._trace("outline produced no chapters", sections=len(outline))

        lines = self._split_lines(text)
        if self.config.chapter_names:
            drafts = self._detect_from_names(lines)
            source = SOURCE_CHAPTER_NAMES
        else:
            drafts = self._detect_from_patterns(lines)
            source = SOURCE_HEADING_PATTERNS

        accepted = self._accepted(drafts)
        if not accepted:
            accepted = self._fallback(lines)
            source = SOURCE_FULL_TEXT_FALLBACK
        return self._detection(accepted, source)

    def _accepted(self, drafts: list[_Draft]) -> list[_Draft]:
        """Keep drafts with more than 200 characters of joined content."""

        accepted: list[_Draft] = []
        for draft in drafts:
            if draft.content_length() > self._MIN_CHAPTER_CONTENT_LENGTH:
                accepted.append(draft)
                continue
            self._trace(
                "rejected chapter with insufficient content",
                title=draft.title,
                content_chars=draft.content_length(),
            )
        return accepted

    def _detection(self, accepted: list[_Draft], source: str) -> ChapterDetection:
        """Number accepted drafts sequentially in document order."""

        chapters = tuple(
            DetectedChapter(
                chapter_number=number,
                title=draft.title,
                content_lines=tuple(draft.content),
                heading_line=draft.heading_line,
                start_page=draft.start_page,
                end_page=draft.end_page,
            )
            for number, draft in enumerate(accepted, start=1)
        )
        self._trace("detection finished", source=source, chapters=len(chapters))
        return ChapterDetection(chapters=chapters, source=source)

    def _detect_from_outline(self, sections: Sequence[OutlineSection]) -> list[_Draft]:
        """Turn outline sections into drafts, filtered by names or back-matter patterns."""

        drafts: list[_Draft] = []
        for section in sections:
            if self.config.chapter_names:
                if not self._matches_chapter_name(section.title):
                    self._trace("skipped outline entry", title=section.title)
                    continue
            elif any(pattern.search(section.title) for pattern in self._exclude_patterns):
                self._trace("skipped outline back matter", title=section.title)
                continue

            heading = normalize_title(section.title)
            content = [
                line
                for line in section.lines
                if len(line) > self._MIN_NAMED_CONTENT_LINE_LENGTH
                and normalize_title(line) != heading
                and not self._is_page_number(line)
                and not self._is_metadata(line)
            ]
            drafts.append(
                _Draft(
                    title=section.title,
                    heading_line=None,
                    content=content,
                    start_page=section.start_page + 1,
                    end_page=section.end_page,
                )
            )
        return drafts

    def _matches_chapter_name(self, title: str) -> bool:
        """Return whether an outline title and a configured name contain one another."""

        return any(
            fuzzy_match(title, name) or fuzzy_match(name, title)
            for name in self.config.chapter_names
        )

    def _detect_from_names(self, lines: list[str]) -> list[_Draft]:
        """Collect chapters starting at the best occurrence of each configured name."""

        occurrences = self._find_occurrences(lines)
        selected: list[_Occurrence] = []
        for title in self.config.chapter_names:
            candidates = occurrences.get(title)
            if not candidates:
                continue
            best: _Occurrence | None = None
            best_count = 0
            for candidate in candidates:
                count = self._count_content_lines(lines, candidate)
                self._trace(
                    "scored occurrence",
                    title=title,
                    line=candidate.line_index,
                    content_lines=count,
                )
                if count > best_count:
                    best, best_count = candidate, count
            if best is None:
                self._trace("rejected title without following content", title=title)
                continue
            selected.append(best)

        selected.sort(key=lambda occurrence: occurrence.line_index)

        drafts: list[_Draft] = []
        for position, occurrence in enumerate(selected):
            start = occurrence.line_index + occurrence.heading_span
            end = (
                selected[position + 1].line_index
                if position + 1 < len(selected)
                else len(lines)
            )
            content = [
                line
                for line in lines[start:end]
                if len(line) > self._MIN_NAMED_CONTENT_LINE_LENGTH
                and not self._is_page_number(line)
                and not self._is_metadata(line)
            ]
            drafts.append(
                _Draft(title=occurrence.title, heading_line=occurrence.line_index, content=content)
            )
        return drafts

    def _find_occurrences(self, lines: list[str]) -> dict[str, list[_Occurrence]]:
        """Return every single- and two-line occurrence of each configured name."""

        names = self.config.chapter_names
        occurrences: dict[str, list[_Occurrence]] = {}
        for index, line in enumerate(lines):
            title = first_matching_title(line, names)
            if title is not None:
                occurrences.setdefault(title, []).append(
                    _Occurrence(title=title, line_index=index, line=line)
                )

            if index + 1 < len(lines):
                following = lines[index + 1]
                combined = f"{line} {following}"
                combined_title = first_matching_title(combined, names)
                # The title must be split across both lines, not held by either alone.
                if (
                    combined_title is not None
                    and not fuzzy_match(line, combined_title)
                    and not fuzzy_match(following, combined_title)
                ):
                    occurrences.setdefault(combined_title, []).append(
                        _Occurrence(
                            title=combined_title,
                            line_index=index,
                            line=combined,
                            heading_span=2,
                        )
                    )
        return occurrences

    def _count_content_lines(self, lines: list[str], occurrence: _Occurrence) -> int:
        """Count substantial lines after an occurrence, up to the next configured name."""

        start = occurrence.line_index + occurrence.heading_span
        end = min(len(lines), occurrence.line_index + self._LOOKAHEAD_LINES)
        count = 0
        for line in lines[start:end]:
            if first_matching_title(line, self.config.chapter_names) is not None:
                break
            if len(line) > self._SUBSTANTIAL_LINE_LENGTH and not self._PAGE_NUMBER_RE.match(line):
                count += 1
        return count

    def _detect_from_patterns(self, lines: list[str]) -> list[_Draft]:
        """Collect chapters from heading-pattern matches in reading order."""

        drafts: list[_Draft] = []
        current: _Draft | None = None
        content_started = not self.config.skip_front_matter

        for index, line in enumerate(lines):
            matches_pattern = any(pattern.search(line) for pattern in self._chapter_patterns)
            if not content_started:
                if len(line) > self._FRONT_MATTER_CONTENT_LENGTH or matches_pattern:
                    content_started = True
                else:
                    continue

            if any(pattern.search(line) for pattern in self._exclude_patterns):
                self._trace("stopping at back matter", line=index)
                break

            is_page_number = self._is_page_number(line)
            is_metadata = self._is_metadata(line)
            if matches_pattern and self._is_plausible_heading(line):
                if current is not None:
                    drafts.append(current)
                current = _Draft(title=self._heading_title(line, len(drafts) + 1), heading_line=index)
                self._trace("heading", line=index, title=current.title)
            elif current is not None:
                if (
                    len(line) > self._MIN_PATTERN_CONTENT_LINE_LENGTH
                    and not is_metadata
                    and not is_page_number
                ):
                    current.content.append(line)
            elif len(line) > self._IMPLICIT_CHAPTER_LINE_LENGTH:
                current = _Draft(
                    title=self.config.implicit_chapter_title,
                    heading_line=None,
                    content=[line],
                )

        if current is not None:
            drafts.append(current)
        return drafts

    def _is_plausible_heading(self, line: str) -> bool:
        """Reject pattern matches that look like page labels, prose, or citations."""

        if self._is_page_number(line) or self._is_metadata(line):
            return False
        if not self._MIN_HEADING_LENGTH <= len(line) <= self._MAX_HEADING_LENGTH:
            return False
        if "," in line or ";" in line or self._DANGLING_WORD_RE.search(line):
            return False
        return not self._BIBLIOGRAPHY_RE.search(line)

    def _heading_title(self, line: str, chapter_number: int) -> str:
        """Derive a chapter title from a heading line."""

        prefix = self._CHAPTER_PREFIX_RE.match(line)
        if prefix is not None:
            return line[prefix.end():].strip() or f"Chapter {chapter_number}"
        numbered = self._NUMBERED_TITLE_RE.match(line)
        if numbered is not None:
            return numbered.group(2).strip()
        return line

    def _fallback(self, lines: list[str]) -> list[_Draft]:
        """Build the single whole-document chapter from substantial lines."""

        content = [
            line
            for line in lines
            if len(line) > self._FALLBACK_LINE_LENGTH
            and not self._PAGE_NUMBER_RE.match(line)
            and not self._is_metadata(line)
        ]
        if not content:
            return []
        self._trace("using full-text fallback", content_lines=len(content))
        return [_Draft(title=self.config.fallback_chapter_title, heading_line=None, content=content)]

    def _is_page_number(self, line: str) -> bool:
        return bool(self._PAGE_NUMBER_RE.match(line) or self._PAGE_LABEL_RE.match(line))

    def _is_metadata(self, line: str) -> bool:
        return bool(self._METADATA_RE.match(line))

    def _trace(self, event: str, **context: object) -> None:
        """Emit a detection debug event when tracing is enabled."""

        if not self.debug.trace_detection:
            return
        details = " ".join(f"{key}={context[key]!r}" for key in sorted(context))
        logger.debug(f"[detect] {event} {details}".rstrip())

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        """Split text into trimmed non-empty lines."""

        return [line.strip() for line in text.splitlines() if line.strip()]
