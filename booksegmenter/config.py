"""Configuration model and loaders for booksegmenter.

Responsibilities:
- Define book structure and chunking settings as typed dataclasses.
- Validate numeric bounds and regex sources before any segmentation runs.
- Provide loader entry points for JSON and YAML book config files.

Key types:
- `BookConfig`: chapter hints, heading patterns, and metadata overrides.
- `ChunkingSettings`: word bounds, merge thresholds, and sentence strategy.
- `DebugOptions`: explicit detection tracing and debug dump settings.
- `SegmentationRequest`: input, output, and settings for one run.
- `ConfigLoader`: static construction helpers for `BookConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import json
from pathlib import Path
import re
from typing import Any, Mapping

import yaml

from .errors import InvalidConfiguration
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_int,
    parse_string_list,
)


DEFAULT_CHAPTER_PATTERNS: tuple[str, ...] = (
    r"^chapter\s+(\d+|one|two|three|four|five|six|seven|eight|nine|ten)\b",
    r"^(\d+)\.\s+([A-Za-z][a-zA-Z\s]{8,40})$",
    r"^(introduction|conclusion|epilogue|prologue|preface|foreword|afterword)$",
    r"^[A-Z\s]{5,30}$",
)
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    r"^(appendix|bibliography|index|notes|references|acknowledgements|about the author|glossary)$",
)
DEFAULT_ABBREVIATIONS: frozenset[str] = frozenset(
    {
        "Mr", "Mrs", "Ms", "Dr", "Prof", "Sr", "Jr", "Inc", "Ltd", "Co", "Corp",
        "vs", "etc", "eg", "ie", "al", "et", "cf", "ca", "pp", "Ch", "Sec",
        "Fig", "No", "Vol", "Rev", "Ed", "St", "Ave", "Blvd", "Mt", "Ft",
    }
)
# Honorifics precede a name, so a capitalized next word does not start a
# new sentence ("Dr. Smith").
DEFAULT_PREFIX_ABBREVIATIONS: frozenset[str] = frozenset(
    {"Mr", "Mrs", "Ms", "Dr", "Prof", "Rev"}
)
# Reference abbreviations continue the sentence only before a number
# ("No. 5", "Vol. IV").
DEFAULT_NUMBERED_ABBREVIATIONS: frozenset[str] = frozenset(
    {"No", "Vol", "Fig", "Ch", "Sec", "pp"}
)


class SentenceStrategy(str, Enum):
    """Sentence splitting strategy used before chunk assembly."""

    ABBREVIATION_AWARE = "abbreviation_aware"
    PUNCTUATION_RUN = "punctuation_run"


class ChapterNumbering(str, Enum):
    """Chapter numbering scheme applied to accepted chapters."""

    SEQUENTIAL = "sequential"


@dataclass(frozen=True, slots=True)
class ChunkingSettings:
    """Word bounds and merge thresholds for chapter chunking.

    Attributes:
        min_words: A chunk is finalized once it holds at least this many words.
        max_words: A sentence that would push a chunk past this count starts
            a new chunk.
        sentence_strategy: Sentence splitting strategy.
        merge_threshold_words: Chunks below this size are merge candidates.
        very_small_words: Chunks at or below this size merge aggressively.
        very_small_slack_words: Extra words allowed when merging very small
            chunks.
        abbreviations: Tokens (without trailing period) that do not end a
            sentence when the next word is lowercase.
        prefix_abbreviations: Subset of tokens that never end a sentence when
            another word follows.
        numbered_abbreviations: Subset of tokens that do not end a sentence
            when the next word is a number or roman numeral.
    """

    min_words: int = 5
    max_words: int = 15
    sentence_strategy: SentenceStrategy = SentenceStrategy.ABBREVIATION_AWARE
    merge_threshold_words: int = 10
    very_small_words: int = 5
    very_small_slack_words: int = 5
    abbreviations: frozenset[str] = DEFAULT_ABBREVIATIONS
    prefix_abbreviations: frozenset[str] = DEFAULT_PREFIX_ABBREVIATIONS
    numbered_abbreviations: frozenset[str] = DEFAULT_NUMBERED_ABBREVIATIONS

    def validate(self) -> None:
        """Validate word bounds before chunking."""

        for name in ("min_words", "max_words", "merge_threshold_words", "very_small_words"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidConfiguration(f"`{name}` must be a positive integer.")
        if isinstance(self.very_small_slack_words, bool) or not isinstance(
            self.very_small_slack_words, int
        ) or self.very_small_slack_words < 0:
            raise InvalidConfiguration("`very_small_slack_words` must be a non-negative integer.")
        if self.min_words > self.max_words:
            raise InvalidConfiguration(
                f"`min_words` ({self.min_words}) must not exceed `max_words` ({self.max_words})."
            )
        if not isinstance(self.sentence_strategy, SentenceStrategy):
            raise InvalidConfiguration(
                f"Unsupported `sentence_strategy` value `{self.sentence_strategy}`."
            )


@dataclass(frozen=True, slots=True)
class MetadataOverrides:
    """Optional title/author values that take precedence over extracted metadata."""

    title: str | None = None
    author: str | None = None


@dataclass(frozen=True, slots=True)
class BookConfig:
    """Structural hints and settings for one book.

    Attributes:
        chapter_names: Known chapter titles; when non-empty, name matching is
            used instead of heading patterns.
        chapter_patterns: Regex sources identifying heading lines.
        exclude_patterns: Regex sources identifying back matter; detection
            stops at the first matching line.
        skip_front_matter: Ignore lines until one looks like real content.
        chapter_numbering: Numbering scheme for accepted chapters.
        metadata: Title/author overrides.
        implicit_chapter_title: Title for content found before any heading.
        fallback_chapter_title: Title for the single whole-document chapter.
        chunking: Word bounds and sentence strategy.
    """

    chapter_names: tuple[str, ...] = ()
    chapter_patterns: tuple[str, ...] = DEFAULT_CHAPTER_PATTERNS
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    skip_front_matter: bool = True
    chapter_numbering: ChapterNumbering = ChapterNumbering.SEQUENTIAL
    metadata: MetadataOverrides = field(default_factory=MetadataOverrides)
    implicit_chapter_title: str = "Introduction"
    fallback_chapter_title: str = "Full Text"
    chunking: ChunkingSettings = field(default_factory=ChunkingSettings)

    def validate(self) -> None:
        """Validate regex sources, titles, and chunking bounds."""

        self.chunking.validate()
        self._validate_patterns(self.chapter_patterns, "chapter_patterns")
        self._validate_patterns(self.exclude_patterns, "exclude_patterns")
        if not isinstance(self.chapter_numbering, ChapterNumbering):
            raise InvalidConfiguration(
                f"Unsupported `chapter_numbering` value `{self.chapter_numbering}`."
            )
        for name in ("implicit_chapter_title", "fallback_chapter_title"):
            if normalize_optional_string(getattr(self, name)) is None:
                raise InvalidConfiguration(f"`{name}` must be a non-empty string.")

    def with_chunking(self, **overrides: Any) -> BookConfig:
        """Return a validated copy with selected chunking fields replaced."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        if not applied:
            return self
        updated = replace(self, chunking=replace(self.chunking, **applied))
        updated.validate()
        return updated

    @staticmethod
    def _validate_patterns(patterns: tuple[str, ...], field_name: str) -> None:
        """Reject regex sources that do not compile."""

        for pattern in patterns:
            try:
                re.compile(pattern, re.IGNORECASE)
            except re.error as exc:
                raise InvalidConfiguration(
                    f"`{field_name}` contains invalid regex `{pattern}`: {exc}"
                ) from exc


@dataclass(frozen=True, slots=True)
class DebugOptions:
    """Explicit debug switches for detection tracing and artifact dumps.

    Attributes:
        trace_detection: Emit per-occurrence detection decisions as debug logs.
        dump_dir: Directory for intermediate dumps, or `None` to disable.
    """

    trace_detection: bool = False
    dump_dir: Path | None = None


@dataclass(frozen=True, slots=True)
class SegmentationRequest:
    """Inputs for one full segmentation run.

    Attributes:
        input_path: Source book, PDF or UTF-8 text.
        output_path: Book JSON destination; defaults to
            `<input stem>.segmented.json` next to the input.
        config: Book structure and chunking settings.
        include_word_offsets: Add `startIndex`/`endIndex` to serialized chunks.
        debug: Detection tracing and dump settings.
    """

    input_path: Path
    output_path: Path | None = None
    config: BookConfig = field(default_factory=BookConfig)
    include_word_offsets: bool = False
    debug: DebugOptions = field(default_factory=DebugOptions)

    def resolved_output_path(self) -> Path:
        """Return the explicit output path or the default beside the input."""

        if self.output_path is not None:
            return self.output_path
        return self.input_path.with_name(f"{self.input_path.stem}.segmented.json")


class ConfigLoader:
    """Factory methods for creating `BookConfig` from external sources."""

    _SUPPORTED_KEYS = frozenset(
        {
            "chapter_names",
            "chapter_patterns",
            "exclude_patterns",
            "skip_front_matter",
            "chapter_numbering",
            "metadata",
            "implicit_chapter_title",
            "fallback_chapter_title",
            "min_words",
            "max_words",
            "sentence_strategy",
        }
    )
    _KEY_ALIASES = {
        "chapterNames": "chapter_names",
        "chapterPatterns": "chapter_patterns",
        "excludePatterns": "exclude_patterns",
        "skipFrontMatter": "skip_front_matter",
        "chapterNumbering": "chapter_numbering",
        "implicitChapterTitle": "implicit_chapter_title",
        "fallbackChapterTitle": "fallback_chapter_title",
        "minWords": "min_words",
        "maxWords": "max_words",
        "sentenceStrategy": "sentence_strategy",
    }
    _YAML_SUFFIXES = frozenset({".yaml", ".yml"})

    @staticmethod
    def from_file(path: Path) -> BookConfig:
        """Create a validated config from a JSON or YAML file."""

        if not path.exists():
            raise InvalidConfiguration(f"Config file not found: `{path}`.")
        raw_text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in ConfigLoader._YAML_SUFFIXES:
            payload = ConfigLoader._parse_yaml_payload(raw_text, path)
        else:
            payload = ConfigLoader._parse_json_payload(raw_text, path)
        return ConfigLoader.from_mapping(payload, source_label=f"Config `{path}`")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str = "Config") -> BookConfig:
        """Build a validated config from a mapping payload."""

        normalized = ConfigLoader._normalize_keys(payload, source_label)
        defaults = BookConfig()

        chapter_names = ConfigLoader._optional_string_list(
            normalized, "chapter_names", source_label, default=defaults.chapter_names
        )
        chapter_patterns = ConfigLoader._optional_string_list(
            normalized, "chapter_patterns", source_label, default=defaults.chapter_patterns
        )
        exclude_patterns = ConfigLoader._optional_string_list(
            normalized, "exclude_patterns", source_label, default=defaults.exclude_patterns
        )
        skip_front_matter = ConfigLoader._optional_boolean(
            normalized, "skip_front_matter", source_label, default=defaults.skip_front_matter
        )
        chapter_numbering = ConfigLoader._optional_enum(
            normalized, "chapter_numbering", source_label, ChapterNumbering,
            default=defaults.chapter_numbering,
        )
        metadata = ConfigLoader._optional_metadata(normalized, source_label)
        implicit_title = (
            ConfigLoader._optional_non_empty_string(normalized, "implicit_chapter_title")
            or defaults.implicit_chapter_title
        )
        fallback_title = (
            ConfigLoader._optional_non_empty_string(normalized, "fallback_chapter_title")
            or defaults.fallback_chapter_title
        )
        chunking = ChunkingSettings(
            min_words=ConfigLoader._optional_positive_int(
                normalized, "min_words", source_label, default=defaults.chunking.min_words
            ),
            max_words=ConfigLoader._optional_positive_int(
                normalized, "max_words", source_label, default=defaults.chunking.max_words
            ),
            sentence_strategy=ConfigLoader._optional_enum(
                normalized, "sentence_strategy", source_label, SentenceStrategy,
                default=defaults.chunking.sentence_strategy,
            ),
        )

        config = BookConfig(
            chapter_names=chapter_names,
            chapter_patterns=chapter_patterns,
            exclude_patterns=exclude_patterns,
            skip_front_matter=skip_front_matter,
            chapter_numbering=chapter_numbering,
            metadata=metadata,
            implicit_chapter_title=implicit_title,
            fallback_chapter_title=fallback_title,
            chunking=chunking,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_json_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse JSON text and enforce an object root payload."""

        try:
            payload = json.loads(raw_text) if raw_text.strip() else {}
        except json.JSONDecodeError as exc:
            raise InvalidConfiguration(f"Config `{path}` is not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise InvalidConfiguration(f"Config `{path}` must contain a top-level object.")
        return payload

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"Config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise InvalidConfiguration(f"Config `{path}` must contain a top-level mapping.")
        return payload

    @staticmethod
    def _normalize_keys(payload: Mapping[str, Any], source_label: str) -> dict[str, Any]:
        """Map camelCase aliases to canonical keys and reject unknown keys."""

        normalized: dict[str, Any] = {}
        for raw_key, value in payload.items():
            key = ConfigLoader._KEY_ALIASES.get(str(raw_key), str(raw_key))
            if key in normalized:
                raise InvalidConfiguration(f"{source_label} defines `{key}` more than once.")
            normalized[key] = value

        unknown = sorted(set(normalized).difference(ConfigLoader._SUPPORTED_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise InvalidConfiguration(f"{source_label} includes unsupported key(s): {key_list}.")
        return normalized

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_string_list(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        default: tuple[str, ...],
    ) -> tuple[str, ...]:
        """Read an optional list of non-blank strings."""

        if key not in payload:
            return default
        parsed = parse_string_list(payload[key])
        if parsed is None:
            raise InvalidConfiguration(f"{source_label} field `{key}` must be a list of strings.")
        return parsed

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload or payload[key] is None:
            return default
        parsed = parse_positive_int(payload[key])
        if parsed is None:
            raise InvalidConfiguration(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default
        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise InvalidConfiguration(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_enum(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        enum_type: type[Enum],
        default: Enum,
    ) -> Any:
        """Read an enum field by its string value."""

        value = ConfigLoader._optional_non_empty_string(payload, key)
        if value is None:
            return default
        try:
            return enum_type(value.lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in enum_type)
            raise InvalidConfiguration(
                f"{source_label} field `{key}` has unsupported value `{value}`; "
                f"supported: {supported}."
            ) from exc

    @staticmethod
    def _optional_metadata(payload: Mapping[str, Any], source_label: str) -> MetadataOverrides:
        """Read the optional `metadata` mapping with `title` and `author`."""

        raw = payload.get("metadata")
        if raw is None:
            return MetadataOverrides()
        if not isinstance(raw, Mapping):
            raise InvalidConfiguration(f"{source_label} field `metadata` must be a mapping.")
        unknown = sorted(set(map(str, raw)).difference({"title", "author"}))
        if unknown:
            key_list = ", ".join(unknown)
            raise InvalidConfiguration(
                f"{source_label} field `metadata` includes unsupported key(s): {key_list}."
            )
        return MetadataOverrides(
            title=normalize_optional_string(raw.get("title")),
            author=normalize_optional_string(raw.get("author")),
        )
