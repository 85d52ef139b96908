"""CLI error-handling tests for concise stage diagnostics."""

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from booksegmenter.cli import app
from booksegmenter.errors import PipelineStageError


def test_parse_command_reports_stage_error_with_hint(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Parse command should print stage-aware diagnostics and fail with exit code 1."""

    def _failing_run(*_: object, **__: object) -> None:
        """Raise a stage-specific error to simulate pipeline failure."""

        raise PipelineStageError(
            stage="detect",
            detail="Failed to detect chapters: boom.",
            hint="Check `chapter_patterns` and `exclude_patterns` in the book config.",
        )

    monkeypatch.setattr("booksegmenter.cli.BookSegmenterPipeline.run", _failing_run)
    runner = CliRunner()

    result = runner.invoke(app, ["parse", str(tmp_path / "book.txt")])

    assert result.exit_code == 1
    assert "parse failed at stage `detect`: Failed to detect chapters: boom." in result.output
    assert "Hint: Check `chapter_patterns` and `exclude_patterns` in the book config." in (
        result.output
    )


def test_parse_command_reports_missing_input(tmp_path: Path) -> None:
    """A missing input file fails at the extract stage."""

    runner = CliRunner()

    result = runner.invoke(app, ["parse", str(tmp_path / "missing.txt")])

    assert result.exit_code == 1
    assert "parse failed at stage `extract`" in result.output
    assert not (tmp_path / "missing.segmented.json").exists()


def test_parse_command_rejects_invalid_word_bounds(tmp_path: Path) -> None:
    """Inverted word bounds fail at the config stage before reading input."""

    input_path = tmp_path / "book.txt"
    input_path.write_text("Some text.", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["parse", str(input_path), "--min-words", "20", "--max-words", "10"],
    )

    assert result.exit_code == 1
    assert "parse failed at stage `config`" in result.output
    assert "must not exceed" in result.output


def test_chapters_command_reports_invalid_config_file(tmp_path: Path) -> None:
    """Unknown config keys are reported as config stage failures."""

    input_path = tmp_path / "book.txt"
    input_path.write_text("Some text.", encoding="utf-8")
    config_path = tmp_path / "book.json"
    config_path.write_text('{"chapterTitles": ["Intro"]}', encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["chapters", str(input_path), "--config", str(config_path)])

    assert result.exit_code == 1
    assert "chapters failed at stage `config`" in result.output
    assert "chapterTitles" in result.output


def test_chunk_command_reports_unreadable_input(tmp_path: Path) -> None:
    """Undecodable input files are reported as extract stage failures."""

    input_path = tmp_path / "binary.txt"
    input_path.write_bytes(b"\xff\xfe\xfa")
    runner = CliRunner()

    result = runner.invoke(app, ["chunk", str(input_path)])

    assert result.exit_code == 1
    assert "chunk failed at stage `extract`" in result.output


def test_chunk_command_reports_non_stage_error(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Unexpected exceptions are still reported with exit code 1."""

    def _failing_chunk(*_: object, **__: object) -> None:
        """Raise a generic error to verify fallback CLI diagnostics."""

        raise RuntimeError("unexpected chunker error")

    input_path = tmp_path / "book.txt"
    input_path.write_text("Some text.", encoding="utf-8")
    monkeypatch.setattr("booksegmenter.cli.TextChunker.chunk", _failing_chunk)
    runner = CliRunner()

    result = runner.invoke(app, ["chunk", str(input_path)])

    assert result.exit_code == 1
    assert "chunk failed: unexpected chunker error" in result.output
