"""
Tests for the ChunkForge CLI.

Test Strategy
-------------
- Invoke commands through typer's CliRunner
- Test option resolution separately from command output
- Test exit codes for failures

Organization
------------
- TestResolveOptions: _resolve_options helper
- TestVersion: --version callback
- TestChunkCommand: 'chunk' command
- TestTablesCommand: 'tables' command
- TestErrorRenderer: Error panels
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from chunkforge import __version__
from chunkforge.cli.console import ErrorRenderer, get_console
from chunkforge.cli.main import _resolve_options, app
from chunkforge.core.exceptions import ConfigValidationError
from chunkforge.core.types import SegmentationStrategy, TextSplitter

runner = CliRunner()


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def text_file(temp_dir, multi_paragraph_text):
    path = temp_dir / "report.txt"
    path.write_text(multi_paragraph_text, encoding="utf-8")
    return path


# ============================================================================
# Test Classes
# ============================================================================


class TestResolveOptions:
    """Tests for _resolve_options helper."""

    def test_flags_override_defaults(self) -> None:
        options = _resolve_options(
            None, SegmentationStrategy.SENTENCE, 900, 20, 0.0, None, None, None
        )

        assert options.segmentation_strategy is SegmentationStrategy.SENTENCE
        assert options.max_segment_length == 900
        assert options.min_segment_length == 20
        assert options.overlap_ratio == 0.0
        assert options.embedding_config is None

    def test_embedding_flags_switch_path(self) -> None:
        options = _resolve_options(
            None, None, None, None, None, TextSplitter.MARKDOWN, 600, 60
        )

        assert options.embedding_config is not None
        assert options.embedding_config.text_splitter is TextSplitter.MARKDOWN
        assert options.max_segment_length == 600
        assert options.overlap_ratio == pytest.approx(0.1)

    def test_yaml_embedding_config_merged(self, temp_dir) -> None:
        path = temp_dir / "options.yaml"
        path.write_text(
            "embedding_config:\n  textSplitter: token\n  chunkSize: 500\n"
        )

        options = _resolve_options(path, None, None, None, None, None, 800, None)

        assert options.embedding_config.text_splitter is TextSplitter.TOKEN
        assert options.embedding_config.chunk_size == 800

    def test_missing_config(self, temp_dir) -> None:
        with pytest.raises(ConfigValidationError):
            _resolve_options(
                temp_dir / "nope.yaml", None, None, None, None, None, None, None
            )


class TestVersion:
    """Tests for the --version callback."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"ChunkForge {__version__}" in result.stdout


class TestChunkCommand:
    """Tests for 'chunk' command."""

    def test_summary(self, text_file) -> None:
        result = runner.invoke(app, ["chunk", str(text_file)])

        assert result.exit_code == 0
        assert "segments" in result.stdout

    def test_json_output(self, text_file) -> None:
        result = runner.invoke(
            app, ["chunk", str(text_file), "--json", "--overlap", "0"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["segments"][0]["position"] == 0
        assert "pageNumber" in payload["segments"][0]

    def test_output_file(self, text_file, temp_dir) -> None:
        out = temp_dir / "out" / "result.json"

        result = runner.invoke(app, ["chunk", str(text_file), "-o", str(out)])

        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["success"] is True

    def test_embedding_flags(self, text_file) -> None:
        result = runner.invoke(
            app,
            [
                "chunk",
                str(text_file),
                "--splitter",
                "recursive_character",
                "--chunk-size",
                "800",
                "--chunk-overlap",
                "80",
                "--json",
            ],
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["processingMetadata"]["strategy"] == "embedding:recursive_character"

    def test_missing_file_fails(self, temp_dir) -> None:
        result = runner.invoke(app, ["chunk", str(temp_dir / "missing.txt")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_invalid_options_fail(self, text_file) -> None:
        result = runner.invoke(
            app, ["chunk", str(text_file), "--max-length", "10", "--min-length", "20"]
        )

        assert result.exit_code == 1
        assert "min_segment_length" in result.stdout

    def test_bad_config_file(self, text_file, temp_dir) -> None:
        result = runner.invoke(
            app, ["chunk", str(text_file), "--config", str(temp_dir / "nope.yaml")]
        )

        assert result.exit_code == 1
        assert "CF-VAL-001" in result.stdout


class TestTablesCommand:
    """Tests for 'tables' command."""

    def test_tables(self, temp_dir, tab_table_text) -> None:
        path = temp_dir / "data.txt"
        path.write_text(tab_table_text, encoding="utf-8")

        result = runner.invoke(app, ["tables", str(path)])

        assert result.exit_code == 0
        assert "table_1" in result.stdout

    def test_tables_html(self, temp_dir, tab_table_text) -> None:
        path = temp_dir / "data.txt"
        path.write_text(tab_table_text, encoding="utf-8")

        result = runner.invoke(app, ["tables", str(path), "--html"])

        assert "<th>A</th>" in result.stdout

    def test_no_tables(self, temp_dir) -> None:
        path = temp_dir / "prose.txt"
        path.write_text("Only prose here.", encoding="utf-8")

        result = runner.invoke(app, ["tables", str(path)])

        assert "No tables found" in result.stdout

    def test_missing_file(self, temp_dir) -> None:
        result = runner.invoke(app, ["tables", str(temp_dir / "missing.txt")])

        assert result.exit_code == 1
        assert "CF-PROC-001" in result.stdout


class TestErrorRenderer:
    """Tests for ErrorRenderer.render."""

    def test_panel_contents(self) -> None:
        console = get_console()
        error = ConfigValidationError("overlap_ratio must be within [0, 1)")

        with console.capture() as capture:
            ErrorRenderer.render(error, context="While loading options")

        output = capture.get()
        assert "CF-VAL-001" in output
        assert "How to fix" in output
        assert "While loading options" in output

    def test_unknown_exception(self) -> None:
        console = get_console()

        with console.capture() as capture:
            ErrorRenderer.render(RuntimeError("boom"), show_traceback=False)

        assert "CF-ERR-999" in capture.get()
