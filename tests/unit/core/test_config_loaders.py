"""
Tests for configuration loading.

Test Strategy
-------------
- Test ${VAR} and ${VAR:default} expansion with type coercion
- Test CHUNKFORGE_* overrides and their bounds
- Test YAML loading layouts and error reporting
- Use monkeypatch for the environment and temp_dir for files

Organization
------------
- TestExpandEnvVars: Environment expansion
- TestApplyEnvOverrides: Environment overrides
- TestLoadOptions: YAML loading
- TestSaveOptions: YAML writing
"""

import pytest

from chunkforge.core.config.loaders import (
    apply_env_overrides,
    expand_env_vars,
    load_options,
    save_options,
)
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.exceptions import ConfigValidationError
from chunkforge.core.types import SegmentationStrategy, TextSplitter

ENV_NAMES = [
    "CHUNKFORGE_STRATEGY",
    "CHUNKFORGE_MAX_SEGMENT_LENGTH",
    "CHUNKFORGE_MIN_SEGMENT_LENGTH",
    "CHUNKFORGE_OVERLAP_RATIO",
    "CHUNKFORGE_CONFIDENCE_THRESHOLD",
]


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove CHUNKFORGE_* variables from the environment."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Test Classes
# ============================================================================


class TestExpandEnvVars:
    """Tests for expand_env_vars."""

    def test_variable(self, monkeypatch):
        monkeypatch.setenv("CF_TEST_NAME", "bge")

        assert expand_env_vars("model-${CF_TEST_NAME}") == "model-bge"

    def test_default(self):
        assert expand_env_vars("${CF_TEST_UNSET:fallback}") == "fallback"

    def test_missing_without_default(self):
        assert expand_env_vars("a${CF_TEST_UNSET}b") == "ab"

    def test_whole_value_coerced(self, monkeypatch):
        monkeypatch.setenv("CF_TEST_INT", "1200")

        assert expand_env_vars("${CF_TEST_INT}") == 1200
        assert expand_env_vars("${CF_TEST_UNSET:0.25}") == 0.25
        assert expand_env_vars("${CF_TEST_UNSET:false}") is False

    def test_partial_value_stays_string(self, monkeypatch):
        monkeypatch.setenv("CF_TEST_INT", "12")

        assert expand_env_vars("size-${CF_TEST_INT}") == "size-12"

    def test_nested(self, monkeypatch):
        monkeypatch.setenv("CF_TEST_SIZE", "600")

        data = {"outer": {"size": "${CF_TEST_SIZE}"}, "items": ["${CF_TEST_UNSET:x}"]}

        assert expand_env_vars(data) == {"outer": {"size": 600}, "items": ["x"]}

    def test_plain_values_untouched(self):
        assert expand_env_vars(42) == 42
        assert expand_env_vars("plain") == "plain"


class TestApplyEnvOverrides:
    """Tests for apply_env_overrides."""

    def test_no_environment(self):
        assert apply_env_overrides(SegmentationOptions()) == SegmentationOptions()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CHUNKFORGE_STRATEGY", "Sentence")
        monkeypatch.setenv("CHUNKFORGE_MAX_SEGMENT_LENGTH", "900")
        monkeypatch.setenv("CHUNKFORGE_OVERLAP_RATIO", "0.05")

        options = apply_env_overrides(SegmentationOptions())

        assert options.segmentation_strategy is SegmentationStrategy.SENTENCE
        assert options.max_segment_length == 900
        assert options.overlap_ratio == 0.05

    def test_values_clamped(self, monkeypatch):
        monkeypatch.setenv("CHUNKFORGE_MAX_SEGMENT_LENGTH", "999999")
        monkeypatch.setenv("CHUNKFORGE_OVERLAP_RATIO", "5")
        monkeypatch.setenv("CHUNKFORGE_CONFIDENCE_THRESHOLD", "-1")

        options = apply_env_overrides(SegmentationOptions())

        assert options.max_segment_length == 100000
        assert options.overlap_ratio == 0.99
        assert options.confidence_threshold == 0.0

    def test_bad_values_ignored(self, monkeypatch):
        monkeypatch.setenv("CHUNKFORGE_STRATEGY", "clever")
        monkeypatch.setenv("CHUNKFORGE_MIN_SEGMENT_LENGTH", "lots")
        monkeypatch.setenv("CHUNKFORGE_OVERLAP_RATIO", "nan")

        assert apply_env_overrides(SegmentationOptions()) == SegmentationOptions()


class TestLoadOptions:
    """Tests for load_options."""

    def test_defaults_without_file(self):
        assert load_options() == SegmentationOptions()

    def test_top_level_fields(self, temp_dir):
        path = temp_dir / "options.yaml"
        path.write_text("segmentation_strategy: paragraph\nmax_segment_length: 700\n")

        options = load_options(path)

        assert options.segmentation_strategy is SegmentationStrategy.PARAGRAPH
        assert options.max_segment_length == 700

    def test_segmentation_section(self, temp_dir, monkeypatch):
        monkeypatch.setenv("CF_TEST_MAX", "1500")
        path = temp_dir / "chunkforge.yaml"
        path.write_text(
            "segmentation:\n"
            "  max_segment_length: ${CF_TEST_MAX}\n"
            "  embedding_config:\n"
            "    textSplitter: markdown\n"
            "    chunkSize: 600\n"
            "    chunkOverlap: 60\n"
        )

        options = load_options(path)

        assert options.max_segment_length == 1500
        assert options.embedding_config.text_splitter is TextSplitter.MARKDOWN
        assert options.embedding_config.chunk_overlap == 60

    def test_environment_wins(self, temp_dir, monkeypatch):
        monkeypatch.setenv("CHUNKFORGE_MAX_SEGMENT_LENGTH", "333")
        path = temp_dir / "options.yaml"
        path.write_text("max_segment_length: 700\n")

        assert load_options(path).max_segment_length == 333

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty.yaml"
        path.write_text("")

        assert load_options(path) == SegmentationOptions()

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigValidationError, match="not found"):
            load_options(temp_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("segmentation: [unclosed\n")

        with pytest.raises(ConfigValidationError, match="Could not parse"):
            load_options(path)

    def test_not_a_mapping(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigValidationError, match="mapping"):
            load_options(path)

    def test_section_not_a_mapping(self, temp_dir):
        path = temp_dir / "section.yaml"
        path.write_text("segmentation: hybrid\n")

        with pytest.raises(ConfigValidationError):
            load_options(path)


class TestSaveOptions:
    """Tests for save_options."""

    def test_round_trip(self, temp_dir):
        options = SegmentationOptions(segmentation_strategy="semantic", overlap_ratio=0.2)
        path = temp_dir / "nested" / "saved.yaml"

        save_options(options, path)

        assert path.read_text().startswith("segmentation:")
        assert load_options(path) == options
