"""
Tests for SegmentationEngine.

This module tests the engine pipeline end to end on small documents:
option validation, failure results, page attribution, the embedding path
and parent-child chunking.

Test Strategy
-------------
- Test that nothing raises past the engine boundary
- Test processing metadata for each path
- Test determinism and concurrent use of one engine
- Use small synthetic texts built in the test or in conftest.py

Organization
------------
- TestEngineDefaults: Default path results
- TestEngineFailures: Invalid options, empty text and internal errors
- TestEnginePages: Page attribution and document metadata
- TestEmbeddingPath: process_with_embedding_config
- TestParentChild: process_with_parent_child
- TestProcessFile: process_file with extractors
- TestEngineConcurrency: Shared engine across threads
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest

from chunkforge.chunking import engine as engine_module
from chunkforge.chunking.engine import SegmentationEngine
from chunkforge.chunking.models import ExtractedDocument
from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.exceptions import ExtractionError
from chunkforge.core.types import HierarchyRole, SegmentType


# ============================================================================
# Test Helpers
# ============================================================================


def paragraph_options(**overrides) -> SegmentationOptions:
    values = dict(max_segment_length=500, min_segment_length=10, overlap_ratio=0.0)
    values.update(overrides)
    return SegmentationOptions(**values)


# ============================================================================
# Test Classes
# ============================================================================


class TestEngineDefaults:
    """Tests for the default segmentation path."""

    def test_success_result(self, engine, multi_paragraph_text) -> None:
        result = engine.process(multi_paragraph_text)

        assert result.success is True
        assert result.errors == []
        assert result.content == multi_paragraph_text
        assert [s.position for s in result.segments] == list(
            range(len(result.segments))
        )

    def test_processing_metadata(self, engine, multi_paragraph_text) -> None:
        result = engine.process(multi_paragraph_text)

        meta = result.processing_metadata
        assert meta["strategy"] == "hybrid"
        assert meta["coverageFallback"] is False
        assert meta["preOverlapSegments"] == len(result.pre_overlap_segments)
        assert set(meta["layout"]) == {
            "titles",
            "paragraphs",
            "lists",
            "headers",
            "footers",
        }
        assert "embeddingModel" not in meta

    def test_overlap_applied_on_copies(self, engine, multi_paragraph_text) -> None:
        result = engine.process(
            multi_paragraph_text, paragraph_options(overlap_ratio=0.2)
        )

        before = result.pre_overlap_segments
        after = result.segments
        assert len(before) == len(after) > 1
        assert after[0].content == before[0].content
        assert after[1].content.endswith(before[1].content)
        assert len(after[1].content) > len(before[1].content)

    def test_no_overlap_when_ratio_zero(self, engine, multi_paragraph_text) -> None:
        result = engine.process(multi_paragraph_text, paragraph_options())

        assert result.segments == result.pre_overlap_segments

    def test_deterministic(self, engine, multi_paragraph_text) -> None:
        first = engine.process(multi_paragraph_text, document_id="doc")
        second = engine.process(multi_paragraph_text, document_id="doc")

        assert [s.to_dict() for s in first.segments] == [
            s.to_dict() for s in second.segments
        ]

    def test_default_document_id_from_text(self, engine) -> None:
        text = "Some body text that is long enough to be kept as a segment."

        first = engine.process(text)
        second = engine.process(text)

        assert first.segments[0].id == second.segments[0].id

    def test_short_document_kept(self, engine) -> None:
        result = engine.process("Short note")

        assert result.success is True
        assert len(result.segments) == 1
        assert result.segments[0].content == "Short note"
        assert result.segments[0].type is SegmentType.TITLE

    def test_coverage_fallback(self, engine) -> None:
        text = ("Alpha words go here. " * 15).strip()
        text = f"{text}\n\n{text.replace('Alpha', 'Beta')}"

        result = engine.process(text, paragraph_options())

        assert result.processing_metadata["coverageFallback"] is True
        assert len(result.segments) == 2

    def test_short_closing_line_kept(self, engine) -> None:
        body = ("The board reviewed the annual budget in detail. " * 6).strip()
        options = SegmentationOptions(
            max_segment_length=1000, min_segment_length=50, overlap_ratio=0.0
        )

        result = engine.process(f"{body}\n\nSigned by the board.", options)

        assert len(result.segments) == 1
        assert "Signed by the board." in result.segments[0].content

    def test_tables_extracted(self, engine, tab_table_text) -> None:
        result = engine.process(tab_table_text)

        assert len(result.tables) == 1
        assert result.tables[0].rows == 2

    def test_tables_disabled(self, engine, tab_table_text) -> None:
        options = SegmentationOptions(enable_table_extraction=False)

        assert engine.process(tab_table_text, options).tables == []

    def test_raw_text_cleaning_can_be_disabled(self, engine) -> None:
        text = "Heading   with   spaces"

        cleaned = engine.process(text, paragraph_options())
        raw = engine.process(text, paragraph_options(clean_text=False))

        assert cleaned.segments[0].content == "Heading with spaces"
        assert raw.segments[0].content == "Heading with spaces"
        assert raw.processing_metadata["layout"]["titles"] == 1

    def test_default_options_from_constructor(self, multi_paragraph_text) -> None:
        engine = SegmentationEngine(
            default_options=SegmentationOptions(segmentation_strategy="sentence")
        )

        result = engine.process(multi_paragraph_text)

        assert result.processing_metadata["strategy"] == "sentence"


class TestEngineFailures:
    """Tests for failure results."""

    def test_min_not_below_max(self, engine) -> None:
        options = SegmentationOptions(max_segment_length=100, min_segment_length=100)

        result = engine.process("Some text to chunk.", options)

        assert result.success is False
        assert result.segments == []
        assert "min_segment_length" in result.errors[0]

    def test_overlap_out_of_range(self, engine) -> None:
        result = engine.process("Some text.", SegmentationOptions(overlap_ratio=1.0))

        assert result.success is False
        assert "overlap_ratio" in result.errors[0]

    @pytest.mark.parametrize("text", ["", "   \n\t  "])
    def test_empty_text(self, engine, text) -> None:
        result = engine.process(text, file_size=42)

        assert result.success is False
        assert "no text content" in result.errors[0]
        assert result.metadata.total_words == 0
        assert result.metadata.total_pages == 0
        assert result.metadata.file_size == 42

    def test_unexpected_error_reported(self, multi_paragraph_text) -> None:
        tables = Mock()
        tables.extract.side_effect = RuntimeError("boom")
        engine = SegmentationEngine(table_extractor=tables)

        result = engine.process(multi_paragraph_text)

        assert result.success is False
        assert result.errors == ["Segmentation failed: boom"]
        assert result.content == multi_paragraph_text

    def test_splitter_value_error_is_chunking_error(
        self, engine, monkeypatch, multi_paragraph_text
    ) -> None:
        broken = Mock()
        broken.split.side_effect = ValueError("bad size")
        monkeypatch.setattr(engine_module, "select_splitter", lambda options: broken)

        result = engine.process(multi_paragraph_text)

        assert result.success is False
        assert "Could not split document" in result.errors[0]


class TestEnginePages:
    """Tests for page attribution and metadata."""

    def test_page_numbers(self, engine, paged_text) -> None:
        options = paragraph_options(max_segment_length=200)

        result = engine.process(paged_text, options, page_count=3)

        assert [s.page_number for s in result.segments] == [1, 2, 3]
        assert result.metadata.total_pages == 3

    def test_metadata_totals(self, engine, multi_paragraph_text) -> None:
        result = engine.process(multi_paragraph_text)

        meta = result.metadata
        assert meta.total_words == sum(s.word_count for s in result.segments)
        assert meta.total_tokens == sum(s.token_count for s in result.segments)
        assert meta.file_size == len(multi_paragraph_text.encode("utf-8"))
        assert meta.language == "en"
        assert meta.processing_time >= 0

    def test_extracted_document_metadata(self, engine) -> None:
        document = ExtractedDocument(
            text="A body of text long enough to keep. It has two sentences.",
            page_count=4,
            file_size=999,
            title="Quarterly",
            author="Finance",
        )

        result = engine.process(document)

        assert result.metadata.title == "Quarterly"
        assert result.metadata.author == "Finance"
        assert result.metadata.file_size == 999
        assert result.metadata.total_pages == 4


class TestEmbeddingPath:
    """Tests for process_with_embedding_config."""

    def test_recursive_chunks(self, engine, embedding_config, multi_paragraph_text) -> None:
        result = engine.process_with_embedding_config(
            multi_paragraph_text, embedding_config
        )

        assert result.success is True
        assert len(result.segments) == 3
        assert all(len(s.content) <= 800 for s in result.segments)
        meta = result.processing_metadata
        assert meta["strategy"] == "embedding:recursive_character"
        assert meta["embeddingModel"] == "Xenova/bge-m3"
        assert meta["droppedLowConfidence"] == 0

    def test_tokens_by_characters(self, engine, embedding_config, multi_paragraph_text) -> None:
        result = engine.process_with_embedding_config(
            multi_paragraph_text, embedding_config
        )

        for segment in result.segments:
            assert segment.token_count == -(-len(segment.content) // 4)

    def test_overlap_from_splitter_only(
        self, engine, embedding_config, multi_paragraph_text
    ) -> None:
        result = engine.process_with_embedding_config(
            multi_paragraph_text, embedding_config
        )

        assert result.segments == result.pre_overlap_segments

    def test_overlap_applied_after_coverage_fallback(self, engine) -> None:
        text = " ".join(f"word{i}" for i in range(200))
        config = EmbeddingConfig(
            chunk_size=1000, chunk_overlap=100, confidence_threshold=0.0
        )

        result = engine.process_with_embedding_config(text, config)

        assert result.processing_metadata["coverageFallback"] is True
        before = result.pre_overlap_segments
        after = result.segments
        assert len(before) == len(after) == 2
        assert after[0].content == before[0].content
        assert before[0].content.split()[-1] in after[1].content
        assert after[1].content.endswith(before[1].content)
        for segment in after:
            assert segment.token_count == -(-len(segment.content) // 4)

    def test_chinese_chunks_end_on_terminators(self, engine) -> None:
        text = "这是一个关于预算的句子。" * 30
        config = EmbeddingConfig(
            chunk_size=100, chunk_overlap=0, confidence_threshold=0.0
        )

        result = engine.process_with_embedding_config(text, config)

        assert result.success is True
        assert len(result.segments) >= 3
        assert all(s.content.endswith("。") for s in result.segments)

    def test_confidence_gate(self, engine, multi_paragraph_text) -> None:
        config = EmbeddingConfig(chunk_size=800, chunk_overlap=80, confidence_threshold=0.95)

        result = engine.process_with_embedding_config(multi_paragraph_text, config)

        assert result.success is True
        assert result.segments == []
        assert result.processing_metadata["droppedLowConfidence"] == 3

    def test_invalid_config_rejected(self, engine, multi_paragraph_text) -> None:
        config = EmbeddingConfig(chunk_size=200, chunk_overlap=150)

        result = engine.process_with_embedding_config(multi_paragraph_text, config)

        assert result.success is False
        assert "embedding_config" in result.errors[0]


class TestParentChild:
    """Tests for process_with_parent_child."""

    def test_hierarchy(self, engine, embedding_config, multi_paragraph_text) -> None:
        child_config = EmbeddingConfig(chunk_size=200, chunk_overlap=20)

        result = engine.process_with_parent_child(
            multi_paragraph_text, embedding_config, child_config
        )

        assert result.success is True
        counts = result.processing_metadata["hierarchicalChunking"]
        assert counts["parentChunks"] == 3
        assert counts["childChunks"] > counts["parentChunks"]
        assert counts["totalHierarchicalSegments"] == len(result.segments)
        assert result.segments[0].segment_type is HierarchyRole.PARENT
        assert result.segments[1].parent_id == result.segments[0].id

    def test_totals_recomputed(self, engine, embedding_config, multi_paragraph_text) -> None:
        child_config = EmbeddingConfig(chunk_size=200, chunk_overlap=20)

        result = engine.process_with_parent_child(
            multi_paragraph_text, embedding_config, child_config
        )

        assert result.metadata.total_words == sum(s.word_count for s in result.segments)

    def test_invalid_child_config(self, engine, embedding_config, multi_paragraph_text) -> None:
        child_config = EmbeddingConfig(chunk_size=50, chunk_overlap=0)

        result = engine.process_with_parent_child(
            multi_paragraph_text, embedding_config, child_config
        )

        assert result.success is False
        assert "child" in result.errors[0]

    def test_parent_failure_passed_through(self, engine, embedding_config) -> None:
        child_config = EmbeddingConfig(chunk_size=200, chunk_overlap=20)

        result = engine.process_with_parent_child("", embedding_config, child_config)

        assert result.success is False
        assert "hierarchicalChunking" not in result.processing_metadata


class TestProcessFile:
    """Tests for process_file."""

    def test_text_file(self, engine, temp_dir, multi_paragraph_text) -> None:
        path = temp_dir / "report.txt"
        path.write_text(multi_paragraph_text, encoding="utf-8")

        result = engine.process_file(path)

        assert result.success is True
        assert result.metadata.title == "report"
        assert result.segments

    def test_missing_file(self, engine, temp_dir) -> None:
        result = engine.process_file(temp_dir / "missing.txt")

        assert result.success is False
        assert result.content == ""
        assert "File not found" in result.errors[0]
        assert result.metadata.file_size == 0

    def test_extractor_error(self, engine, temp_dir) -> None:
        extractor = Mock()
        extractor.extract.side_effect = ExtractionError("scanned PDF has no text")

        result = engine.process_file(temp_dir / "scan.pdf", extractor=extractor)

        assert result.errors == ["scanned PDF has no text"]

    def test_extractor_unexpected_error(self, engine, temp_dir) -> None:
        extractor = Mock()
        extractor.extract.side_effect = OSError("disk gone")

        result = engine.process_file(temp_dir / "scan.pdf", extractor=extractor)

        assert result.success is False
        assert "Extraction failed for scan.pdf" in result.errors[0]


class TestEngineConcurrency:
    """Tests for concurrent use of one engine."""

    def test_parallel_calls_match(self, engine, multi_paragraph_text) -> None:
        texts = [multi_paragraph_text.replace("budget", f"budget{i}") for i in range(8)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = list(pool.map(engine.process, texts))
        sequential = [engine.process(text) for text in texts]

        for left, right in zip(parallel, sequential):
            assert [s.to_dict() for s in left.segments] == [
                s.to_dict() for s in right.segments
            ]
