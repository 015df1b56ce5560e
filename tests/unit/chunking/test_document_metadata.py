"""Tests for build_metadata."""

from chunkforge.chunking.metadata import build_metadata
from chunkforge.chunking.models import ExtractedDocument
from chunkforge.core.types import ExtractionMethod


class TestBuildMetadata:
    """Tests for document metadata assembly."""

    def test_totals_from_segments(self, make_segment) -> None:
        document = ExtractedDocument(text="one two three four", page_count=3, file_size=18)
        segments = [make_segment("one two", 0), make_segment("three four", 1)]

        metadata = build_metadata(document, segments, 12, ExtractionMethod.HYBRID)

        assert metadata.total_words == 4
        assert metadata.total_tokens == sum(s.token_count for s in segments)
        assert metadata.total_pages == 3
        assert metadata.file_size == 18
        assert metadata.processing_time == 12
        assert metadata.extraction_method is ExtractionMethod.HYBRID
        assert metadata.language == "en"

    def test_extractor_fields_copied(self) -> None:
        document = ExtractedDocument(
            text="body",
            title="Report",
            author="A. Writer",
            creator="Editor",
            creation_date="2024-01-01",
            modification_date="2024-02-01",
        )

        metadata = build_metadata(document, [], 0, ExtractionMethod.NAIVE)

        assert metadata.title == "Report"
        assert metadata.author == "A. Writer"
        assert metadata.creator == "Editor"
        assert metadata.creation_date == "2024-01-01"
        assert metadata.modification_date == "2024-02-01"

    def test_pages_at_least_one(self) -> None:
        document = ExtractedDocument(text="body", page_count=0)

        assert build_metadata(document, [], 0, ExtractionMethod.NAIVE).total_pages == 1

    def test_language_from_given_text(self) -> None:
        document = ExtractedDocument(text="english words")

        metadata = build_metadata(
            document, [], 0, ExtractionMethod.NAIVE, text="中文文本内容"
        )

        assert metadata.language == "zh"
