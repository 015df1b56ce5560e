"""
Shared pytest fixtures and configuration for ChunkForge tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **engine**: Fresh SegmentationEngine
- **sample texts**: Paragraph, list, table and long unbroken documents
- **make_segment**: Segment factory for stage-level tests
- **embedding_config**: Typical embedding model chunking preference
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from chunkforge.chunking.engine import SegmentationEngine
from chunkforge.chunking.models import Segment
from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.types import SegmentType


# ============================================================================
# Path and Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def engine() -> SegmentationEngine:
    return SegmentationEngine()


@pytest.fixture
def embedding_config() -> EmbeddingConfig:
    """800/80 recursive character config for a local model."""
    return EmbeddingConfig.from_payload(
        {
            "model": "Xenova/bge-m3",
            "textSplitter": "recursiveCharacter",
            "chunkSize": 800,
            "chunkOverlap": 80,
        }
    )


# ============================================================================
# Sample Text Fixtures
# ============================================================================


def make_paragraph(seed: str, sentences: int = 4) -> str:
    """Build a paragraph of simple sentences that mention the seed word."""
    return " ".join(
        f"The {seed} report covers item number {i} in plain detail."
        for i in range(1, sentences + 1)
    )


@pytest.fixture
def multi_paragraph_text() -> str:
    """Five paragraphs separated by blank lines, about 300 chars each."""
    seeds = ["budget", "travel", "hiring", "security", "roadmap"]
    return "\n\n".join(make_paragraph(seed, 5) for seed in seeds)


@pytest.fixture
def unbroken_text() -> str:
    """3000+ characters with no periods and no blank lines."""
    words = []
    i = 0
    while len(" ".join(words)) < 3000:
        words.append(f"word{i % 50}alpha")
        i += 1
    return " ".join(words)


@pytest.fixture
def tab_table_text() -> str:
    return "A\tB\tC\nD\tE\tF\n"


@pytest.fixture
def paged_text() -> str:
    """Three pages separated by form feeds."""
    pages = [
        make_paragraph("first", 3),
        make_paragraph("second", 3),
        make_paragraph("third", 3),
    ]
    return "\f".join(pages)


# ============================================================================
# Segment Fixtures
# ============================================================================


@pytest.fixture
def make_segment() -> Callable[..., Segment]:
    """Factory for Segments with sensible defaults."""

    def _make(
        content: str,
        position: int = 0,
        segment_type: SegmentType = SegmentType.PARAGRAPH,
        page_number: int = 1,
    ) -> Segment:
        return Segment(
            id=f"seg_{position}",
            content=content,
            type=segment_type,
            position=position,
            page_number=page_number,
            confidence=0.7,
            keywords=(),
            word_count=len(content.split()),
            token_count=len(content.split()),
        )

    return _make
