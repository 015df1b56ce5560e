"""
Type definitions for ChunkForge.

Closed enumerations shared by the configuration layer and the chunking
engine, plus the Protocol implemented by text extraction collaborators.

Enum values are the exact strings that downstream consumers (document
storage, embedding generation, segment browsers) read from the serialized
result, so they must not change:

    from chunkforge.core.types import SegmentType, SegmentationStrategy

    if segment.type is SegmentType.LIST:
        ...
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chunkforge.chunking.models import ExtractedDocument


class SegmentType(str, Enum):
    """Content type assigned to a segment by the classifier."""

    TITLE = "title"
    PARAGRAPH = "paragraph"
    LIST = "list"
    FOOTER = "footer"
    HEADER = "header"
    TEXT = "text"


class ExtractionMethod(str, Enum):
    """How the source text was obtained."""

    DEEPDOC = "deepdoc"
    NAIVE = "naive"
    HYBRID = "hybrid"


class SegmentationStrategy(str, Enum):
    """Splitting algorithm used on the default (non-embedding) path."""

    CHARACTER = "character"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"


class TextSplitter(str, Enum):
    """Splitter kind requested by an embedding model configuration."""

    RECURSIVE_CHARACTER = "recursive_character"
    CHARACTER = "character"
    TOKEN = "token"
    MARKDOWN = "markdown"
    PYTHON_CODE = "python_code"


class HierarchyRole(str, Enum):
    """Role of a segment in parent-child chunking."""

    PARENT = "parent"
    CHILD = "child"
    CHUNK = "chunk"


@runtime_checkable
class TextExtractor(Protocol):
    """Collaborator that turns a source file into plain text.

    Implementations raise ExtractionError when the file cannot be read or
    decoded; the engine converts that into an unsuccessful result.
    """

    def extract(self, path: Path) -> "ExtractedDocument":
        """Extract text and basic metadata from a file."""
        ...
