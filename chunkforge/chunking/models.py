"""
Data model for the segmentation engine.

Every value here is created fresh per engine invocation and never mutated
afterwards. Segment and Table are frozen; stages that "change" a segment
(overlap injection, hierarchy building) produce copies with
dataclasses.replace().

to_dict() methods render the camelCase wire contract consumed by document
storage and embedding generation:

    result = engine.process(document, options)
    payload = result.to_dict()
    payload["segments"][0]["pageNumber"]
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from chunkforge.core.types import ExtractionMethod, HierarchyRole, SegmentType


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle on a page, in source coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float
    width: float
    height: float

    @classmethod
    def unit(cls) -> "BoundingBox":
        """Default box for content without geometry."""
        return cls(x0=0, y0=0, x1=100, y1=100, width=100, height=100)

    def to_dict(self) -> Dict[str, float]:
        return {
            "x0": self.x0,
            "y0": self.y0,
            "x1": self.x1,
            "y1": self.y1,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class Segment:
    """One classified, scored unit of document text."""

    id: str
    content: str
    type: SegmentType
    position: int
    page_number: int = 1
    confidence: float = 0.5
    keywords: Tuple[str, ...] = ()
    word_count: int = 0
    token_count: int = 0
    bounding_box: Optional[BoundingBox] = None

    # Parent-child chunking
    parent_id: Optional[str] = None
    segment_type: Optional[HierarchyRole] = None
    hierarchy_level: Optional[int] = None
    child_order: Optional[int] = None
    child_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "type": self.type.value,
            "position": self.position,
            "pageNumber": self.page_number,
            "confidence": self.confidence,
            "keywords": list(self.keywords),
            "wordCount": self.word_count,
            "tokenCount": self.token_count,
        }
        if self.bounding_box is not None:
            data["boundingBox"] = self.bounding_box.to_dict()

        hierarchy = {
            "parentId": self.parent_id,
            "segmentType": self.segment_type.value if self.segment_type else None,
            "hierarchyLevel": self.hierarchy_level,
            "childOrder": self.child_order,
            "childCount": self.child_count,
        }
        data.update({k: v for k, v in hierarchy.items() if v is not None})
        return data


@dataclass(frozen=True)
class Table:
    """Table detected in the text, normalized to a rectangular matrix."""

    id: str
    page_number: int
    bounding_box: BoundingBox
    rows: int
    columns: int
    content: Tuple[Tuple[str, ...], ...]
    html_content: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pageNumber": self.page_number,
            "boundingBox": self.bounding_box.to_dict(),
            "rows": self.rows,
            "columns": self.columns,
            "content": [list(row) for row in self.content],
            "htmlContent": self.html_content,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class DocumentMetadata:
    """Document-level statistics and extractor metadata."""

    total_pages: int = 0
    total_words: int = 0
    total_tokens: int = 0
    file_size: int = 0
    processing_time: int = 0  # ms
    extraction_method: ExtractionMethod = ExtractionMethod.NAIVE
    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    language: Optional[str] = None

    @classmethod
    def empty(cls, file_size: int = 0, processing_time: int = 0) -> "DocumentMetadata":
        """Zeroed metadata for a failed extraction."""
        return cls(
            file_size=file_size,
            processing_time=processing_time,
            extraction_method=ExtractionMethod.NAIVE,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "totalPages": self.total_pages,
            "totalWords": self.total_words,
            "totalTokens": self.total_tokens,
            "fileSize": self.file_size,
            "processingTime": self.processing_time,
            "extractionMethod": self.extraction_method.value,
        }
        optional = {
            "title": self.title,
            "author": self.author,
            "creator": self.creator,
            "creationDate": self.creation_date,
            "modificationDate": self.modification_date,
            "language": self.language,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class ExtractedDocument:
    """Output of a text extraction collaborator, the engine's only input."""

    text: str
    page_count: int = 1
    file_size: int = 0
    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    document_id: Optional[str] = None


@dataclass
class ParseResult:
    """Engine output."""

    success: bool
    content: str
    segments: List[Segment] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    errors: List[str] = field(default_factory=list)
    processing_metadata: Dict[str, Any] = field(default_factory=dict)
    # Segments before overlap injection; not serialized
    pre_overlap_segments: List[Segment] = field(default_factory=list, repr=False)

    @classmethod
    def failure(
        cls,
        content: str,
        error: str,
        file_size: int = 0,
        processing_time: int = 0,
    ) -> "ParseResult":
        """Unsuccessful result: no segments, no tables, zeroed metadata."""
        return cls(
            success=False,
            content=content,
            metadata=DocumentMetadata.empty(file_size, processing_time),
            errors=[error],
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "content": self.content,
            "segments": [s.to_dict() for s in self.segments],
            "tables": [t.to_dict() for t in self.tables],
            "metadata": self.metadata.to_dict(),
        }
        if self.errors:
            data["errors"] = list(self.errors)
        if self.processing_metadata:
            data["processingMetadata"] = self.processing_metadata
        return data
