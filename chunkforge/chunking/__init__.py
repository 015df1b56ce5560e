"""
Chunking package: the segmentation engine and its stages.

Public entry point is SegmentationEngine; the stages are importable for
direct use and testing:

    from chunkforge.chunking import SegmentationEngine, SegmentationOptions

    engine = SegmentationEngine()
    result = engine.process(text, SegmentationOptions(max_segment_length=800))
    for segment in result.segments:
        print(segment.position, segment.type.value, segment.keywords)
"""

from chunkforge.chunking.classifier import classify_content, score_confidence
from chunkforge.chunking.coverage import CoverageGuard
from chunkforge.chunking.embedding_mapper import to_segmentation_options
from chunkforge.chunking.engine import SegmentationEngine
from chunkforge.chunking.extractors import PlainTextExtractor
from chunkforge.chunking.hierarchy import build_hierarchy
from chunkforge.chunking.keywords import extract_keywords
from chunkforge.chunking.layout import LayoutAnalysis, LayoutClassifier
from chunkforge.chunking.models import (
    BoundingBox,
    DocumentMetadata,
    ExtractedDocument,
    ParseResult,
    Segment,
    Table,
)
from chunkforge.chunking.overlap import apply_overlap
from chunkforge.chunking.pages import PageLocator, detect_language
from chunkforge.chunking.recursive import RecursiveSplitter
from chunkforge.chunking.segment_builder import SegmentBuilder
from chunkforge.chunking.splitters import (
    CharacterSplitter,
    HybridSplitter,
    ParagraphSplitter,
    SemanticSplitter,
    SentenceSplitter,
    TokenSplitter,
)
from chunkforge.chunking.strategy import select_splitter
from chunkforge.chunking.tables import TableExtractor
from chunkforge.chunking.text_cleaner import clean_text
from chunkforge.core.config import EmbeddingConfig, SegmentationOptions

__all__ = [
    "BoundingBox",
    "CharacterSplitter",
    "CoverageGuard",
    "DocumentMetadata",
    "EmbeddingConfig",
    "ExtractedDocument",
    "HybridSplitter",
    "LayoutAnalysis",
    "LayoutClassifier",
    "PageLocator",
    "ParagraphSplitter",
    "ParseResult",
    "PlainTextExtractor",
    "RecursiveSplitter",
    "Segment",
    "SegmentBuilder",
    "SegmentationEngine",
    "SegmentationOptions",
    "SemanticSplitter",
    "SentenceSplitter",
    "Table",
    "TableExtractor",
    "TokenSplitter",
    "apply_overlap",
    "build_hierarchy",
    "classify_content",
    "clean_text",
    "detect_language",
    "extract_keywords",
    "score_confidence",
    "select_splitter",
    "to_segmentation_options",
]
