"""
Hierarchy Builder for parent-child chunking.

Large parent segments give retrieval context, small child segments give
precise matches. Each parent is emitted followed by its children:

    parent (level 1, child_count=n)
      child 1 (level 2, parent_id=parent.id, child_order=1)
      ...
      child n

Children share the parent's position and page. Their content type is
classified normally, but their confidence is scored as a paragraph and
tokens are estimated from characters.
"""

from dataclasses import replace
from typing import List, Sequence

from chunkforge.chunking.classifier import classify_content, score_confidence
from chunkforge.chunking.keywords import extract_keywords
from chunkforge.chunking.models import Segment
from chunkforge.chunking.segment_builder import (
    count_words,
    estimate_tokens,
    generate_segment_id,
)
from chunkforge.chunking.splitters import (
    CharacterSplitter,
    SentenceSplitter,
    Splitter,
    TokenSplitter,
)
from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.logging import get_logger
from chunkforge.core.types import HierarchyRole, SegmentType, TextSplitter

logger = get_logger(__name__)

PARENT_LEVEL = 1
CHILD_LEVEL = 2


def child_splitter(config: EmbeddingConfig) -> Splitter:
    """Fine-grained splitter for child chunks."""
    if config.text_splitter is TextSplitter.CHARACTER:
        return CharacterSplitter(config.chunk_size, config.chunk_overlap)
    if config.text_splitter is TextSplitter.TOKEN:
        return TokenSplitter(config.chunk_size, config.chunk_overlap)
    return SentenceSplitter(config.chunk_size)


def build_hierarchy(
    parents: Sequence[Segment],
    child_config: EmbeddingConfig,
    document_id: str,
) -> List[Segment]:
    """
    Expand parent segments into a parent-child list.

    Args:
        parents: Segments produced with the parent configuration
        child_config: Embedding configuration for the children
        document_id: Identifier mixed into child ids

    Returns:
        Parents, each followed by its children
    """
    splitter = child_splitter(child_config)
    result: List[Segment] = []

    for parent in parents:
        pieces = [piece.strip() for piece in splitter.split(parent.content)]
        pieces = [piece for piece in pieces if piece]

        result.append(
            replace(
                parent,
                segment_type=HierarchyRole.PARENT,
                hierarchy_level=PARENT_LEVEL,
                child_count=len(pieces),
            )
        )

        for order, piece in enumerate(pieces, start=1):
            result.append(
                Segment(
                    id=generate_segment_id(
                        document_id, parent.position, f"{parent.id}:{order}:{piece}"
                    ),
                    content=piece,
                    type=classify_content(piece),
                    position=parent.position,
                    page_number=parent.page_number,
                    confidence=score_confidence(piece, SegmentType.PARAGRAPH),
                    keywords=extract_keywords(piece),
                    word_count=count_words(piece),
                    token_count=estimate_tokens(piece, by_characters=True),
                    parent_id=parent.id,
                    segment_type=HierarchyRole.CHILD,
                    hierarchy_level=CHILD_LEVEL,
                    child_order=order,
                )
            )

    parent_count = sum(1 for s in result if s.segment_type is HierarchyRole.PARENT)
    logger.debug(
        "Built hierarchy",
        document_id=document_id,
        parents=parent_count,
        children=len(result) - parent_count,
    )
    return result


def hierarchy_counts(segments: Sequence[Segment]) -> dict:
    """Parent/child counts for processing metadata."""
    parents = sum(1 for s in segments if s.segment_type is HierarchyRole.PARENT)
    children = sum(1 for s in segments if s.segment_type is HierarchyRole.CHILD)
    return {
        "parentChunks": parents,
        "childChunks": children,
        "totalHierarchicalSegments": len(segments),
    }
