"""
Segment Builder.

Turns candidate chunk strings into typed, scored Segments. A chunk whose
trimmed length is below min_segment_length is discarded.

Keyword extraction and confidence scoring are non-critical: if either
fails on pathological input the segment still gets built with no keywords
or the baseline confidence, and a warning is logged.
"""

import hashlib
import math
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from chunkforge.chunking.classifier import (
    BASELINE_CONFIDENCE,
    classify_content,
    score_confidence,
)
from chunkforge.chunking.keywords import extract_keywords
from chunkforge.chunking.models import Segment
from chunkforge.core.logging import get_logger
from chunkforge.core.types import SegmentType

logger = get_logger(__name__)

WORDS_TO_TOKENS = 0.75


def generate_segment_id(document_id: str, position: int, content: str) -> str:
    """Deterministic segment id from document, position and leading content."""
    hash_input = f"{document_id}_{position}_{content[:50]}"
    return hashlib.md5(hash_input.encode()).hexdigest()[:16]


def count_words(content: str) -> int:
    return len(content.split())


def estimate_tokens(content: str, by_characters: bool = False) -> int:
    """Estimate tokens from words (x0.75) or, if asked, characters (/4)."""
    if by_characters:
        return math.ceil(len(content) / 4)
    return math.ceil(count_words(content) * WORDS_TO_TOKENS)


class SegmentBuilder:
    """Builds Segments for one document."""

    def __init__(
        self,
        document_id: str,
        min_segment_length: int,
        tokens_by_characters: bool = False,
    ) -> None:
        """Initialize builder.

        Args:
            document_id: Identifier mixed into segment ids
            min_segment_length: Shorter chunks (after trimming) are discarded
            tokens_by_characters: Estimate tokens as ceil(len / 4) instead
                of from the word count (embedding-aware path)
        """
        self.document_id = document_id
        self.min_segment_length = min_segment_length
        self.tokens_by_characters = tokens_by_characters

    def build(
        self,
        chunk_text: str,
        position: int,
        page_number: int = 1,
        segment_type: Optional[SegmentType] = None,
    ) -> Optional[Segment]:
        """Build a segment, or None if the chunk is too short.

        Args:
            chunk_text: Candidate chunk
            position: Ordinal within the document
            page_number: Page the chunk starts on
            segment_type: Force a type instead of classifying

        Returns:
            Segment or None
        """
        content = chunk_text.strip()
        if len(content) < self.min_segment_length:
            return None

        seg_type = segment_type or classify_content(content)
        word_count = count_words(content)

        return Segment(
            id=generate_segment_id(self.document_id, position, content),
            content=content,
            type=seg_type,
            position=position,
            page_number=max(1, page_number),
            confidence=self._safe_confidence(content, seg_type),
            keywords=self._safe_keywords(content),
            word_count=word_count,
            token_count=estimate_tokens(content, self.tokens_by_characters),
        )

    def renumber(self, segments: Iterable[Segment]) -> List[Segment]:
        """Copies with contiguous 0-based positions and matching ids."""
        return [
            replace(
                segment,
                position=index,
                id=generate_segment_id(self.document_id, index, segment.content),
            )
            for index, segment in enumerate(segments)
        ]

    def _safe_keywords(self, content: str) -> Tuple[str, ...]:
        try:
            return extract_keywords(content)
        except Exception as e:
            logger.warning(
                "Keyword extraction failed, using none",
                document_id=self.document_id,
                error=str(e),
            )
            return ()

    def _safe_confidence(self, content: str, seg_type: SegmentType) -> float:
        try:
            return score_confidence(content, seg_type)
        except Exception as e:
            logger.warning(
                "Confidence scoring failed, using baseline",
                document_id=self.document_id,
                error=str(e),
            )
            return BASELINE_CONFIDENCE
