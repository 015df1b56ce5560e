"""
Content-type classification and confidence scoring for segments.

Classification is checked in priority order: title, list, footer, then
paragraph. Scoring starts from a baseline and adds a length bonus plus a
type-specific bonus, capped at 1.0.
"""

import re

from chunkforge.core.types import SegmentType

LIST_PATTERN = re.compile(r"^(\d+\.|[•\-*]|\([a-z]\)|\([0-9]+\))\s")
DIGITS_ONLY = re.compile(r"^\d+$", re.ASCII)
_TITLE_START = re.compile(r"^[A-Z0-9]")
_FOOTER_PATTERN = re.compile(r"copyright|©|\d{4}|page\s*\d+", re.IGNORECASE)
_ENUMERATOR_START = re.compile(r"^(\d+\.|[•\-*])")

BASELINE_CONFIDENCE = 0.5
LENGTH_BONUS = 0.2
TITLE_BONUS = 0.2
PARAGRAPH_BONUS = 0.2
LIST_BONUS = 0.3
MIN_SCORED_LENGTH = 50
MAX_SCORED_LENGTH = 2000


def is_list_item(text: str) -> bool:
    """Check if text starts with an enumerator followed by whitespace."""
    return bool(LIST_PATTERN.match(text.strip()))


def classify_content(content: str) -> SegmentType:
    """
    Assign a content type to a chunk.

    A chunk that opens with a list enumerator is never a title, so
    "1. First 2. Second" classifies as a list.

    Args:
        content: Chunk text

    Returns:
        SegmentType (never HEADER or TEXT; those come from layout hints)
    """
    trimmed = content.strip()

    if (
        len(trimmed) < 150
        and _TITLE_START.match(trimmed)
        and not trimmed.endswith(".")
        and not LIST_PATTERN.match(trimmed)
    ):
        return SegmentType.TITLE

    if LIST_PATTERN.match(trimmed):
        return SegmentType.LIST

    if len(trimmed) < 100 and (
        DIGITS_ONLY.match(trimmed) or _FOOTER_PATTERN.search(trimmed)
    ):
        return SegmentType.FOOTER

    return SegmentType.PARAGRAPH


def score_confidence(content: str, segment_type: SegmentType) -> float:
    """Heuristic confidence in [0, 1] that a segment is well formed."""
    confidence = BASELINE_CONFIDENCE

    if MIN_SCORED_LENGTH <= len(content) <= MAX_SCORED_LENGTH:
        confidence += LENGTH_BONUS

    if segment_type is SegmentType.TITLE:
        if len(content) < 100 and content[:1].isupper():
            confidence += TITLE_BONUS
    elif segment_type is SegmentType.PARAGRAPH:
        # Two or more periods means at least two sentence breaks
        if content.count(".") >= 2:
            confidence += PARAGRAPH_BONUS
    elif segment_type is SegmentType.LIST:
        if _ENUMERATOR_START.match(content):
            confidence += LIST_BONUS

    return min(round(confidence, 4), 1.0)
