"""
Coverage Guard.

Detects under-segmentation: a document longer than max_segment_length
that produced fewer than MIN_SEGMENTS segments. The fallback treats every
blank-line separated paragraph as its own chunk and sentence-splits the
ones that are still too long.
"""

import re
from typing import List, Optional, Sequence, Tuple

from chunkforge.chunking.splitters import SentenceSplitter
from chunkforge.core.types import SegmentType

MIN_SEGMENTS = 3

_PARAGRAPH_BOUNDARY = re.compile(r"\n\s*\n")

# (chunk text, forced segment type or None to classify)
FallbackChunk = Tuple[str, Optional[SegmentType]]


class CoverageGuard:
    """Under-segmentation check and fallback split."""

    def __init__(self, max_segment_length: int) -> None:
        self.max_segment_length = max_segment_length
        self._sentences = SentenceSplitter(max_segment_length)

    def needs_fallback(self, segments: Sequence[object], text: str) -> bool:
        return len(segments) < MIN_SEGMENTS and len(text) > self.max_segment_length

    def fallback_chunks(self, text: str) -> List[FallbackChunk]:
        """Paragraph-per-chunk split with sentence fallback.

        Sentence pieces of an oversized paragraph are always paragraphs;
        whole paragraphs are classified normally.
        """
        chunks: List[FallbackChunk] = []
        for raw in _PARAGRAPH_BOUNDARY.split(text):
            paragraph = raw.strip()
            if not paragraph:
                continue
            if len(paragraph) <= self.max_segment_length:
                chunks.append((paragraph, None))
            else:
                chunks.extend(
                    (sentence, SegmentType.PARAGRAPH)
                    for sentence in self._sentences.split(paragraph)
                )
        return chunks
