"""
Overlap Applier.

Prepends the tail of each segment to the following one so that context
survives chunk boundaries. Works in position order on copies: the tail
comes from the preceding segment as already overlapped, and the input list
is left untouched.
"""

import math
from dataclasses import replace
from typing import List, Sequence

from chunkforge.chunking.models import Segment
from chunkforge.chunking.segment_builder import count_words, estimate_tokens


def apply_overlap(
    segments: Sequence[Segment],
    overlap_ratio: float,
    tokens_by_characters: bool = False,
) -> List[Segment]:
    """
    Return overlapped copies of the segments.

    Args:
        segments: Segments in position order
        overlap_ratio: Fraction of each segment's length to carry forward
        tokens_by_characters: Re-estimate tokens from characters

    Returns:
        New list; the first segment is unchanged
    """
    if overlap_ratio <= 0 or len(segments) < 2:
        return list(segments)

    ordered = sorted(segments, key=lambda s: s.position)
    result: List[Segment] = [ordered[0]]

    for segment in ordered[1:]:
        previous = result[-1]
        overlap_length = math.floor(len(previous.content) * overlap_ratio)
        if overlap_length <= 0:
            result.append(segment)
            continue

        content = f"{previous.content[-overlap_length:]} {segment.content}"
        result.append(
            replace(
                segment,
                content=content,
                word_count=count_words(content),
                token_count=estimate_tokens(content, tokens_by_characters),
            )
        )

    return result
