"""Frequency-based keyword extraction for segments."""

import re
from collections import Counter
from typing import Tuple

MAX_KEYWORDS = 8
MIN_KEYWORD_LENGTH = 3
MAX_KEYWORD_LENGTH = 19

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
        "for", "of", "with", "by", "is", "are", "was", "were", "be",
        "been", "being", "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should", "may", "might", "must",
        "can", "this", "that", "these", "those",
    }
)  # fmt: skip

_WORD_PATTERN = re.compile(r"[a-z0-9]+")
_ALPHA_PATTERN = re.compile(r"^[a-z]+$")


def extract_keywords(content: str, limit: int = MAX_KEYWORDS) -> Tuple[str, ...]:
    """
    Return the most frequent content words of a text.

    Tokens are lowercased runs of letters and digits; only purely
    alphabetic tokens of 3-19 characters outside the stop-word list count.
    Ties keep first-occurrence order.

    Args:
        content: Text to analyze
        limit: Maximum number of keywords

    Returns:
        Tuple of keywords, most frequent first
    """
    counts: Counter = Counter()
    for token in _WORD_PATTERN.findall(content.lower()):
        if not MIN_KEYWORD_LENGTH <= len(token) <= MAX_KEYWORD_LENGTH:
            continue
        if token in STOP_WORDS or not _ALPHA_PATTERN.match(token):
            continue
        counts[token] += 1

    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return tuple(word for word, _ in ranked[:limit])
