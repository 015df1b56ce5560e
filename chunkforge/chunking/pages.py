"""
Page attribution and language detection.

Extracted text marks page breaks with form feeds (\\f). PageLocator finds
where each chunk starts in the source and counts the form feeds before it.
Chunks are looked up in order with a forward-moving cursor, so repeated
phrases resolve to the occurrence after the previous chunk.
"""

import re
from typing import Optional

LEADING_TOKENS = 3
CJK_THRESHOLD = 0.3

_CJK_CHAR = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]")


class PageLocator:
    """Maps chunk text to the page it starts on."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._cursor = 0
        self._last_page = 1
        self._paged = "\f" in text

    def locate(self, chunk: str) -> int:
        """Page number (1-based) of the chunk's first words."""
        if not self._paged:
            return 1

        tokens = chunk.split()[:LEADING_TOKENS]
        if not tokens:
            return self._last_page

        pattern = re.compile(r"\s+".join(re.escape(token) for token in tokens))
        match = pattern.search(self.text, self._cursor)
        if match is None:
            match = pattern.search(self.text)
        if match is None:
            return self._last_page

        self._cursor = match.start() + 1
        self._last_page = 1 + self.text.count("\f", 0, match.start())
        return self._last_page


def detect_language(text: str) -> Optional[str]:
    """
    Best-effort language code.

    Returns "zh" when CJK ideographs make up at least 30% of the
    non-whitespace characters, "en" otherwise, None for empty text.
    """
    visible = [ch for ch in text if not ch.isspace()]
    if not visible:
        return None
    cjk = sum(1 for ch in visible if _CJK_CHAR.match(ch))
    return "zh" if cjk / len(visible) >= CJK_THRESHOLD else "en"
