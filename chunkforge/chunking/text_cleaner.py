"""
General text cleanup applied before segmentation.

Extracted text tends to carry trailing spaces, indentation and long runs
of whitespace-only lines. Cleaning keeps paragraph breaks (one blank line)
and form feeds, which mark page breaks.
"""

import re

from chunkforge.core.logging import get_logger

logger = get_logger(__name__)

_LINE_EDGE_SPACE = re.compile(r"^[ \t\v]+|[ \t\v]+$", re.MULTILINE)
_INLINE_SPACE = re.compile(r"[ \t\v]{2,}")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def clean_text(text: str) -> str:
    """
    Normalize whitespace without losing paragraph structure.

    - CRLF and CR become LF
    - leading and trailing spaces/tabs are stripped per line
    - runs of spaces/tabs collapse to a single space
    - three or more newlines (blank or whitespace-only lines) collapse to
      one blank line
    - the document is trimmed

    Args:
        text: Raw extracted text

    Returns:
        Cleaned text ("" for blank input)
    """
    if not text or not text.strip():
        return ""

    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _LINE_EDGE_SPACE.sub("", cleaned)
    cleaned = _INLINE_SPACE.sub(" ", cleaned)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    cleaned = cleaned.strip(" \t\n")

    logger.debug("Text cleaned", before=len(text), after=len(cleaned))
    return cleaned
