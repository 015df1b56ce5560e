"""
Separator-recursive text splitting.

Wraps langchain's RecursiveCharacterTextSplitter: text is split on the
first separator of a priority-ordered list that occurs in it, small
pieces are merged up to chunk_size, and pieces still too large descend
to the finer separators. The empty-string separator ends the descent
with single characters, so descent depth is bounded by the separator
list.

Markdown and Python source get separator sets that prefer structural
boundaries (headings, class and function definitions) over blank lines:

    >>> splitter = RecursiveSplitter.for_markdown(chunk_size=800, chunk_overlap=80)
    >>> chunks = splitter.split(markdown_text)

Chinese text (see pages.detect_language) is first split after the
sentence terminators 。！？； so chunks end on whole sentences.
"""

import re
from typing import List, Optional, Sequence, Tuple

from langchain_text_splitters import RecursiveCharacterTextSplitter

from chunkforge.chunking.pages import detect_language

GENERIC_SEPARATORS: Tuple[str, ...] = ("\n\n", "\n", " ", "")

MARKDOWN_SEPARATORS: Tuple[str, ...] = (
    "\n# ",
    "\n## ",
    "\n### ",
    "\n#### ",
    "\n##### ",
    "\n###### ",
    "\n\n",
    "\n",
    ". ",
    " ",
    "",
)

PYTHON_SEPARATORS: Tuple[str, ...] = (
    "\nclass ",
    "\ndef ",
    "\n\ndef ",
    "\n\nclass ",
    "\n\n",
    "\n",
    ". ",
    " ",
    "",
)

# Zero-width: splits after the terminator and keeps it on the sentence
CJK_SENTENCE_SEPARATOR = r"(?<=[。！？；])"


class RecursiveSplitter:
    """Separator-priority splitter with carried overlap."""

    def __init__(
        self,
        chunk_size: int,
        chunk_overlap: int = 0,
        separators: Optional[Sequence[str]] = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.chunk_overlap = max(0, min(chunk_overlap, chunk_size - 1))
        self.separators: Tuple[str, ...] = tuple(
            separators if separators else GENERIC_SEPARATORS
        )
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            separators=list(self.separators),
        )
        self._cjk_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            separators=[CJK_SENTENCE_SEPARATOR]
            + [re.escape(s) if s else "" for s in self.separators],
            is_separator_regex=True,
        )

    @classmethod
    def for_markdown(cls, chunk_size: int, chunk_overlap: int = 0) -> "RecursiveSplitter":
        return cls(chunk_size, chunk_overlap, MARKDOWN_SEPARATORS)

    @classmethod
    def for_python(cls, chunk_size: int, chunk_overlap: int = 0) -> "RecursiveSplitter":
        return cls(chunk_size, chunk_overlap, PYTHON_SEPARATORS)

    def split(self, text: str) -> List[str]:
        """Split text into chunks of at most chunk_size where possible."""
        splitter = self._cjk_splitter if detect_language(text) == "zh" else self._splitter
        return [chunk for chunk in splitter.split_text(text) if chunk.strip()]
