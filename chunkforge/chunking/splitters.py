"""
Text splitters.

Each splitter turns a text into an ordered list of chunk strings. Chunks
stay within the configured maximum length unless a single indivisible
unit (one word, or a window of the character splitter) is longer.

Splitters
---------
CharacterSplitter
    Fixed-size sliding window with overlap.
TokenSplitter
    Character window sized in estimated tokens (4 characters per token).
SentenceSplitter
    Greedy packing of sentences; oversized sentences split between words.
ParagraphSplitter
    Greedy packing of blank-line separated paragraphs; oversized
    paragraphs fall back to the sentence splitter.
HybridSplitter
    Paragraph splitting followed by a sentence re-split of anything still
    oversized. The default strategy.
SemanticSplitter
    Named strategy, currently paragraph splitting.

The separator-recursive splitter lives in chunking.recursive.
"""

import re
from typing import List, Optional, Protocol

CHARS_PER_TOKEN = 4

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")
_PARAGRAPH_BOUNDARY = re.compile(r"\n\s*\n")
_WHITESPACE = re.compile(r"\s+")


class Splitter(Protocol):
    """Anything that splits text into chunk strings."""

    def split(self, text: str) -> List[str]:
        ...


def split_long_sentence(sentence: str, max_length: int) -> List[str]:
    """Pack the words of an oversized sentence into chunks.

    Words are never broken; a single word longer than max_length becomes
    its own chunk.
    """
    chunks: List[str] = []
    current = ""

    for word in sentence.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_length:
            current = candidate
            continue
        if current:
            chunks.append(current)
        current = word

    if current:
        chunks.append(current)
    return chunks


class CharacterSplitter:
    """Fixed-size sliding window.

    The window advances by chunk_size - chunk_overlap characters. Overlap
    is clamped below chunk_size so the window always moves forward.
    Windows whose stripped length is below min_chunk_length are dropped.
    """

    def __init__(
        self, chunk_size: int, chunk_overlap: int = 0, min_chunk_length: int = 1
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.chunk_overlap = max(0, min(chunk_overlap, chunk_size - 1))
        self.min_chunk_length = min_chunk_length

    def split(self, text: str) -> List[str]:
        chunks: List[str] = []
        step = self.chunk_size - self.chunk_overlap
        start = 0

        while start < len(text):
            end = min(start + self.chunk_size, len(text))
            chunks.append(text[start:end])
            if end == len(text):
                break
            start += step

        return [c for c in chunks if len(c.strip()) >= self.min_chunk_length]


class TokenSplitter(CharacterSplitter):
    """Character window with size and overlap given in estimated tokens."""

    def __init__(self, chunk_size: int, chunk_overlap: int = 0) -> None:
        super().__init__(chunk_size * CHARS_PER_TOKEN, chunk_overlap * CHARS_PER_TOKEN)


class SentenceSplitter:
    """Greedy sentence packing bounded by max_length."""

    def __init__(self, max_length: int) -> None:
        self.max_length = max_length

    def split(self, text: str) -> List[str]:
        sentences = [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]
        chunks: List[str] = []
        current = ""

        for sentence in sentences:
            candidate = f"{current} {sentence}" if current else sentence
            if len(candidate) <= self.max_length:
                current = candidate
                continue

            if current:
                chunks.append(current)
            if len(sentence) > self.max_length:
                chunks.extend(split_long_sentence(sentence, self.max_length))
                current = ""
            else:
                current = sentence

        if current:
            chunks.append(current)
        return [c for c in chunks if c.strip()]


class ParagraphSplitter:
    """Greedy paragraph packing bounded by max_length.

    Paragraphs are separated by blank lines; internal whitespace is
    collapsed to single spaces and packed paragraphs are joined with a
    blank line.

    With a target_length, a chunk that has already reached it is flushed
    before the next paragraph is added, so only short paragraphs (headings,
    captions) get packed together with their neighbours. A flushed chunk
    still below target_length is appended to the previous chunk when the
    pair fits in max_length, so a short closing line is not left alone.
    """

    def __init__(self, max_length: int, target_length: Optional[int] = None) -> None:
        self.max_length = max_length
        self.target_length = max_length if target_length is None else target_length
        self._sentences = SentenceSplitter(max_length)

    def split(self, text: str) -> List[str]:
        paragraphs = [
            _WHITESPACE.sub(" ", p).strip()
            for p in _PARAGRAPH_BOUNDARY.split(text)
            if p.strip()
        ]
        chunks: List[str] = []
        current = ""

        for paragraph in paragraphs:
            candidate = f"{current}\n\n{paragraph}" if current else paragraph
            below_target = not current or len(current) < self.target_length
            if below_target and len(candidate) <= self.max_length:
                current = candidate
                continue

            if current:
                self._emit(chunks, current)
            if len(paragraph) > self.max_length:
                chunks.extend(self._sentences.split(paragraph))
                current = ""
            else:
                current = paragraph

        if current:
            self._emit(chunks, current)
        return [c for c in chunks if c.strip()]

    def _emit(self, chunks: List[str], chunk: str) -> None:
        if chunks and len(chunk) < self.target_length:
            merged = f"{chunks[-1]}\n\n{chunk}"
            if len(merged) <= self.max_length:
                chunks[-1] = merged
                return
        chunks.append(chunk)


class SemanticSplitter(ParagraphSplitter):
    """Semantic splitting strategy.

    Currently identical to paragraph splitting; kept as its own type so
    that similarity-based boundary detection can replace it without
    touching callers.
    """


class HybridSplitter:
    """Paragraph splitting with a sentence re-split of oversized chunks."""

    def __init__(self, max_length: int, target_length: Optional[int] = None) -> None:
        self.max_length = max_length
        self._paragraphs = ParagraphSplitter(max_length, target_length)
        self._sentences = SentenceSplitter(max_length)

    def split(self, text: str) -> List[str]:
        refined: List[str] = []
        for chunk in self._paragraphs.split(text):
            if len(chunk) <= self.max_length:
                refined.append(chunk)
            else:
                refined.extend(self._sentences.split(chunk))
        return [c for c in refined if c.strip()]
