"""
Strategy selection.

Picks the splitter for a segmentation run. Without an embedding config the
segmentation strategy decides and chunks are bounded by
max_segment_length. With one, the embedding model's text splitter kind
decides and chunks are bounded by its chunk_size, with chunk_overlap
carried by the splitter itself.
"""

from typing import Callable, Dict, Optional

from chunkforge.chunking.recursive import RecursiveSplitter
from chunkforge.chunking.splitters import (
    CharacterSplitter,
    HybridSplitter,
    ParagraphSplitter,
    SemanticSplitter,
    SentenceSplitter,
    Splitter,
    TokenSplitter,
)
from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.types import SegmentationStrategy, TextSplitter

_STRATEGY_SPLITTERS: Dict[
    SegmentationStrategy, Callable[[int, Optional[int]], Splitter]
] = {
    SegmentationStrategy.CHARACTER: lambda size, target: CharacterSplitter(size),
    SegmentationStrategy.SENTENCE: lambda size, target: SentenceSplitter(size),
    SegmentationStrategy.PARAGRAPH: ParagraphSplitter,
    SegmentationStrategy.SEMANTIC: SemanticSplitter,
    SegmentationStrategy.HYBRID: HybridSplitter,
}


def splitter_for_strategy(
    strategy: SegmentationStrategy,
    max_length: int,
    target_length: Optional[int] = None,
) -> Splitter:
    """Splitter for the default (non-embedding) path.

    target_length bounds paragraph packing (see ParagraphSplitter).
    """
    return _STRATEGY_SPLITTERS[SegmentationStrategy(strategy)](
        max_length, target_length
    )


def splitter_for_embedding(config: EmbeddingConfig) -> Splitter:
    """Splitter for an embedding model's chunking preference."""
    size = config.chunk_size
    overlap = config.chunk_overlap
    kind = config.text_splitter

    if kind is TextSplitter.CHARACTER:
        return CharacterSplitter(size, overlap)
    if kind is TextSplitter.TOKEN:
        return TokenSplitter(size, overlap)
    if kind is TextSplitter.MARKDOWN:
        return RecursiveSplitter.for_markdown(size, overlap)
    if kind is TextSplitter.PYTHON_CODE:
        return RecursiveSplitter.for_python(size, overlap)
    return RecursiveSplitter(size, overlap, config.separators)


def select_splitter(options: SegmentationOptions) -> Splitter:
    """Choose and parameterize the splitter for these options."""
    if options.embedding_config is not None:
        return splitter_for_embedding(options.embedding_config)
    return splitter_for_strategy(
        options.segmentation_strategy,
        options.max_segment_length,
        options.min_segment_length,
    )


def describe_strategy(options: SegmentationOptions) -> str:
    """Human-readable name of the selected splitting approach."""
    if options.embedding_config is not None:
        return f"embedding:{options.embedding_config.text_splitter.value}"
    return options.segmentation_strategy.value
