"""
Embedding Configuration Mapper.

Translates an embedding model's chunking preference into native
SegmentationOptions:

    >>> config = EmbeddingConfig(chunk_size=800, chunk_overlap=80)
    >>> options = to_segmentation_options(config)
    >>> options.max_segment_length, options.overlap_ratio
    (800, 0.1)

Fields the config leaves unset (confidence threshold, table and image
extraction) are taken from the base options.
"""

import math
from typing import Optional

from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.logging import get_logger
from chunkforge.core.types import SegmentationStrategy, TextSplitter

logger = get_logger(__name__)

MIN_SEGMENT_FLOOR = 50
MIN_SEGMENT_RATIO = 0.1

SPLITTER_STRATEGIES = {
    TextSplitter.RECURSIVE_CHARACTER: SegmentationStrategy.HYBRID,
    TextSplitter.CHARACTER: SegmentationStrategy.PARAGRAPH,
    TextSplitter.TOKEN: SegmentationStrategy.SEMANTIC,
    TextSplitter.MARKDOWN: SegmentationStrategy.HYBRID,
    TextSplitter.PYTHON_CODE: SegmentationStrategy.SEMANTIC,
}


def strategy_for_splitter(splitter: TextSplitter) -> SegmentationStrategy:
    return SPLITTER_STRATEGIES.get(splitter, SegmentationStrategy.HYBRID)


def to_segmentation_options(
    config: EmbeddingConfig, base: Optional[SegmentationOptions] = None
) -> SegmentationOptions:
    """
    Derive segmentation options from an embedding configuration.

    Args:
        config: Embedding model chunking preference
        base: Options supplying anything the config does not set

    Returns:
        New SegmentationOptions carrying the config itself
    """
    base = base or SegmentationOptions()
    chunk_size = config.chunk_size

    options = base.with_overrides(
        max_segment_length=chunk_size,
        min_segment_length=max(
            MIN_SEGMENT_FLOOR, math.floor(chunk_size * MIN_SEGMENT_RATIO)
        ),
        overlap_ratio=config.chunk_overlap / chunk_size,
        segmentation_strategy=strategy_for_splitter(config.text_splitter),
        confidence_threshold=config.confidence_threshold,
        enable_table_extraction=config.enable_table_extraction,
        enable_image_extraction=config.enable_image_extraction,
        embedding_config=config,
    )

    logger.debug(
        "Mapped embedding config",
        model=config.effective_model_name,
        splitter=config.text_splitter.value,
        max_length=options.max_segment_length,
        min_length=options.min_segment_length,
        overlap_ratio=f"{options.overlap_ratio:.3f}",
        strategy=options.segmentation_strategy.value,
    )
    return options
