"""
Configuration for ChunkForge.

    from chunkforge.core.config import SegmentationOptions, load_options

    options = load_options(Path("chunkforge.yaml"))
"""

from chunkforge.core.config.embedding import (
    EmbeddingConfig,
    max_chunk_size_for_model,
    max_overlap_ratio_for_model,
    validate_embedding_config,
)
from chunkforge.core.config.loaders import (
    apply_env_overrides,
    expand_env_vars,
    load_options,
    save_options,
)
from chunkforge.core.config.options import SegmentationOptions

__all__ = [
    "EmbeddingConfig",
    "SegmentationOptions",
    "apply_env_overrides",
    "expand_env_vars",
    "load_options",
    "max_chunk_size_for_model",
    "max_overlap_ratio_for_model",
    "save_options",
    "validate_embedding_config",
]
