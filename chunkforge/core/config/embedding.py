"""
Embedding model chunking configuration.

An EmbeddingConfig describes how an external embedding model prefers its
input to be chunked (splitter kind, chunk size and overlap in characters).
It arrives from the dataset/embedding subsystem as a JSON payload, so it is a
pydantic model that accepts both the camelCase wire keys and snake_case
names:

    config = EmbeddingConfig.from_payload({
        "model": "Xenova/bge-m3",
        "textSplitter": "recursiveCharacter",
        "chunkSize": 800,
        "chunkOverlap": 80,
    })

validate_embedding_config() applies the model-aware limits on top of the
basic field constraints.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from chunkforge.core.exceptions import ConfigValidationError
from chunkforge.core.types import TextSplitter

# Models that accept larger chunks and tighter overlap ceilings
LARGE_CHUNK_MODELS = frozenset(
    {
        "qwen3-embedding:4b",
        "mixedbread-ai/mxbai-embed-large-v1",
    }
)
MIN_CHUNK_SIZE = 100
DEFAULT_MAX_CHUNK_SIZE = 8000
LARGE_MAX_CHUNK_SIZE = 12000
DEFAULT_MAX_OVERLAP_RATIO = 0.5
LARGE_MAX_OVERLAP_RATIO = 0.15


class EmbeddingConfig(BaseModel):
    """Chunking preferences of an embedding model."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    model: str = "Xenova/bge-m3"
    custom_model_name: Optional[str] = Field(default=None, alias="customModelName")
    provider: str = "local"
    text_splitter: TextSplitter = Field(
        default=TextSplitter.RECURSIVE_CHARACTER, alias="textSplitter"
    )
    chunk_size: int = Field(default=1000, gt=0, alias="chunkSize")
    chunk_overlap: int = Field(default=100, ge=0, alias="chunkOverlap")
    separators: Optional[List[str]] = None
    confidence_threshold: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, alias="confidenceThreshold"
    )
    enable_table_extraction: Optional[bool] = Field(
        default=None, alias="enableTableExtraction"
    )
    enable_image_extraction: Optional[bool] = Field(
        default=None, alias="enableImageExtraction"
    )

    @field_validator("text_splitter", mode="before")
    @classmethod
    def normalize_splitter(cls, value: Any) -> Any:
        """Accept camelCase splitter names (recursiveCharacter, pythonCode)."""
        if isinstance(value, str) and not isinstance(value, TextSplitter):
            return re.sub(r"(?<!^)(?=[A-Z])", "_", value).lower()
        return value

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "EmbeddingConfig":
        """Build from a wire payload, raising ConfigValidationError on bad input."""
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigValidationError(
                f"Invalid embedding configuration: {first.get('msg', str(e))}",
                field=location or None,
                value=first.get("input"),
            ) from e

    @property
    def effective_model_name(self) -> str:
        """Model name including the custom model, for logging."""
        if self.custom_model_name:
            return f"{self.model} ({self.custom_model_name})"
        return self.model

    def summary(self) -> str:
        return (
            f"{self.effective_model_name}, "
            f"chunks: {self.chunk_size}/{self.chunk_overlap}, "
            f"splitter: {self.text_splitter.value}"
        )


def max_chunk_size_for_model(model: str) -> int:
    """Largest chunk size (characters) a model accepts."""
    if model in LARGE_CHUNK_MODELS:
        return LARGE_MAX_CHUNK_SIZE
    return DEFAULT_MAX_CHUNK_SIZE


def max_overlap_ratio_for_model(model: str) -> float:
    """Largest overlap, as a fraction of chunk size, a model accepts."""
    if model in LARGE_CHUNK_MODELS:
        return LARGE_MAX_OVERLAP_RATIO
    return DEFAULT_MAX_OVERLAP_RATIO


def validate_embedding_config(config: EmbeddingConfig) -> List[str]:
    """Check model-aware limits.

    Returns:
        List of human-readable problems, empty when the config is usable
    """
    errors: List[str] = []

    if config.chunk_size < MIN_CHUNK_SIZE:
        errors.append(f"Chunk size must be at least {MIN_CHUNK_SIZE} characters")

    max_size = max_chunk_size_for_model(config.model)
    if config.chunk_size > max_size:
        errors.append(
            f"Chunk size must not exceed {max_size} characters for this model"
        )

    ratio = max_overlap_ratio_for_model(config.model)
    max_overlap = int(config.chunk_size * ratio)
    if config.chunk_overlap > max_overlap:
        errors.append(
            f"Chunk overlap must not exceed {max_overlap} characters "
            f"({round(ratio * 100)}% of chunk size) for this model"
        )

    if config.model == "custom" and not (config.custom_model_name or "").strip():
        errors.append(
            "Custom model name is required when using custom embedding model"
        )

    return errors
