"""
Segmentation options.

SegmentationOptions is the explicit configuration value passed into every
engine call. It is frozen: callers derive variants with with_overrides()
instead of mutating a shared default.

    options = SegmentationOptions(max_segment_length=500, overlap_ratio=0.0)
    options.ensure_valid()
    tighter = options.with_overrides(min_segment_length=100)
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Optional

from chunkforge.core.config.embedding import (
    EmbeddingConfig,
    validate_embedding_config,
)
from chunkforge.core.exceptions import ConfigValidationError
from chunkforge.core.types import ExtractionMethod, SegmentationStrategy


@dataclass(frozen=True)
class SegmentationOptions:
    """Segmentation configuration."""

    extraction_method: ExtractionMethod = ExtractionMethod.HYBRID
    enable_table_extraction: bool = True
    enable_image_extraction: bool = False
    segmentation_strategy: SegmentationStrategy = SegmentationStrategy.HYBRID
    max_segment_length: int = 2000  # characters
    min_segment_length: int = 50
    overlap_ratio: float = 0.15
    confidence_threshold: float = 0.7
    embedding_config: Optional[EmbeddingConfig] = None
    clean_text: bool = True

    def __post_init__(self) -> None:
        # Accept plain strings from YAML, CLI flags and JSON payloads
        object.__setattr__(
            self, "extraction_method", ExtractionMethod(self.extraction_method)
        )
        object.__setattr__(
            self,
            "segmentation_strategy",
            SegmentationStrategy(self.segmentation_strategy),
        )

    def validate(self) -> List[str]:
        """Return a list of problems, empty when the options are usable."""
        errors: List[str] = []

        if self.max_segment_length <= 0:
            errors.append("max_segment_length must be greater than 0")
        if self.min_segment_length < 0:
            errors.append("min_segment_length must not be negative")
        if self.min_segment_length >= self.max_segment_length:
            errors.append(
                f"min_segment_length ({self.min_segment_length}) must be "
                f"smaller than max_segment_length ({self.max_segment_length})"
            )
        if not 0.0 <= self.overlap_ratio < 1.0:
            errors.append(
                f"overlap_ratio must be within [0, 1), got {self.overlap_ratio}"
            )
        if not 0.0 <= self.confidence_threshold <= 1.0:
            errors.append(
                "confidence_threshold must be within [0, 1], "
                f"got {self.confidence_threshold}"
            )

        if self.embedding_config is not None:
            errors.extend(
                f"embedding_config: {problem}"
                for problem in validate_embedding_config(self.embedding_config)
            )

        return errors

    def ensure_valid(self) -> "SegmentationOptions":
        """Raise ConfigValidationError on the first problem found."""
        errors = self.validate()
        if errors:
            field_name = errors[0].split(" ", 1)[0].rstrip(":")
            raise ConfigValidationError(
                "; ".join(errors),
                field=field_name,
                value=getattr(self, field_name, None),
            )
        return self

    def with_overrides(self, **overrides: Any) -> "SegmentationOptions":
        """Return a copy with the given fields replaced.

        None values are ignored so CLI flags that were not given leave the
        current value in place.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown segmentation option(s): {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SegmentationOptions":
        """Create options from a (YAML) dictionary.

        Unknown keys are ignored; an ``embedding_config`` mapping is parsed
        with the camelCase aliases accepted.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        embedding = values.get("embedding_config")
        if isinstance(embedding, dict):
            values["embedding_config"] = EmbeddingConfig.from_payload(embedding)

        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid segmentation options: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["extraction_method"] = self.extraction_method.value
        data["segmentation_strategy"] = self.segmentation_strategy.value
        if self.embedding_config is not None:
            data["embedding_config"] = self.embedding_config.model_dump(mode="json")
        return data
