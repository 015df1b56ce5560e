"""
Configuration Loading Functions.

Loads SegmentationOptions from YAML and applies environment overrides.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

A YAML file holds the option fields at the top level, or under a
``segmentation`` key. String values may reference the environment with
``${VAR_NAME}`` or ``${VAR_NAME:default}``:

    segmentation:
      segmentation_strategy: paragraph
      max_segment_length: ${CHUNK_MAX:1200}
      embedding_config:
        model: Xenova/bge-m3
        textSplitter: recursiveCharacter
        chunkSize: 800
        chunkOverlap: 80

Environment overrides (bounds are clamped):
    CHUNKFORGE_STRATEGY            character|sentence|paragraph|semantic|hybrid
    CHUNKFORGE_MAX_SEGMENT_LENGTH  int, 1..100000
    CHUNKFORGE_MIN_SEGMENT_LENGTH  int, 0..100000
    CHUNKFORGE_OVERLAP_RATIO       float, 0.0..0.99
    CHUNKFORGE_CONFIDENCE_THRESHOLD float, 0.0..1.0
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.exceptions import ConfigValidationError
from chunkforge.core.logging import get_logger
from chunkforge.core.types import SegmentationStrategy

logger = get_logger(__name__)

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")
_INT_SCALAR = re.compile(r"^-?\d+$")
_FLOAT_SCALAR = re.compile(r"^-?\d*\.\d+$")


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles strings with ${VAR_NAME} or ${VAR_NAME:default} syntax, nested
    dictionaries and nested lists. A string that is exactly one reference
    and expands to a number becomes that number.

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        expanded = _ENV_PATTERN.sub(replace_env_var, value)
        if expanded != value and _ENV_PATTERN.fullmatch(value):
            return _coerce_scalar(expanded)
        return expanded
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _coerce_scalar(value: str) -> Any:
    if _INT_SCALAR.match(value):
        return int(value)
    if _FLOAT_SCALAR.match(value):
        return float(value)
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return value


def _env_int(name: str, min_value: int, max_value: int) -> Optional[int]:
    """Read a bounded integer from the environment, None when unset or bad."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid integer in environment, ignoring", name=name)
        return None
    return max(min_value, min(max_value, value))


def _env_float(name: str, min_value: float, max_value: float) -> Optional[float]:
    """Read a bounded float from the environment, None when unset or bad."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float in environment, ignoring", name=name)
        return None
    if value != value:  # NaN
        return None
    return max(min_value, min(max_value, value))


def apply_env_overrides(options: SegmentationOptions) -> SegmentationOptions:
    """
    Apply CHUNKFORGE_* environment overrides to options.

    Environment variables take precedence over config file values.
    """
    overrides: Dict[str, Any] = {}

    strategy = os.environ.get("CHUNKFORGE_STRATEGY")
    if strategy:
        allowed = {s.value for s in SegmentationStrategy}
        if strategy.lower() in allowed:
            overrides["segmentation_strategy"] = strategy.lower()
        else:
            logger.warning("Unknown strategy in environment, ignoring", value=strategy)

    overrides["max_segment_length"] = _env_int(
        "CHUNKFORGE_MAX_SEGMENT_LENGTH", 1, 100000
    )
    overrides["min_segment_length"] = _env_int(
        "CHUNKFORGE_MIN_SEGMENT_LENGTH", 0, 100000
    )
    overrides["overlap_ratio"] = _env_float("CHUNKFORGE_OVERLAP_RATIO", 0.0, 0.99)
    overrides["confidence_threshold"] = _env_float(
        "CHUNKFORGE_CONFIDENCE_THRESHOLD", 0.0, 1.0
    )

    return options.with_overrides(**overrides)


def load_options(config_path: Optional[Path] = None) -> SegmentationOptions:
    """
    Load segmentation options from YAML with environment overrides.

    Args:
        config_path: YAML file. Defaults only (plus env) when None.

    Returns:
        SegmentationOptions (not yet validated; the engine validates)

    Raises:
        ConfigValidationError: If the file is missing or malformed
    """
    if config_path is None:
        return apply_env_overrides(SegmentationOptions())

    if not config_path.exists():
        raise ConfigValidationError(
            f"Config file not found: {config_path}",
            field="config_path",
            value=str(config_path),
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            f"Could not parse YAML config {config_path}: {e}",
            field="config_path",
            value=str(config_path),
        ) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Config file must contain a mapping: {config_path}",
            field="config_path",
            value=str(config_path),
        )

    data = expand_env_vars(data)
    section = data.get("segmentation", data)
    if not isinstance(section, dict):
        raise ConfigValidationError(
            "The 'segmentation' section must be a mapping", field="segmentation"
        )

    options = SegmentationOptions.from_dict(section)
    logger.debug("Loaded options", path=str(config_path))
    return apply_env_overrides(options)


def save_options(options: SegmentationOptions, config_path: Path) -> None:
    """Write options to a YAML file under a ``segmentation`` key."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            {"segmentation": options.to_dict()},
            f,
            default_flow_style=False,
            sort_keys=False,
        )
