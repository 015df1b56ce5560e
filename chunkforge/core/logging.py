"""
Structured Logging for ChunkForge.

All modules import get_logger() from here rather than using Python's logging
directly:

    from chunkforge.core.logging import get_logger
    logger = get_logger(__name__)

Logger Types
------------
**StructuredLogger**
    Base logger with context binding. Key-value pairs passed to a call, or
    bound with bind(), are appended to the message:

        logger = get_logger(__name__)
        logger.bind(document_id="doc_123")
        logger.info("Segmentation started", strategy="hybrid")
        # Segmentation started | document_id=doc_123 | strategy=hybrid

**PipelineLogger**
    Tracks the engine stages (clean, layout, split, build, coverage,
    overlap, tables) with timing:

        plog = PipelineLogger(document_id)
        plog.start_stage("split")
        plog.log_progress("Produced chunks", chunks=42)
        plog.finish(success=True, segments=42)

Loggers are cached by name, so multiple get_logger() calls return the same
instance. Handlers are attached on first use, not at import.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger with context support.

    Provides consistent logging across the package with support for
    structured fields and bound context.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _ConfigHolder.get_config()
        self._context: dict[str, Any] = {}
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = True

        if self.config.console:
            console_handler = RichHandler(
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            formatter = logging.Formatter(
                self.config.format,
                datefmt=self.config.date_format,
            )
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Attach context fields to every subsequent message."""
        self._context.update(kwargs)
        return self

    def unbind(self, *keys: str) -> "StructuredLogger":
        """Remove previously bound context fields."""
        for key in keys:
            self._context.pop(key, None)
        return self

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with context and extra fields."""
        fields = {**self._context, **kwargs}
        if fields:
            field_str = " | ".join(f"{k}={v}" for k, v in fields.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message, **kwargs))


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration.

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Reconfigures loggers that already exist so CLI flags such as --verbose
    take effect for module-level loggers created at import time.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _ConfigHolder.set_config(config)

    for logger in _loggers.values():
        logger.config = config
        logger._setup_logger()


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig(level="WARNING")

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


class PipelineLogger:
    """
    Specialized logger for one engine invocation.

    Tracks processing stages and provides timing information.
    """

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        self.logger = get_logger("chunkforge.pipeline")
        self._stage_start: Optional[datetime] = None
        self._current_stage: Optional[str] = None

    @property
    def current_stage(self) -> Optional[str]:
        return self._current_stage

    def start_stage(self, stage: str) -> None:
        """Mark the start of a processing stage."""
        self._finish_current_stage()
        self._current_stage = stage
        self._stage_start = datetime.now()
        self.logger.debug(
            "Starting stage",
            document_id=self.document_id,
            stage=stage,
        )

    def _finish_current_stage(self) -> None:
        """Log completion of current stage if any."""
        if self._current_stage and self._stage_start:
            duration = (datetime.now() - self._stage_start).total_seconds()
            self.logger.debug(
                "Completed stage",
                document_id=self.document_id,
                stage=self._current_stage,
                duration_sec=f"{duration:.3f}",
            )
        self._current_stage = None
        self._stage_start = None

    def finish(
        self, success: bool, segments: int = 0, error: Optional[str] = None
    ) -> None:
        """Mark pipeline completion."""
        self._finish_current_stage()
        if success:
            self.logger.info(
                "Segmentation completed",
                document_id=self.document_id,
                segments_created=segments,
            )
        else:
            self.logger.error(
                "Segmentation failed",
                document_id=self.document_id,
                error=error,
            )

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log progress within a stage."""
        self.logger.debug(
            message,
            document_id=self.document_id,
            stage=self._current_stage,
            **kwargs,
        )
