"""
Centralized Exception Hierarchy for ChunkForge.

All exceptions inherit from ChunkForgeError for easy catching. The engine
never lets these escape its boundary: they are caught in
``SegmentationEngine`` and reported through ``ParseResult.errors``. They do
propagate from the lower-level helpers (option validation, extractors, YAML
loading) so that direct callers can react to them.

Each exception includes:
- error_code: Unique identifier (e.g., "CF-PROC-001")
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue

Exception Hierarchy
-------------------
    ChunkForgeError (base)
    ├── ProcessingError
    │   ├── ExtractionError
    │   └── ChunkingError
    └── ValidationError
        └── ConfigValidationError

Usage
-----
    from chunkforge.core.exceptions import ChunkForgeError, ExtractionError

    try:
        document = extractor.extract(path)
    except ExtractionError as e:
        logger.error(f"Extraction failed: {e}")
"""

import re
from typing import Any, List, Optional


def sanitize_path(path: str) -> str:
    """Sanitize a file path to avoid leaking user directories.

    Args:
        path: Original file path

    Returns:
        Path with home directories replaced by a placeholder
    """
    if not path:
        return path

    patterns = [
        (r"[A-Za-z]:\\Users\\[^\\]+", r"<user-home>"),
        (r"/(?:home|Users)/[^/]+", r"<user-home>"),
    ]

    result = path
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)

    return result


def sanitize_message(message: str) -> str:
    """Sanitize an error message to avoid leaking sensitive info.

    Masks API keys, bearer tokens and user home directories.

    Args:
        message: Original error message

    Returns:
        Sanitized message
    """
    if not message:
        return message

    result = message
    patterns = [
        (r"(sk-|pk-|api_key[=:][\s]*)[a-zA-Z0-9_-]{20,}", r"\1<api-key>"),
        (r"Bearer\s+[a-zA-Z0-9_.-]+", r"Bearer <token>"),
        (r"://[^:/\s]+:[^@/\s]+@", r"://<user>:<pass>@"),
    ]
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)

    result = re.sub(
        r"/(?:home|Users)/[^\s\"']+", lambda m: sanitize_path(m.group(0)), result
    )
    return result


def get_root_cause(exc: BaseException) -> BaseException:
    """Follow __cause__/__context__ links to the original error."""
    seen = set()
    current = exc

    while current is not None:
        if id(current) in seen:
            break
        seen.add(id(current))

        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class ChunkForgeError(Exception):
    """
    Base exception for all ChunkForge errors.

    Example
    -------
        try:
            options.ensure_valid()
        except ChunkForgeError as e:
            print(f"{e.error_code}: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "CF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(sanitize_message(message))

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# Processing Exceptions
# ============================================================================


class ProcessingError(ChunkForgeError):
    """Base exception for document processing errors."""

    error_code = "CF-PROC-000"
    why_it_happened = "Document processing failed at some stage"
    how_to_fix = [
        "Check that the source text is readable",
        "Try processing the document again",
    ]


class ExtractionError(ProcessingError):
    """
    Raised when the upstream text extraction produced nothing usable.

    This can occur when:
    - The source file is missing or unreadable
    - The bytes cannot be decoded as text
    - The extracted text is empty
    """

    error_code = "CF-PROC-001"
    why_it_happened = (
        "Could not obtain text from the document. The file may be missing, "
        "binary, or contain no extractable text"
    )
    how_to_fix = [
        "Check that the file exists and opens in its native application",
        "Convert binary formats (PDF, DOCX) to text before chunking",
        "Ensure the file is UTF-8 encoded",
    ]


class ChunkingError(ProcessingError):
    """Raised when splitting the text into segments fails."""

    error_code = "CF-PROC-002"
    why_it_happened = (
        "Could not split the document into segments. The segmentation "
        "parameters may be incompatible with the text"
    )
    how_to_fix = [
        "Adjust max_segment_length if chunks are too large or small",
        "Check that min_segment_length is smaller than max_segment_length",
    ]


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(ChunkForgeError):
    """Raised when input data or configuration fails validation."""

    error_code = "CF-VAL-000"
    why_it_happened = "Validation failed for input data or configuration"
    how_to_fix = [
        "Check the error message for specific validation failures",
        "Review the expected format or value constraints",
    ]


class ConfigValidationError(ValidationError):
    """
    Raised when segmentation options are inconsistent.

    Attributes
    ----------
    field : str
        The option that failed validation
    value : any
        The invalid value
    """

    error_code = "CF-VAL-001"
    why_it_happened = (
        "A segmentation option is out of range or inconsistent with another "
        "option (for example min_segment_length >= max_segment_length)"
    )
    how_to_fix = [
        "Keep min_segment_length below max_segment_length",
        "Keep overlap_ratio within [0, 1)",
        "Keep confidence_threshold within [0, 1]",
    ]

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.field = field
        self.value = value
