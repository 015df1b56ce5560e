"""
Text extraction collaborators.

The engine consumes plain text. PlainTextExtractor covers UTF-8 text files
(.txt, .md, source code); binary formats need an extractor implementing the
TextExtractor protocol from chunkforge.core.types.
"""

from pathlib import Path

from chunkforge.chunking.models import ExtractedDocument
from chunkforge.core.exceptions import ExtractionError
from chunkforge.core.logging import get_logger

logger = get_logger(__name__)


class PlainTextExtractor:
    """Reads UTF-8 text files. Form feeds count as page breaks."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def extract(self, path: Path) -> ExtractedDocument:
        """
        Read a text file.

        Args:
            path: File to read

        Returns:
            ExtractedDocument with page count and byte size

        Raises:
            ExtractionError: If the file is missing, unreadable or not text
        """
        path = Path(path)
        if not path.is_file():
            raise ExtractionError(f"File not found: {path}")

        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"Could not read {path}: {e}") from e

        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ExtractionError(
                f"Could not decode {path.name} as {self.encoding}: {e.reason}"
            ) from e

        logger.debug("Extracted text", file=path.name, chars=len(text))
        return ExtractedDocument(
            text=text,
            page_count=text.rstrip("\f").count("\f") + 1,
            file_size=len(raw),
            title=path.stem,
            document_id=path.stem,
        )
