"""Document metadata assembly."""

from typing import Optional, Sequence

from chunkforge.chunking.models import DocumentMetadata, ExtractedDocument, Segment
from chunkforge.chunking.pages import detect_language
from chunkforge.core.types import ExtractionMethod


def build_metadata(
    document: ExtractedDocument,
    segments: Sequence[Segment],
    processing_time: int,
    extraction_method: ExtractionMethod,
    text: Optional[str] = None,
) -> DocumentMetadata:
    """
    Combine extractor metadata with segment statistics.

    Args:
        document: Extractor output
        segments: Final segments (totals are summed over these)
        processing_time: Wall-clock milliseconds for the engine call
        extraction_method: Method recorded for the document
        text: Text used for language detection (defaults to document text)

    Returns:
        DocumentMetadata
    """
    return DocumentMetadata(
        title=document.title,
        author=document.author,
        creator=document.creator,
        creation_date=document.creation_date,
        modification_date=document.modification_date,
        total_pages=max(1, document.page_count),
        total_words=sum(s.word_count for s in segments),
        total_tokens=sum(s.token_count for s in segments),
        language=detect_language(text if text is not None else document.text),
        file_size=document.file_size,
        processing_time=processing_time,
        extraction_method=extraction_method,
    )
