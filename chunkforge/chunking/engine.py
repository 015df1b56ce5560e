"""
Segmentation Engine.

Turns extracted document text into typed, scored segments and tables.

Architecture Context
--------------------
The engine is the boundary between the extraction collaborator and the
embedding/storage side. It holds only immutable default options, so one
instance can serve concurrent calls:

    ExtractedDocument + SegmentationOptions
        -> validate -> clean -> layout -> split -> build
        -> coverage guard -> (embedding path: confidence gate)
        -> renumber -> overlap
    raw text -> tables
        -> ParseResult

Nothing raises past this class. Invalid options, extraction failures and
unexpected errors all come back as ParseResult(success=False, errors=[...]).

Usage
-----
    engine = SegmentationEngine()
    result = engine.process(text, SegmentationOptions(max_segment_length=800))

    result = engine.process_file(Path("notes.md"))
    result = engine.process_with_embedding_config(document, embedding_config)
    result = engine.process_with_parent_child(document, parent_cfg, child_cfg)
"""

import hashlib
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from chunkforge.chunking.coverage import CoverageGuard, FallbackChunk
from chunkforge.chunking.embedding_mapper import to_segmentation_options
from chunkforge.chunking.extractors import PlainTextExtractor
from chunkforge.chunking.hierarchy import build_hierarchy, hierarchy_counts
from chunkforge.chunking.layout import LayoutClassifier
from chunkforge.chunking.metadata import build_metadata
from chunkforge.chunking.models import ExtractedDocument, ParseResult, Segment
from chunkforge.chunking.overlap import apply_overlap
from chunkforge.chunking.pages import PageLocator
from chunkforge.chunking.segment_builder import SegmentBuilder
from chunkforge.chunking.strategy import describe_strategy, select_splitter
from chunkforge.chunking.tables import TableExtractor
from chunkforge.chunking.text_cleaner import clean_text
from chunkforge.core.config.embedding import (
    EmbeddingConfig,
    validate_embedding_config,
)
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.exceptions import (
    ChunkForgeError,
    ChunkingError,
    ConfigValidationError,
    ExtractionError,
)
from chunkforge.core.logging import PipelineLogger, get_logger
from chunkforge.core.types import TextExtractor

logger = get_logger(__name__)

DocumentInput = Union[ExtractedDocument, str]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _default_document_id(text: str) -> str:
    return "doc_" + hashlib.md5(text.encode("utf-8")).hexdigest()[:12]


class SegmentationEngine:
    """Stateless document chunking engine."""

    def __init__(
        self,
        default_options: Optional[SegmentationOptions] = None,
        table_extractor: Optional[TableExtractor] = None,
    ) -> None:
        self.default_options = default_options or SegmentationOptions()
        self.table_extractor = table_extractor or TableExtractor()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def process(
        self,
        document: DocumentInput,
        options: Optional[SegmentationOptions] = None,
        *,
        page_count: int = 1,
        file_size: Optional[int] = None,
        document_id: Optional[str] = None,
    ) -> ParseResult:
        """
        Segment a document.

        Args:
            document: Extractor output, or raw text
            options: Segmentation options (engine defaults when None)
            page_count: Page count when document is raw text
            file_size: Byte size when document is raw text (UTF-8 length
                when None)
            document_id: Identifier mixed into segment ids

        Returns:
            ParseResult; never raises
        """
        return self._process(
            self._as_document(document, page_count, file_size),
            options or self.default_options,
            document_id,
            time.perf_counter(),
        )

    def process_file(
        self,
        path: Path,
        extractor: Optional[TextExtractor] = None,
        options: Optional[SegmentationOptions] = None,
    ) -> ParseResult:
        """
        Extract a file with a collaborator and segment it.

        Args:
            path: Source file
            extractor: TextExtractor (PlainTextExtractor when None)
            options: Segmentation options

        Returns:
            ParseResult; extraction failures give success=False
        """
        started = time.perf_counter()
        path = Path(path)
        extractor = extractor or PlainTextExtractor()

        try:
            document = extractor.extract(path)
        except ChunkForgeError as e:
            logger.error("Extraction failed", file=path.name, error=str(e))
            return ParseResult.failure(
                content="",
                error=str(e),
                file_size=self._file_size(path),
                processing_time=_elapsed_ms(started),
            )
        except Exception as e:
            logger.exception("Extractor raised unexpectedly", file=path.name)
            return ParseResult.failure(
                content="",
                error=str(ExtractionError(f"Extraction failed for {path.name}: {e}")),
                file_size=self._file_size(path),
                processing_time=_elapsed_ms(started),
            )

        return self._process(
            document, options or self.default_options, None, started
        )

    def process_with_embedding_config(
        self,
        document: DocumentInput,
        config: EmbeddingConfig,
        base_options: Optional[SegmentationOptions] = None,
        *,
        document_id: Optional[str] = None,
    ) -> ParseResult:
        """
        Segment a document with an embedding model's chunking preference.

        The config is mapped to native options; its splitter kind picks the
        splitter, segments under the confidence threshold are dropped, and
        overlap comes from the splitter's chunk_overlap.
        """
        started = time.perf_counter()
        document = self._as_document(document)
        options = to_segmentation_options(config, base_options or self.default_options)

        logger.info(
            "Embedding-optimized segmentation",
            model=config.effective_model_name,
            splitter=config.text_splitter.value,
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap,
        )
        return self._process(document, options, document_id, started)

    def process_with_parent_child(
        self,
        document: DocumentInput,
        parent_config: EmbeddingConfig,
        child_config: EmbeddingConfig,
        base_options: Optional[SegmentationOptions] = None,
        *,
        document_id: Optional[str] = None,
    ) -> ParseResult:
        """
        Segment with parent-child (multi-granularity) chunking.

        Parents come from the parent config; each is split into children
        with the child config. Processing metadata gains a
        ``hierarchicalChunking`` entry with parent and child counts.
        """
        started = time.perf_counter()
        document = self._as_document(document)

        child_errors = validate_embedding_config(child_config)
        if child_errors:
            error = ConfigValidationError(
                "Invalid child chunk configuration: " + "; ".join(child_errors),
                field="child_config",
            )
            logger.error("Rejected child configuration", error=str(error))
            return ParseResult.failure(
                document.text, str(error), document.file_size, _elapsed_ms(started)
            )

        doc_id = document_id or document.document_id or _default_document_id(document.text)
        result = self.process_with_embedding_config(
            document, parent_config, base_options, document_id=doc_id
        )
        if not result.success:
            return result

        try:
            segments = build_hierarchy(result.segments, child_config, doc_id)
        except Exception as e:
            logger.exception("Hierarchy building failed", document_id=doc_id)
            return ParseResult.failure(
                document.text,
                str(ChunkingError(f"Parent-child chunking failed: {e}")),
                document.file_size,
                _elapsed_ms(started),
            )

        processing_metadata = dict(result.processing_metadata)
        processing_metadata["hierarchicalChunking"] = hierarchy_counts(segments)

        metadata = replace(
            result.metadata,
            total_words=sum(s.word_count for s in segments),
            total_tokens=sum(s.token_count for s in segments),
            processing_time=_elapsed_ms(started),
        )
        return replace(
            result,
            segments=segments,
            metadata=metadata,
            processing_metadata=processing_metadata,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _process(
        self,
        document: ExtractedDocument,
        options: SegmentationOptions,
        document_id: Optional[str],
        started: float,
    ) -> ParseResult:
        doc_id = document_id or document.document_id or _default_document_id(document.text)
        plog = PipelineLogger(doc_id)

        try:
            options.ensure_valid()
        except ConfigValidationError as e:
            logger.error("Rejected segmentation options", document_id=doc_id, error=str(e))
            plog.finish(success=False, error=str(e))
            return ParseResult.failure(
                document.text, str(e), document.file_size, _elapsed_ms(started)
            )

        if not document.text or not document.text.strip():
            error = ExtractionError("Extraction produced no text content")
            plog.finish(success=False, error=str(error))
            return ParseResult.failure(
                document.text or "", str(error), document.file_size, _elapsed_ms(started)
            )

        try:
            result = self._run(document, options, doc_id, plog, started)
        except ChunkForgeError as e:
            plog.finish(success=False, error=str(e))
            return ParseResult.failure(
                document.text, str(e), document.file_size, _elapsed_ms(started)
            )
        except Exception as e:
            logger.exception(
                "Unexpected segmentation error",
                document_id=doc_id,
                stage=plog.current_stage,
            )
            plog.finish(success=False, error=str(e))
            return ParseResult.failure(
                document.text,
                f"Segmentation failed: {e}",
                document.file_size,
                _elapsed_ms(started),
            )

        plog.finish(success=True, segments=len(result.segments))
        return result

    def _run(
        self,
        document: ExtractedDocument,
        options: SegmentationOptions,
        doc_id: str,
        plog: PipelineLogger,
        started: float,
    ) -> ParseResult:
        embedding = options.embedding_config
        logger.info(
            "Segmentation started",
            document_id=doc_id,
            strategy=describe_strategy(options),
            chars=len(document.text),
        )

        plog.start_stage("clean")
        text = clean_text(document.text) if options.clean_text else document.text

        plog.start_stage("layout")
        layout = LayoutClassifier(options.min_segment_length).analyze(text)

        plog.start_stage("split")
        try:
            chunks = select_splitter(options).split(text)
        except ValueError as e:
            raise ChunkingError(f"Could not split document: {e}") from e
        plog.log_progress("Produced chunks", chunks=len(chunks))

        plog.start_stage("build")
        builder = SegmentBuilder(
            doc_id,
            options.min_segment_length,
            tokens_by_characters=embedding is not None,
        )
        locator = PageLocator(text)
        segments = self._build(builder, locator, [(c, None) for c in chunks])

        plog.start_stage("coverage")
        guard = CoverageGuard(options.max_segment_length)
        coverage_fallback = guard.needs_fallback(segments, text)
        if coverage_fallback:
            logger.debug(
                "Using fallback segmentation for better coverage",
                document_id=doc_id,
                primary_segments=len(segments),
            )
            segments = self._build(
                builder, PageLocator(text), guard.fallback_chunks(text)
            )

        if not segments and len(text.strip()) < options.min_segment_length:
            # A document shorter than the minimum is still one segment
            short = SegmentBuilder(doc_id, 0, builder.tokens_by_characters)
            segment = short.build(text, 0, locator.locate(text))
            segments = [segment] if segment is not None else []

        processing_metadata: Dict[str, Any] = {
            "layout": layout.summary(),
            "strategy": describe_strategy(options),
            "coverageFallback": coverage_fallback,
        }

        if embedding is not None:
            threshold = (
                embedding.confidence_threshold
                if embedding.confidence_threshold is not None
                else options.confidence_threshold
            )
            kept = [s for s in segments if s.confidence >= threshold]
            processing_metadata["droppedLowConfidence"] = len(segments) - len(kept)
            processing_metadata["embeddingModel"] = embedding.effective_model_name
            segments = kept

        segments = builder.renumber(segments)
        processing_metadata["preOverlapSegments"] = len(segments)

        plog.start_stage("overlap")
        if embedding is None:
            final = apply_overlap(segments, options.overlap_ratio)
        elif coverage_fallback:
            # Fallback chunks never went through the splitter's overlap
            final = apply_overlap(
                segments, options.overlap_ratio, tokens_by_characters=True
            )
        else:
            final = list(segments)

        plog.start_stage("tables")
        tables = (
            self.table_extractor.extract(document.text)
            if options.enable_table_extraction
            else []
        )

        metadata = build_metadata(
            document,
            final,
            _elapsed_ms(started),
            options.extraction_method,
            text,
        )

        return ParseResult(
            success=True,
            content=document.text,
            segments=final,
            tables=tables,
            metadata=metadata,
            processing_metadata=processing_metadata,
            pre_overlap_segments=segments,
        )

    def _build(
        self,
        builder: SegmentBuilder,
        locator: PageLocator,
        chunks: Sequence[FallbackChunk],
    ) -> List[Segment]:
        segments: List[Segment] = []
        for index, (chunk, forced_type) in enumerate(chunks):
            segment = builder.build(chunk, index, locator.locate(chunk), forced_type)
            if segment is not None:
                segments.append(segment)
        return segments

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _as_document(
        document: DocumentInput,
        page_count: int = 1,
        file_size: Optional[int] = None,
    ) -> ExtractedDocument:
        if isinstance(document, ExtractedDocument):
            return document
        text = document or ""
        return ExtractedDocument(
            text=text,
            page_count=page_count,
            file_size=len(text.encode("utf-8")) if file_size is None else file_size,
        )

    @staticmethod
    def _file_size(path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError:
            return 0
