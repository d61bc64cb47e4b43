"""
Batch dispatcher: detects each item's file kind, routes it to the matching
extractor and collects one ExtractionResult per item, in input order.
"""

from textextract.core.exceptions import (
    EngineInitError,
    FileTooLargeError,
    MissingBinaryError,
    UnsupportedFileTypeError,
)
from textextract.core.logging import get_logger
from textextract.services.extraction.base import (
    BatchItem,
    BatchOptions,
    BinaryField,
    ExtractionMethod,
    ExtractionResult,
    FileKind,
    PdfStrategy,
    ResolvedItemOptions,
)
from textextract.services.extraction.doc_extractor import DocExtractor
from textextract.services.extraction.docx_extractor import DocxExtractor
from textextract.services.extraction.file_types import resolve_file_kind
from textextract.services.extraction.image_extractor import ImageExtractor
from textextract.services.extraction.ocr_engine import EngineFactory, OcrEngine, OcrEngineManager
from textextract.services.extraction.pdf_extractor import PdfExtractor
from textextract.services.extraction.txt_extractor import TxtExtractor

logger = get_logger(__name__)


def resolve_binary_field(item: BatchItem, binary_property: str) -> BinaryField:
    """Configured property first, otherwise the first field attached to the item."""
    if binary_property in item.binary:
        return item.binary[binary_property]
    for binary in item.binary.values():
        return binary
    raise MissingBinaryError(binary_property)


def needs_ocr(file_kind: FileKind, pdf_strategy: PdfStrategy) -> bool:
    if file_kind == FileKind.IMAGE:
        return True
    return file_kind == FileKind.PDF and pdf_strategy != PdfStrategy.TEXT


class BatchDispatcher:
    def __init__(
        self,
        options: BatchOptions,
        engine_factory: EngineFactory | None = None,
        image_extractor: ImageExtractor | None = None,
        pdf_extractor: PdfExtractor | None = None,
        docx_extractor: DocxExtractor | None = None,
        doc_extractor: DocExtractor | None = None,
        txt_extractor: TxtExtractor | None = None,
    ):
        self.options = options
        self.engine_factory = engine_factory
        self.image_extractor = image_extractor or ImageExtractor()
        self.pdf_extractor = pdf_extractor or PdfExtractor(self.image_extractor)
        self.docx_extractor = docx_extractor or DocxExtractor()
        self.doc_extractor = doc_extractor or DocExtractor()
        self.txt_extractor = txt_extractor or TxtExtractor()

    def run(self, items: list[BatchItem]) -> list[ExtractionResult]:
        results: list[ExtractionResult] = []
        logger.info(f"Processing batch of {len(items)} items (operation={self.options.operation.value})")

        with OcrEngineManager(self.options.ocr_language, self.engine_factory) as engines:
            for index, item in enumerate(items):
                try:
                    results.append(self._process_item(item, engines))
                except EngineInitError:
                    logger.error(f"OCR engine unavailable, aborting batch at item {index}")
                    raise
                except Exception as e:
                    if not self.options.continue_on_fail:
                        logger.error(f"Item {index} failed, aborting batch: {e}")
                        raise
                    logger.warning(f"Item {index} failed, continuing: {e}")
                    results.append(self._failure_result(item, e))

        failed = sum(1 for r in results if r.failed)
        logger.info(f"Batch finished: {len(results)} items, {failed} failed")
        return results

    def _process_item(self, item: BatchItem, engines: OcrEngineManager) -> ExtractionResult:
        binary = resolve_binary_field(item, self.options.binary_property)
        file_name = binary.file_name or "unknown"
        mime_type = binary.mime_type or ""

        max_mb = self.options.max_file_size_mb
        if max_mb is not None and len(binary.data) > max_mb * 1024 * 1024:
            raise FileTooLargeError(size_mb=len(binary.data) / (1024 * 1024), max_mb=max_mb)

        file_kind = resolve_file_kind(self.options.operation, mime_type, file_name)
        if file_kind is None:
            raise UnsupportedFileTypeError(mime_type or file_name)

        item_options = self.options.for_item(item.options)
        engine = engines.acquire() if needs_ocr(file_kind, item_options.pdf_strategy) else None

        result = self._extract(binary.data, file_kind, item_options, engine)
        result.file_name = file_name
        result.mime_type = mime_type
        if result.method.uses_ocr:
            result.language = engines.language

        logger.info(
            f"Extracted {len(result.text)} chars from {file_name} "
            f"({file_kind.value}, method={result.method.value})"
        )
        return result

    def _extract(
        self,
        data: bytes,
        file_kind: FileKind,
        options: ResolvedItemOptions,
        engine: OcrEngine | None,
    ) -> ExtractionResult:
        if file_kind == FileKind.IMAGE:
            image = self.image_extractor.extract(data, engine, options.preprocess)
            return ExtractionResult(
                text=image.text,
                file_type=file_kind,
                confidence=image.confidence,
                method=ExtractionMethod.OCR,
            )

        if file_kind == FileKind.PDF:
            pdf = self.pdf_extractor.extract(
                data,
                strategy=options.pdf_strategy,
                engine=engine,
                preprocess=options.preprocess,
                render_scale=options.pdf_render_scale,
                min_text_threshold=options.min_text_threshold,
            )
            return ExtractionResult(
                text=pdf.text,
                file_type=file_kind,
                page_count=pdf.page_count,
                confidence=pdf.confidence,
                method=pdf.method,
            )

        if file_kind == FileKind.DOCX:
            return ExtractionResult(
                text=self.docx_extractor.extract(data),
                file_type=file_kind,
                method=ExtractionMethod.DOCX,
            )

        if file_kind == FileKind.DOC:
            return ExtractionResult(
                text=self.doc_extractor.extract(data),
                file_type=file_kind,
                method=ExtractionMethod.DOC,
            )

        return ExtractionResult(
            text=self.txt_extractor.extract(data),
            file_type=file_kind,
            method=ExtractionMethod.TXT,
        )

    def _failure_result(self, item: BatchItem, error: Exception) -> ExtractionResult:
        binary = item.binary.get(self.options.binary_property)
        if binary is None:
            binary = next(iter(item.binary.values()), None)

        return ExtractionResult.failure(
            message=getattr(error, "message", None) or str(error),
            file_name=(binary.file_name if binary else None) or "unknown",
            mime_type=(binary.mime_type if binary else None) or "",
        )
