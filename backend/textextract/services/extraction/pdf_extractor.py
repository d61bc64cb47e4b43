import io

from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger
from textextract.services.extraction.base import (
    ExtractionMethod,
    PdfResult,
    PdfStrategy,
    round_confidence,
)
from textextract.services.extraction.image_extractor import ImageExtractor
from textextract.services.extraction.ocr_engine import OcrEngine

logger = get_logger(__name__)

# PDF user space is 72 points per inch
PDF_BASE_DPI = 72


class PdfExtractor:
    def __init__(self, image_extractor: ImageExtractor | None = None):
        self.image_extractor = image_extractor or ImageExtractor()

    def extract(
        self,
        file_data: bytes,
        strategy: PdfStrategy = PdfStrategy.AUTO,
        engine: OcrEngine | None = None,
        preprocess: bool = True,
        render_scale: float = 2.0,
        min_text_threshold: int = 50,
    ) -> PdfResult:
        should_try_text = strategy in (PdfStrategy.AUTO, PdfStrategy.TEXT)
        should_try_ocr = strategy in (PdfStrategy.AUTO, PdfStrategy.OCR)

        text = ""
        page_count = 0

        if should_try_text:
            text, page_count = self._extract_text_layer(file_data)

            # Enough embedded text: never rasterize
            if len(text) >= min_text_threshold:
                return PdfResult(
                    text=text,
                    page_count=page_count,
                    confidence=None,
                    method=ExtractionMethod.PDF_TEXT,
                )
            if should_try_ocr:
                logger.info(
                    f"Text layer yielded {len(text)} chars (< {min_text_threshold}), falling back to OCR"
                )

        if should_try_ocr and engine is not None:
            images = self._render_pages(file_data, render_scale)
            if images:
                return self._ocr_pages(images, engine, preprocess)
            logger.warning("PDF rendered no pages, returning text layer result")
        elif should_try_ocr:
            logger.warning("OCR requested for PDF but no engine available, returning text layer result")

        return PdfResult(
            text=text,
            page_count=page_count,
            confidence=None,
            method=ExtractionMethod.PDF_TEXT,
        )

    def _ocr_pages(self, images: list[bytes], engine: OcrEngine, preprocess: bool) -> PdfResult:
        texts = []
        total_confidence = 0
        for page_num, image in enumerate(images, start=1):
            result = self.image_extractor.extract(image, engine, preprocess)
            logger.debug(f"OCR page {page_num}/{len(images)}: {len(result.text)} chars, conf={result.confidence}")
            texts.append(result.text)
            total_confidence += result.confidence

        return PdfResult(
            text="\n\n".join(texts),
            page_count=len(images),
            confidence=round_confidence(total_confidence / len(images)),
            method=ExtractionMethod.PDF_OCR,
        )

    def _extract_text_layer(self, file_data: bytes) -> tuple[str, int]:
        import pdfplumber

        try:
            with pdfplumber.open(io.BytesIO(file_data)) as pdf:
                page_count = len(pdf.pages)
                texts = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            logger.error(f"pdfplumber could not read PDF: {e}")
            raise ExtractionError(f"Could not read PDF: {e}") from e

        return "\n".join(texts).strip(), page_count

    def _render_pages(self, file_data: bytes, scale: float) -> list[bytes]:
        from pdf2image import convert_from_bytes

        try:
            images = convert_from_bytes(file_data, dpi=int(PDF_BASE_DPI * scale))
        except Exception as e:
            logger.error(f"pdf2image conversion failed: {e}")
            raise ExtractionError(f"Could not render PDF pages: {e}") from e

        pages = []
        for image in images:
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            pages.append(buffer.getvalue())
        return pages
