import io

from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger
from textextract.services.extraction.base import ImageResult, round_confidence
from textextract.services.extraction.ocr_engine import OcrEngine

logger = get_logger(__name__)


def preprocess_image(image_data: bytes) -> bytes:
    """Greyscale, normalize contrast and sharpen an image before OCR."""
    from PIL import Image, ImageFilter, ImageOps

    try:
        with Image.open(io.BytesIO(image_data)) as image:
            processed = ImageOps.grayscale(image)
            processed = ImageOps.autocontrast(processed)
            processed = processed.filter(ImageFilter.SHARPEN)
    except Exception as e:
        raise ExtractionError(f"Could not read image: {e}") from e

    buffer = io.BytesIO()
    processed.save(buffer, format="PNG")
    return buffer.getvalue()


class ImageExtractor:
    def extract(self, file_data: bytes, engine: OcrEngine, preprocess: bool = True) -> ImageResult:
        data = preprocess_image(file_data) if preprocess else file_data

        try:
            output = engine.recognize(data)
        except Exception as e:
            logger.error(f"OCR recognition failed: {e}")
            raise ExtractionError(f"OCR recognition failed: {e}") from e

        return ImageResult(
            text=output.text.strip(),
            confidence=round_confidence(output.confidence),
        )
