"""
Tesseract OCR engine and its per-batch lifecycle.

The engine is created lazily by the first item that needs OCR, shared by every
later item of the same batch, and terminated exactly once when the batch ends.
"""

import io
from typing import Callable, Protocol

from textextract.config import settings
from textextract.core.exceptions import EngineInitError
from textextract.core.logging import get_logger
from textextract.services.extraction.base import OcrOutput

logger = get_logger(__name__)


class OcrEngine(Protocol):
    language: str

    def recognize(self, image_data: bytes) -> OcrOutput:
        ...

    def terminate(self) -> None:
        ...


EngineFactory = Callable[[str], OcrEngine]


def assemble_text(ocr_data: dict) -> str:
    """Rebuild page text from an image_to_data word table.

    Words on a line are joined by spaces, lines by newlines and paragraphs by a
    blank line, the same layout image_to_string produces.
    """
    paragraphs: list[list[str]] = []
    current_paragraph = current_line = None
    for i, word in enumerate(ocr_data["text"]):
        if not word or not word.strip():
            continue
        paragraph = (ocr_data["block_num"][i], ocr_data["par_num"][i])
        line = paragraph + (ocr_data["line_num"][i],)
        if paragraph != current_paragraph:
            paragraphs.append([])
            current_paragraph, current_line = paragraph, None
        if line != current_line:
            paragraphs[-1].append(word.strip())
            current_line = line
        else:
            paragraphs[-1][-1] += " " + word.strip()
    return "\n\n".join("\n".join(lines) for lines in paragraphs)


class TesseractEngine:
    def __init__(self, language: str):
        import pytesseract

        if settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd

        try:
            version = pytesseract.get_tesseract_version()
            available = set(pytesseract.get_languages(config=""))
        except pytesseract.TesseractNotFoundError as e:
            raise EngineInitError(f"Tesseract is not installed or not on PATH: {e}") from e

        missing = [lang for lang in language.split("+") if lang not in available]
        if missing:
            raise EngineInitError(f"Tesseract language data not installed: {', '.join(missing)}")

        self.language = language
        self._pytesseract = pytesseract
        self._terminated = False
        logger.info(f"Tesseract {version} ready (lang={language})")

    def recognize(self, image_data: bytes) -> OcrOutput:
        from PIL import Image

        if self._terminated:
            raise RuntimeError("OCR engine has been terminated")

        with Image.open(io.BytesIO(image_data)) as image:
            image.load()
            ocr_data = self._pytesseract.image_to_data(
                image, lang=self.language, output_type=self._pytesseract.Output.DICT
            )

        text = assemble_text(ocr_data)

        # Tesseract reports -1 for non-word boxes
        confidences = []
        for conf in ocr_data["conf"]:
            try:
                value = float(conf)
            except (TypeError, ValueError):
                continue
            if value >= 0:
                confidences.append(value)

        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrOutput(text=text, confidence=avg_confidence)

    def terminate(self) -> None:
        self._terminated = True


class OcrEngineManager:
    """Holds at most one engine per batch run.

    Use as a context manager around the whole batch loop::

        with OcrEngineManager("eng") as engines:
            engine = engines.acquire()
    """

    def __init__(self, language: str, factory: EngineFactory | None = None):
        self.language = language
        self._factory = factory or TesseractEngine
        self._engine: OcrEngine | None = None
        self._terminated = False

    @property
    def state(self) -> str:
        if self._terminated:
            return "terminated"
        return "ready" if self._engine is not None else "uninitialized"

    def acquire(self) -> OcrEngine:
        if self._terminated:
            raise EngineInitError("OCR engine already terminated for this batch")
        if self._engine is None:
            logger.info(f"Starting OCR engine (lang={self.language})")
            try:
                self._engine = self._factory(self.language)
            except EngineInitError:
                raise
            except Exception as e:
                raise EngineInitError(f"OCR engine failed to start: {e}") from e
        return self._engine

    def release(self) -> None:
        if self._terminated:
            return
        self._terminated = True
        if self._engine is not None:
            logger.info("Terminating OCR engine")
            self._engine.terminate()

    def __enter__(self) -> "OcrEngineManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
