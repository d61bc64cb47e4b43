from dataclasses import dataclass, field
from enum import Enum


class FileKind(str, Enum):
    IMAGE = "image"
    PDF = "pdf"
    DOCX = "docx"
    DOC = "doc"
    TXT = "txt"


class Operation(str, Enum):
    AUTO = "auto"
    OCR = "ocr"
    PDF = "pdf"
    DOCUMENT = "document"


class PdfStrategy(str, Enum):
    AUTO = "auto"
    TEXT = "text"
    OCR = "ocr"


class ExtractionMethod(str, Enum):
    OCR = "ocr"
    PDF_TEXT = "pdf-text"
    PDF_OCR = "pdf-ocr"
    DOCX = "docx"
    DOC = "doc"
    TXT = "txt"

    @property
    def uses_ocr(self) -> bool:
        return self in (ExtractionMethod.OCR, ExtractionMethod.PDF_OCR)

    @property
    def is_pdf(self) -> bool:
        return self.value.startswith("pdf")


@dataclass
class BinaryField:
    data: bytes
    file_name: str | None = None
    mime_type: str | None = None


@dataclass
class ItemOptions:
    """Per-item overrides. ``None`` means "use the batch default"."""

    pdf_strategy: PdfStrategy | None = None
    pdf_render_scale: float | None = None
    min_text_threshold: int | None = None
    preprocess: bool | None = None


@dataclass
class BatchItem:
    # Insertion order is the order the fields were attached to the item
    binary: dict[str, BinaryField] = field(default_factory=dict)
    options: ItemOptions = field(default_factory=ItemOptions)


@dataclass
class BatchOptions:
    binary_property: str = "data"
    operation: Operation = Operation.AUTO
    ocr_language: str = "eng"
    preprocess: bool = True
    pdf_strategy: PdfStrategy = PdfStrategy.AUTO
    pdf_render_scale: float = 2.0
    min_text_threshold: int = 50
    continue_on_fail: bool = False
    max_file_size_mb: int | None = None

    @classmethod
    def from_settings(cls, settings, **overrides) -> "BatchOptions":
        values = {
            "binary_property": settings.binary_property,
            "operation": Operation(settings.operation),
            "ocr_language": settings.ocr_language,
            "preprocess": settings.preprocess,
            "pdf_strategy": PdfStrategy(settings.pdf_strategy),
            "pdf_render_scale": settings.pdf_render_scale,
            "min_text_threshold": settings.min_text_threshold,
            "continue_on_fail": settings.continue_on_fail,
            "max_file_size_mb": settings.max_file_size_mb,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def for_item(self, item_options: ItemOptions) -> "ResolvedItemOptions":
        def pick(override, default):
            return default if override is None else override

        return ResolvedItemOptions(
            pdf_strategy=pick(item_options.pdf_strategy, self.pdf_strategy),
            pdf_render_scale=pick(item_options.pdf_render_scale, self.pdf_render_scale),
            min_text_threshold=pick(item_options.min_text_threshold, self.min_text_threshold),
            preprocess=pick(item_options.preprocess, self.preprocess),
        )


@dataclass(frozen=True)
class ResolvedItemOptions:
    pdf_strategy: PdfStrategy
    pdf_render_scale: float
    min_text_threshold: int
    preprocess: bool


@dataclass
class OcrOutput:
    """Raw output of one recognition call, confidence on a 0-100 scale."""

    text: str
    confidence: float


@dataclass
class ImageResult:
    text: str
    confidence: int


@dataclass
class PdfResult:
    text: str
    page_count: int
    confidence: int | None
    method: ExtractionMethod


@dataclass
class ExtractionResult:
    text: str | None = None
    file_name: str = "unknown"
    mime_type: str = ""
    file_type: FileKind | None = None
    page_count: int | None = None
    confidence: int | None = None
    language: str | None = None
    method: ExtractionMethod | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, message: str, file_name: str = "unknown", mime_type: str = "") -> "ExtractionResult":
        return cls(error=message, file_name=file_name, mime_type=mime_type)


def round_confidence(value: float) -> int:
    """Round half-up onto the 0-100 scale."""
    return max(0, min(100, int(value + 0.5)))
