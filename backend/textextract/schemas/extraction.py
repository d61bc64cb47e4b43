import base64
import binascii

from pydantic import BaseModel, Field, field_validator

from textextract.config import SUPPORTED_OCR_LANGUAGES
from textextract.services.extraction.base import (
    BatchItem,
    BinaryField,
    ExtractionMethod,
    ExtractionResult,
    FileKind,
    ItemOptions,
    Operation,
    PdfStrategy,
)


def _validate_language(value: str | None) -> str | None:
    if value is None:
        return value
    for code in value.split("+"):
        if code not in SUPPORTED_OCR_LANGUAGES:
            raise ValueError(f"Unsupported OCR language: {code}")
    return value


class ExtractionOptions(BaseModel):
    """Batch-level options. Unset fields fall back to the server settings."""

    binary_property: str | None = None
    operation: Operation | None = None
    ocr_language: str | None = None
    preprocess: bool | None = None
    pdf_strategy: PdfStrategy | None = None
    pdf_render_scale: float | None = Field(default=None, ge=1, le=4)
    min_text_threshold: int | None = Field(default=None, ge=0)
    continue_on_fail: bool | None = None

    @field_validator("ocr_language")
    @classmethod
    def check_language(cls, value: str | None) -> str | None:
        return _validate_language(value)


class BinaryPayload(BaseModel):
    data: str = Field(description="Base64-encoded file content")
    file_name: str | None = None
    mime_type: str | None = None

    @field_validator("data")
    @classmethod
    def check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"data is not valid base64: {e}") from e
        return value


class ItemOverrides(BaseModel):
    pdf_strategy: PdfStrategy | None = None
    pdf_render_scale: float | None = Field(default=None, ge=1, le=4)
    min_text_threshold: int | None = Field(default=None, ge=0)
    preprocess: bool | None = None


class BatchItemRequest(BaseModel):
    binary: dict[str, BinaryPayload] = Field(default_factory=dict)
    options: ItemOverrides = Field(default_factory=ItemOverrides)

    def to_item(self) -> BatchItem:
        return BatchItem(
            binary={
                name: BinaryField(
                    data=base64.b64decode(payload.data),
                    file_name=payload.file_name,
                    mime_type=payload.mime_type,
                )
                for name, payload in self.binary.items()
            },
            options=ItemOptions(**self.options.model_dump()),
        )


class BatchExtractionRequest(BaseModel):
    options: ExtractionOptions = Field(default_factory=ExtractionOptions)
    items: list[BatchItemRequest] = Field(min_length=1)


class ExtractionResultResponse(BaseModel):
    text: str | None = None
    file_name: str = "unknown"
    mime_type: str = ""
    file_type: FileKind | None = None
    page_count: int | None = None
    confidence: int | None = None
    language: str | None = None
    method: ExtractionMethod | None = None
    error: str | None = None

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ExtractionResultResponse":
        return cls(
            text=result.text,
            file_name=result.file_name,
            mime_type=result.mime_type,
            file_type=result.file_type,
            page_count=result.page_count,
            confidence=result.confidence,
            language=result.language,
            method=result.method,
            error=result.error,
        )


class BatchExtractionResponse(BaseModel):
    results: list[ExtractionResultResponse]
    total: int
    failed: int = 0

    @classmethod
    def from_results(cls, results: list[ExtractionResult]) -> "BatchExtractionResponse":
        return cls(
            results=[ExtractionResultResponse.from_result(r) for r in results],
            total=len(results),
            failed=sum(1 for r in results if r.failed),
        )


class LanguageResponse(BaseModel):
    code: str
    name: str
