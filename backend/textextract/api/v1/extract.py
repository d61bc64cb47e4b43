from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from textextract.config import SUPPORTED_OCR_LANGUAGES, settings
from textextract.core.logging import get_logger
from textextract.dependencies import get_engine_factory
from textextract.schemas.extraction import (
    BatchExtractionRequest,
    BatchExtractionResponse,
    ExtractionOptions,
    LanguageResponse,
)
from textextract.services.extraction.base import BatchItem, BatchOptions, BinaryField, Operation, PdfStrategy
from textextract.services.extraction.dispatcher import BatchDispatcher
from textextract.services.extraction.ocr_engine import EngineFactory

router = APIRouter(tags=["Extraction"])
logger = get_logger(__name__)


def _batch_options(options: ExtractionOptions) -> BatchOptions:
    return BatchOptions.from_settings(settings, **options.model_dump())


@router.post("/extract", response_model=BatchExtractionResponse)
async def extract_files(
    files: list[UploadFile] = File(...),
    operation: Operation | None = Form(default=None),
    ocr_language: str | None = Form(default=None),
    preprocess: bool | None = Form(default=None),
    pdf_strategy: PdfStrategy | None = Form(default=None),
    pdf_render_scale: float | None = Form(default=None),
    min_text_threshold: int | None = Form(default=None),
    continue_on_fail: bool | None = Form(default=None),
    engine_factory: EngineFactory = Depends(get_engine_factory),
):
    try:
        options = ExtractionOptions(
            operation=operation,
            ocr_language=ocr_language,
            preprocess=preprocess,
            pdf_strategy=pdf_strategy,
            pdf_render_scale=pdf_render_scale,
            min_text_threshold=min_text_threshold,
            continue_on_fail=continue_on_fail,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    batch_options = _batch_options(options)

    items = []
    for file in files:
        content = await file.read()
        items.append(
            BatchItem(
                binary={
                    batch_options.binary_property: BinaryField(
                        data=content,
                        file_name=file.filename,
                        mime_type=file.content_type,
                    )
                }
            )
        )

    dispatcher = BatchDispatcher(batch_options, engine_factory=engine_factory)
    results = await run_in_threadpool(dispatcher.run, items)
    return BatchExtractionResponse.from_results(results)


@router.post("/extract/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    request: BatchExtractionRequest,
    engine_factory: EngineFactory = Depends(get_engine_factory),
):
    items = [item.to_item() for item in request.items]

    dispatcher = BatchDispatcher(_batch_options(request.options), engine_factory=engine_factory)
    results = await run_in_threadpool(dispatcher.run, items)
    return BatchExtractionResponse.from_results(results)


@router.get("/languages", response_model=list[LanguageResponse])
async def list_languages():
    return [LanguageResponse(code=code, name=name) for code, name in SUPPORTED_OCR_LANGUAGES.items()]
