from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from textextract.api.v1.router import api_router
from textextract.config import settings
from textextract.core.exceptions import TextExtractError
from textextract.core.logging import get_logger, setup_logging
from textextract.core.middleware import CorrelationIDMiddleware, RequestLoggingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        f"Starting {settings.app_name} "
        f"(ocr_language={settings.ocr_language}, pdf_strategy={settings.pdf_strategy})"
    )
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Extract plain text from images (OCR), PDFs, DOCX, DOC and TXT files",
    lifespan=lifespan,
)

# Outermost first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

app.include_router(api_router)


@app.exception_handler(TextExtractError)
async def text_extract_exception_handler(request: Request, exc: TextExtractError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "status_code": exc.status_code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "status_code": 500},
    )
