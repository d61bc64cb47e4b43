import io
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from textextract.services.extraction.base import OcrOutput


class FakeEngine:
    """Stands in for Tesseract: returns queued outputs, records every call."""

    def __init__(self, language: str, outputs: list[OcrOutput] | None = None, error: Exception | None = None):
        self.language = language
        self.outputs = list(outputs or [])
        self.error = error
        self.recognized: list[bytes] = []
        self.terminate_calls = 0

    def recognize(self, image_data: bytes) -> OcrOutput:
        self.recognized.append(image_data)
        if self.error:
            raise self.error
        if self.outputs:
            return self.outputs.pop(0)
        return OcrOutput(text="recognized text", confidence=90.0)

    def terminate(self) -> None:
        self.terminate_calls += 1


class FakeEngineFactory:
    def __init__(self):
        self.outputs: list[OcrOutput] = []
        self.recognize_error: Exception | None = None
        self.init_error: Exception | None = None
        self.created: list[FakeEngine] = []

    def __call__(self, language: str) -> FakeEngine:
        if self.init_error:
            raise self.init_error
        engine = FakeEngine(language, self.outputs, self.recognize_error)
        self.created.append(engine)
        return engine

    @property
    def engine(self) -> FakeEngine:
        return self.created[0]


@pytest.fixture
def engine_factory() -> FakeEngineFactory:
    return FakeEngineFactory()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine("eng")


@pytest_asyncio.fixture(scope="function")
async def client(engine_factory) -> AsyncGenerator[AsyncClient, None]:
    from textextract.dependencies import get_engine_factory
    from textextract.main import app

    app.dependency_overrides[get_engine_factory] = lambda: engine_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_png_bytes() -> bytes:
    from PIL import Image, ImageDraw

    image = Image.new("RGB", (200, 60), "white")
    ImageDraw.Draw(image).text((10, 20), "Hello", fill="black")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal one-page PDF with an embedded "Hello World" text layer."""
    return b"""%PDF-1.0
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT /F1 12 Tf 100 700 Td (Hello World) Tj ET
endstream
endobj
5 0 obj
<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>
endobj
xref
0 6
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
0000000266 00000 n
0000000360 00000 n
trailer
<< /Size 6 /Root 1 0 R >>
startxref
441
%%EOF"""


@pytest.fixture
def sample_docx_bytes() -> bytes:
    from docx import Document

    doc = Document()
    doc.add_paragraph("Quarterly report")
    doc.add_paragraph("Revenue grew in every region.")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "North"
    table.rows[0].cells[1].text = "42"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()

