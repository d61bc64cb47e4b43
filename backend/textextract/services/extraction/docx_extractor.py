import io
from typing import Iterator

from textextract.core.exceptions import ExtractionError
from textextract.core.logging import get_logger

logger = get_logger(__name__)


def _iter_paragraph_text(container) -> Iterator[str]:
    """Yield paragraph text in document order, descending into table cells."""
    from docx.table import Table

    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                # A horizontally merged cell is listed once per grid column it spans
                seen = set()
                for cell in row.cells:
                    if id(cell._tc) in seen:
                        continue
                    seen.add(id(cell._tc))
                    yield from _iter_paragraph_text(cell)
        else:
            yield block.text


class DocxExtractor:
    def extract(self, file_data: bytes) -> str:
        from docx import Document as DocxDocument

        try:
            doc = DocxDocument(io.BytesIO(file_data))
        except Exception as e:
            logger.error(f"python-docx could not open document: {e}")
            raise ExtractionError(f"Could not read DOCX document: {e}") from e

        paragraphs = [text for text in _iter_paragraph_text(doc) if text.strip()]
        return "\n\n".join(paragraphs).strip()
