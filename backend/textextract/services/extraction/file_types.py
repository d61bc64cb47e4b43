"""File type registry: maps MIME types and extensions onto supported file kinds."""

from textextract.services.extraction.base import FileKind, Operation

MIME_MAP: dict[str, FileKind] = {
    # Images
    "image/png": FileKind.IMAGE,
    "image/jpeg": FileKind.IMAGE,
    "image/jpg": FileKind.IMAGE,
    "image/webp": FileKind.IMAGE,
    "image/bmp": FileKind.IMAGE,
    "image/tiff": FileKind.IMAGE,
    "image/gif": FileKind.IMAGE,
    # PDF
    "application/pdf": FileKind.PDF,
    # Word
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileKind.DOCX,
    "application/msword": FileKind.DOC,
    # Plain text
    "text/plain": FileKind.TXT,
}

EXTENSION_MAP: dict[str, FileKind] = {
    "png": FileKind.IMAGE,
    "jpg": FileKind.IMAGE,
    "jpeg": FileKind.IMAGE,
    "webp": FileKind.IMAGE,
    "bmp": FileKind.IMAGE,
    "tiff": FileKind.IMAGE,
    "tif": FileKind.IMAGE,
    "gif": FileKind.IMAGE,
    "pdf": FileKind.PDF,
    "docx": FileKind.DOCX,
    "doc": FileKind.DOC,
    "txt": FileKind.TXT,
}


def detect_file_kind(mime_type: str | None = None, file_name: str | None = None) -> FileKind | None:
    """Return the file kind for a MIME type / file name pair, or None.

    The MIME type wins whenever it is known; the extension is only consulted
    as a fallback.
    """
    if mime_type and mime_type in MIME_MAP:
        return MIME_MAP[mime_type]
    if file_name:
        ext = file_name.rsplit(".", 1)[-1].lower()
        if ext in EXTENSION_MAP:
            return EXTENSION_MAP[ext]
    return None


def resolve_file_kind(
    operation: Operation,
    mime_type: str | None = None,
    file_name: str | None = None,
) -> FileKind | None:
    """Apply the caller's operation on top of auto-detection."""
    if operation == Operation.OCR:
        return FileKind.IMAGE
    if operation == Operation.PDF:
        return FileKind.PDF
    if operation == Operation.DOCUMENT:
        detected = detect_file_kind(mime_type, file_name)
        if detected in (FileKind.DOC, FileKind.DOCX):
            return detected
        return FileKind.DOCX
    return detect_file_kind(mime_type, file_name)
