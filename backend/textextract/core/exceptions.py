class TextExtractError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str = "An error occurred", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class UnsupportedFileTypeError(TextExtractError):
    def __init__(self, file_type: str):
        super().__init__(f"Unsupported file type: {file_type}", status_code=400)


class MissingBinaryError(TextExtractError):
    def __init__(self, binary_property: str):
        super().__init__(
            f"No binary data found on item (expected property '{binary_property}')",
            status_code=400,
        )


class ExtractionError(TextExtractError):
    def __init__(self, message: str = "Text extraction failed"):
        super().__init__(message, status_code=422)


class EngineInitError(TextExtractError):
    def __init__(self, message: str = "OCR engine failed to start"):
        super().__init__(message, status_code=503)


class FileTooLargeError(TextExtractError):
    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            f"File size {size_mb:.1f}MB exceeds maximum {max_mb}MB",
            status_code=413,
        )
