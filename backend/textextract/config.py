from pydantic_settings import BaseSettings, SettingsConfigDict

# Tesseract language packs offered to callers (code -> display name)
SUPPORTED_OCR_LANGUAGES: dict[str, str] = {
    "ara": "Arabic",
    "chi_sim": "Chinese Simplified",
    "chi_tra": "Chinese Traditional",
    "nld": "Dutch",
    "eng": "English",
    "fra": "French",
    "deu": "German",
    "hin": "Hindi",
    "ita": "Italian",
    "jpn": "Japanese",
    "kor": "Korean",
    "por": "Portuguese",
    "rus": "Russian",
    "spa": "Spanish",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "Text Extractor"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Batch defaults
    binary_property: str = "data"
    operation: str = "auto"
    continue_on_fail: bool = False

    # OCR
    ocr_language: str = "eng"
    preprocess: bool = True
    tesseract_cmd: str = ""

    # PDF
    pdf_strategy: str = "auto"
    pdf_render_scale: float = 2.0
    min_text_threshold: int = 50

    # Legacy Word documents
    antiword_cmd: str = "antiword"

    # Uploads
    max_file_size_mb: int = 50


settings = Settings()
