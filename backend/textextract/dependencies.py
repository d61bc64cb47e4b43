from textextract.services.extraction.ocr_engine import EngineFactory, TesseractEngine


def get_engine_factory() -> EngineFactory:
    return TesseractEngine
