from unittest.mock import MagicMock, patch

import pytest

from textextract.core.exceptions import EngineInitError
from textextract.services.extraction.ocr_engine import OcrEngineManager, TesseractEngine


class TestOcrEngineManager:
    def test_lazy_until_acquired(self, engine_factory):
        with OcrEngineManager("eng", engine_factory) as engines:
            assert engines.state == "uninitialized"
            assert engine_factory.created == []

    def test_acquire_creates_once(self, engine_factory):
        with OcrEngineManager("deu", engine_factory) as engines:
            first = engines.acquire()
            second = engines.acquire()
            assert engines.state == "ready"

        assert first is second
        assert len(engine_factory.created) == 1
        assert first.language == "deu"

    def test_terminates_once_on_exit(self, engine_factory):
        manager = OcrEngineManager("eng", engine_factory)
        with manager as engines:
            engines.acquire()
        manager.release()

        assert engine_factory.engine.terminate_calls == 1
        assert manager.state == "terminated"

    def test_terminates_on_exception(self, engine_factory):
        with pytest.raises(RuntimeError):
            with OcrEngineManager("eng", engine_factory) as engines:
                engines.acquire()
                raise RuntimeError("boom")

        assert engine_factory.engine.terminate_calls == 1

    def test_no_engine_no_terminate(self, engine_factory):
        with OcrEngineManager("eng", engine_factory):
            pass
        assert engine_factory.created == []

    def test_acquire_after_terminate_raises(self, engine_factory):
        manager = OcrEngineManager("eng", engine_factory)
        with manager as engines:
            engines.acquire()
        with pytest.raises(EngineInitError):
            manager.acquire()

    def test_factory_failure_wrapped(self, engine_factory):
        engine_factory.init_error = OSError("tesseract not found")
        with OcrEngineManager("eng", engine_factory) as engines:
            with pytest.raises(EngineInitError, match="tesseract not found"):
                engines.acquire()


def _fake_pytesseract(languages=("eng", "fra", "osd")):
    module = MagicMock()
    module.TesseractNotFoundError = type("TesseractNotFoundError", (EnvironmentError,), {})
    module.get_tesseract_version.return_value = "5.3.0"
    module.get_languages.return_value = list(languages)
    module.Output.DICT = "dict"
    return module


def _word_table(rows):
    """Build an image_to_data DICT from (text, conf, block, par, line) rows."""
    text, conf, block, par, line = (list(column) for column in zip(*rows))
    return {"text": text, "conf": conf, "block_num": block, "par_num": par, "line_num": line}


class TestTesseractEngine:
    def test_missing_language_raises(self):
        with patch.dict("sys.modules", {"pytesseract": _fake_pytesseract()}):
            with pytest.raises(EngineInitError, match="jpn"):
                TesseractEngine("eng+jpn")

    def test_missing_binary_raises(self):
        module = _fake_pytesseract()
        module.get_tesseract_version.side_effect = module.TesseractNotFoundError()
        with patch.dict("sys.modules", {"pytesseract": module}):
            with pytest.raises(EngineInitError, match="not installed"):
                TesseractEngine("eng")

    def test_recognize_averages_word_confidence(self, sample_png_bytes):
        module = _fake_pytesseract()
        module.image_to_data.return_value = _word_table(
            [
                ("", "-1", 1, 0, 0),
                ("Hello", "90", 1, 1, 1),
                ("there", 80.0, 1, 1, 1),
                ("", "-1", 1, 1, 0),
                ("", "bad", 1, 1, 1),
            ]
        )

        with patch.dict("sys.modules", {"pytesseract": module}):
            engine = TesseractEngine("eng+fra")
            output = engine.recognize(sample_png_bytes)

        assert output.text == "Hello there"
        assert output.confidence == 85.0
        assert module.image_to_data.call_args.kwargs["lang"] == "eng+fra"

    def test_recognize_runs_tesseract_once(self, sample_png_bytes):
        module = _fake_pytesseract()
        module.image_to_data.return_value = _word_table(
            [
                ("Invoice", "95", 1, 1, 1),
                ("2024", "93", 1, 1, 1),
                ("Total", "91", 1, 1, 2),
                ("Paid", "89", 2, 1, 1),
            ]
        )

        with patch.dict("sys.modules", {"pytesseract": module}):
            output = TesseractEngine("eng").recognize(sample_png_bytes)

        assert output.text == "Invoice 2024\nTotal\n\nPaid"
        module.image_to_data.assert_called_once()
        module.image_to_string.assert_not_called()

    def test_recognize_no_words_is_zero_confidence(self, sample_png_bytes):
        module = _fake_pytesseract()
        module.image_to_data.return_value = _word_table([("", "-1", 1, 0, 0)])

        with patch.dict("sys.modules", {"pytesseract": module}):
            output = TesseractEngine("eng").recognize(sample_png_bytes)

        assert output.confidence == 0.0

    def test_terminate_is_idempotent(self):
        with patch.dict("sys.modules", {"pytesseract": _fake_pytesseract()}):
            engine = TesseractEngine("eng")
        engine.terminate()
        engine.terminate()
        with pytest.raises(RuntimeError):
            engine.recognize(b"")
