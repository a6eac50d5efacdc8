from unittest.mock import MagicMock

import pytest

from app.extraction.csv_processor import CsvDocumentProcessor
from app.extraction.exceptions import UnsupportedFormatError
from app.extraction.image_processor import ImageDocumentProcessor
from app.extraction.pdf_processor import PdfDocumentProcessor
from app.extraction.registry import (
    DOCX_CONTENT_TYPE,
    ProcessorRegistry,
    build_registry,
    normalize_content_type,
)
from app.extraction.text_processor import TextDocumentProcessor
from app.extraction.word_processor import WordDocumentProcessor


def _make_settings() -> MagicMock:
    return MagicMock(
        pdf_engine="pdfplumber",
        ocr_language="eng",
        ocr_detect_orientation=True,
        ocr_preprocess=False,
    )


class TestNormalizeContentType:
    def test_lowercases_and_drops_parameters(self) -> None:
        assert normalize_content_type("Text/Plain; charset=UTF-8") == "text/plain"


class TestProcessorRegistry:
    def test_resolves_registered_type(self) -> None:
        registry = ProcessorRegistry()
        processor = TextDocumentProcessor()
        registry.register("text/plain", processor)

        assert registry.resolve("TEXT/PLAIN; charset=utf-8") is processor
        assert registry.is_supported("text/plain")

    def test_unregistered_type_raises(self) -> None:
        registry = ProcessorRegistry()
        with pytest.raises(UnsupportedFormatError, match="application/zip"):
            registry.resolve("application/zip")

    def test_registers_many_types_at_once(self) -> None:
        registry = ProcessorRegistry()
        processor = MagicMock()
        registry.register(("image/png", "image/gif"), processor)
        assert registry.content_types == ["image/gif", "image/png"]


class TestBuildRegistry:
    def test_core_processors_always_registered(self) -> None:
        registry = build_registry(_make_settings(), ocr_provider=None)

        assert isinstance(registry.resolve(DOCX_CONTENT_TYPE), WordDocumentProcessor)
        assert isinstance(registry.resolve("application/pdf"), PdfDocumentProcessor)
        assert isinstance(registry.resolve("text/plain"), TextDocumentProcessor)
        assert isinstance(registry.resolve("text/csv"), CsvDocumentProcessor)

    def test_images_unsupported_without_ocr(self) -> None:
        registry = build_registry(_make_settings(), ocr_provider=None)
        assert not registry.is_supported("image/png")

    def test_images_registered_with_ocr(self) -> None:
        registry = build_registry(_make_settings(), ocr_provider=MagicMock())

        for content_type in ("image/jpeg", "image/jpg", "image/png", "image/tiff",
                             "image/bmp", "image/gif", "image/webp"):
            assert isinstance(registry.resolve(content_type), ImageDocumentProcessor)
