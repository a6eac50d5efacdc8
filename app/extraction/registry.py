from app.config.settings import Settings
from app.extraction.base import BaseFormatProcessor
from app.extraction.csv_processor import CsvDocumentProcessor
from app.extraction.exceptions import UnsupportedFormatError
from app.extraction.image_processor import ImageDocumentProcessor
from app.extraction.pdf_processor import PdfDocumentProcessor
from app.extraction.text_processor import TextDocumentProcessor
from app.extraction.word_processor import WordDocumentProcessor
from app.logging.logger import Log
from app.ocr.base import BaseOcrProvider
from app.ocr.models import OcrOptions
from app.pdf.factory import PdfAdapterFactory

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"
CSV_CONTENT_TYPE = "text/csv"
IMAGE_CONTENT_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/tiff",
    "image/bmp",
    "image/gif",
    "image/webp",
)


def normalize_content_type(content_type: str) -> str:
    """Lower-case a MIME type and drop parameters such as ``; charset=utf-8``."""
    return content_type.split(";", 1)[0].strip().lower()


class ProcessorRegistry:
    """Maps content types to format processors."""

    def __init__(self) -> None:
        self._processors: dict[str, BaseFormatProcessor] = {}

    def register(self, content_types: tuple[str, ...] | str, processor: BaseFormatProcessor) -> None:
        if isinstance(content_types, str):
            content_types = (content_types,)
        for content_type in content_types:
            self._processors[normalize_content_type(content_type)] = processor

    def is_supported(self, content_type: str) -> bool:
        return normalize_content_type(content_type) in self._processors

    def resolve(self, content_type: str) -> BaseFormatProcessor:
        """Return the processor for a content type.

        Raises:
            UnsupportedFormatError: if no processor is registered for it.
        """
        processor = self._processors.get(normalize_content_type(content_type))
        if processor is None:
            raise UnsupportedFormatError(
                f"Content type '{content_type}' is not supported for processing"
            )
        return processor

    @property
    def content_types(self) -> list[str]:
        return sorted(self._processors)


def build_registry(settings: Settings, ocr_provider: BaseOcrProvider | None) -> ProcessorRegistry:
    """Register the built-in processors.

    Image types are registered only when an OCR provider is available;
    without one they resolve as unsupported.
    """
    registry = ProcessorRegistry()
    registry.register(DOCX_CONTENT_TYPE, WordDocumentProcessor())
    registry.register(PDF_CONTENT_TYPE, PdfDocumentProcessor(PdfAdapterFactory.create(settings)))
    registry.register(TEXT_CONTENT_TYPE, TextDocumentProcessor())
    registry.register(CSV_CONTENT_TYPE, CsvDocumentProcessor())

    if ocr_provider is not None:
        options = OcrOptions(
            language=settings.ocr_language,
            detect_orientation=settings.ocr_detect_orientation,
            preprocess=settings.ocr_preprocess,
        )
        registry.register(IMAGE_CONTENT_TYPES, ImageDocumentProcessor(ocr_provider, options))
        Log.info("Image processing with OCR enabled")
    else:
        Log.warning("OCR provider not available, image processing disabled")

    Log.info(f"Processor registry initialized with {len(registry.content_types)} content types")
    return registry
