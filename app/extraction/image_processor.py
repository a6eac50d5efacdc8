from pathlib import Path

from app.extraction.base import BaseFormatProcessor
from app.extraction.exceptions import ExtractionError
from app.extraction.metadata import DocumentMetadata
from app.extraction.text_processor import file_timestamps
from app.logging.logger import Log
from app.ocr.base import BaseOcrProvider
from app.ocr.models import OcrOptions


class ImageDocumentProcessor(BaseFormatProcessor):
    """Raster images, with text recognized by the OCR provider.

    The registry routes files here by content type, so the stored file
    name may carry any suffix or none.
    """

    def __init__(self, ocr_provider: BaseOcrProvider, options: OcrOptions | None = None) -> None:
        self._ocr = ocr_provider
        self._options = options or OcrOptions()

    def extract_text(self, path: Path) -> str:
        """Return OCR text. An OCR failure or empty result yields an empty string."""
        if not path.exists():
            raise ExtractionError(f"Image file not found: {path}")

        Log.info(f"Processing image file: {path.name}")
        result = self._ocr.extract_text(path, self._options)

        if not result.success:
            Log.error(f"OCR failed for {path.name}: {result.error_message}")
            return ""

        Log.info(
            f"OCR completed for {path.name}. Confidence: {result.confidence_score:.1f}%, "
            f"Words: {result.word_count}"
        )
        for warning in result.warnings:
            Log.warning(f"OCR warning for {path.name}: {warning}")
        return result.text

    def extract_metadata(self, path: Path) -> DocumentMetadata:
        if not path.exists():
            raise ExtractionError(f"Image file not found: {path}")

        created_at, modified_at = file_timestamps(path)
        metadata = DocumentMetadata(
            created_at=created_at,
            modified_at=modified_at,
            page_count=1,
        )
        metadata.set_property("ProcessorType", self.processor_type)
        metadata.set_property("FileSize", path.stat().st_size)
        metadata.set_property("FileExtension", path.suffix.lower())

        try:
            result = self._ocr.extract_text(path, self._options)
        except Exception as exc:
            Log.warning(f"OCR metadata extraction failed for {path.name}: {exc}")
            metadata.set_property("OcrError", str(exc))
            return metadata

        if result.success and result.text.strip():
            metadata.set_property("WordCount", result.word_count)
            metadata.set_property("CharacterCount", len(result.text))
            metadata.set_property("OcrConfidence", round(result.confidence_score, 1))
            metadata.set_property("OcrTextQuality", round(result.text_quality, 3))
            metadata.set_property("OcrDetectedLanguage", result.detected_language or "Unknown")
            metadata.set_property("OcrLineCount", result.line_count)
            if result.warnings:
                metadata.set_property("OcrWarnings", "; ".join(result.warnings))
        else:
            metadata.set_property("OcrStatus", "No text detected")
            if result.error_message:
                metadata.set_property("OcrError", result.error_message)

        Log.info(f"Image metadata extraction completed for: {path.name}")
        return metadata
