from abc import ABC, abstractmethod
from pathlib import Path

from app.ocr.models import OcrOptions, OcrResult


class BaseOcrProvider(ABC):
    """Contract for OCR providers used by the image processor."""

    @abstractmethod
    def extract_text(self, path: Path, options: OcrOptions | None = None) -> OcrResult:
        """Recognize text in a raster image.

        Provider-side failures are reported as ``OcrResult(success=False)``
        with ``error_message`` set; implementations should only raise for
        programming errors.
        """
