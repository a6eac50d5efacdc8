import pytesseract

from app.config.settings import Settings
from app.logging.logger import Log
from app.ocr.base import BaseOcrProvider
from app.ocr.tesseract_adapter import TesseractOcrProvider


class OcrProviderFactory:
    """Creates the configured OCR provider, or None when OCR is unavailable."""

    PROVIDERS = ("tesseract", "none")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrProvider | None:
        provider = settings.ocr_provider.lower()
        if provider == "none":
            Log.info("OCR disabled by configuration, image processing unavailable")
            return None
        if provider != "tesseract":
            raise ValueError(
                f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )

        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as exc:
            Log.warning(f"Tesseract not available, image processing disabled: {exc}")
            return None

        Log.info(f"Tesseract {version} available, image processing enabled")
        return TesseractOcrProvider(max_attempts=settings.ocr_max_attempts)
