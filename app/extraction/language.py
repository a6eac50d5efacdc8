from app.extraction.metadata import DocumentMetadata

_ENGLISH_STOP_WORDS = frozenset(
    {"the", "and", "is", "in", "to", "of", "a", "that", "it", "with"}
)
_OCR_LANGUAGE_CODES = {"eng": "en", "deu": "de", "fra": "fr", "spa": "es", "ita": "it"}


def detect_language(text: str | None, metadata: DocumentMetadata | None = None) -> str | None:
    """Best-effort language code for extracted text.

    Prefers the language reported by OCR; otherwise returns ``"en"`` when
    more than 10% of tokens are common English words, else None.
    """
    if metadata is not None:
        ocr_language = metadata.get_str("OcrDetectedLanguage")
        if ocr_language and ocr_language != "Unknown":
            return _OCR_LANGUAGE_CODES.get(ocr_language, ocr_language)

    if not text:
        return None
    words = text.lower().split()
    if not words:
        return None
    english = sum(1 for word in words if word in _ENGLISH_STOP_WORDS)
    return "en" if english > len(words) * 0.1 else None
