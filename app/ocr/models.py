from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrOptions:
    """Recognition options passed by the image processor."""

    language: str = "eng"
    detect_orientation: bool = True
    preprocess: bool = True
    page_segmentation_mode: int = 3


@dataclass(frozen=True)
class OcrResult:
    """Provider response. ``success=False`` is a result, not an exception."""

    success: bool
    text: str = ""
    confidence_score: float = 0.0  # mean word confidence, 0-100
    word_count: int = 0
    line_count: int = 0
    detected_language: str | None = None
    text_quality: float = 0.0  # 0-1
    warnings: list[str] = field(default_factory=list)
    error_message: str | None = None
    processing_time_ms: int = 0
