"""Tesseract OCR provider built on pytesseract and Pillow.

Recognition flow:
1. Load the image; optionally convert to grayscale and stretch contrast.
2. Optionally detect orientation (OSD) and rotate the image upright.
3. Recognize text and per-word confidences.
4. Score text quality and derive warnings from confidence and content.

Tesseract process errors and timeouts are retried up to ``max_attempts``;
unreadable images fail immediately. Both come back as unsuccessful results.
"""

import time
from pathlib import Path
from typing import Any

import pytesseract
from PIL import Image, ImageOps

from app.extraction.text_stats import count_words
from app.logging.logger import Log
from app.ocr.base import BaseOcrProvider
from app.ocr.models import OcrOptions, OcrResult

LOW_CONFIDENCE = 60.0
POOR_QUALITY = 0.5


def count_lines(text: str) -> int:
    return len([line for line in text.splitlines() if line.strip()])


def text_quality(text: str, confidence: float) -> float:
    """Score recognized text in [0, 1] from confidence and text shape."""
    if not text.strip():
        return 0.0

    score = confidence / 100.0
    words = count_words(text)
    chars = len(text)

    if words < 5:
        score *= 0.7

    special = sum(1 for c in text if not c.isalnum() and not c.isspace())
    if special / chars > 0.3:
        score *= 0.8

    if words and 3 <= chars / words <= 10:
        score *= 1.1

    return min(1.0, score)


def quality_warnings(confidence: float, quality: float, text: str) -> list[str]:
    warnings: list[str] = []
    if confidence < LOW_CONFIDENCE:
        warnings.append("Low OCR confidence detected. Text extraction may be inaccurate.")
    if quality < POOR_QUALITY:
        warnings.append(
            "Poor text quality detected. Consider using a higher resolution image."
        )
    if not text.strip():
        warnings.append("No text detected in image. Image may not contain readable text.")
    if count_words(text) < 3:
        warnings.append(
            "Very little text detected. "
            "Image quality or content may be insufficient for OCR."
        )
    return warnings


class TesseractOcrProvider(BaseOcrProvider):
    """Local Tesseract engine."""

    def __init__(self, max_attempts: int = 1, timeout_seconds: int = 0) -> None:
        self._max_attempts = max(1, max_attempts)
        self._timeout_seconds = timeout_seconds

    def extract_text(self, path: Path, options: OcrOptions | None = None) -> OcrResult:
        options = options or OcrOptions()
        started = time.perf_counter()
        last_error = ""

        for attempt in range(1, self._max_attempts + 1):
            try:
                result = self._recognize(path, options, started)
            except (pytesseract.TesseractError, RuntimeError) as exc:
                last_error = str(exc)
                Log.warning(
                    f"OCR attempt {attempt}/{self._max_attempts} failed for {path.name}: {exc}"
                )
                continue
            except Exception as exc:
                Log.error(f"OCR failed for {path.name}: {exc}")
                return self._failure(str(exc), started)

            Log.info(
                f"OCR completed for {path.name} in {result.processing_time_ms}ms "
                f"with confidence {result.confidence_score:.2f}"
            )
            return result

        return self._failure(last_error, started)

    def _recognize(self, path: Path, options: OcrOptions, started: float) -> OcrResult:
        with Image.open(path) as source:
            image = source.copy()

        if options.preprocess:
            image = self._preprocess(image)
        if options.detect_orientation:
            image = self._correct_orientation(image)

        config = f"--psm {options.page_segmentation_mode}"
        text = pytesseract.image_to_string(
            image, lang=options.language, config=config, timeout=self._timeout_seconds
        )
        data = pytesseract.image_to_data(
            image,
            lang=options.language,
            config=config,
            timeout=self._timeout_seconds,
            output_type=pytesseract.Output.DICT,
        )

        confidence = self._mean_confidence(data)
        quality = text_quality(text, confidence)
        return OcrResult(
            success=True,
            text=text,
            confidence_score=confidence,
            word_count=count_words(text),
            line_count=count_lines(text),
            detected_language=options.language if text.strip() else None,
            text_quality=quality,
            warnings=quality_warnings(confidence, quality, text),
            processing_time_ms=self._elapsed_ms(started),
        )

    @staticmethod
    def _preprocess(image: Image.Image) -> Image.Image:
        try:
            gray = ImageOps.grayscale(image) if image.mode != "L" else image
            return ImageOps.autocontrast(gray)
        except Exception as exc:
            Log.warning(f"Image preprocessing failed, using original image: {exc}")
            return image

    def _correct_orientation(self, image: Image.Image) -> Image.Image:
        try:
            osd = pytesseract.image_to_osd(
                image,
                timeout=self._timeout_seconds,
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractError as exc:
            # OSD needs a minimum amount of text; small images fail here.
            Log.debug(f"Orientation detection skipped: {exc}")
            return image

        rotate = int(osd.get("rotate", 0))
        if rotate:
            Log.debug(f"Rotating image by {rotate} degrees before OCR")
            return image.rotate(-rotate, expand=True)
        return image

    @staticmethod
    def _mean_confidence(data: dict[str, Any]) -> float:
        confidences = []
        for raw in data.get("conf", []):
            try:
                value = float(raw)
            except (TypeError, ValueError):
                continue
            if value >= 0:
                confidences.append(value)
        return sum(confidences) / len(confidences) if confidences else 0.0

    @classmethod
    def _failure(cls, error: str, started: float) -> OcrResult:
        return OcrResult(
            success=False,
            error_message=error or "OCR failed",
            processing_time_ms=cls._elapsed_ms(started),
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
