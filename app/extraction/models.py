from dataclasses import dataclass

from app.extraction.metadata import DocumentMetadata


@dataclass
class ProcessingOutcome:
    """Result of one orchestrated extraction. Failures are values, not exceptions."""

    success: bool
    processing_time_ms: int
    processor_type: str | None = None
    extracted_text: str | None = None
    metadata: DocumentMetadata | None = None
    word_count: int = 0
    character_count: int = 0
    confidence_score: float = 0.0
    detected_language: str | None = None
    error_message: str | None = None
