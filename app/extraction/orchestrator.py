import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from app.extraction.base import BaseFormatProcessor
from app.extraction.language import detect_language
from app.extraction.metadata import DocumentMetadata
from app.extraction.models import ProcessingOutcome
from app.extraction.registry import ProcessorRegistry
from app.extraction.text_stats import count_words
from app.logging.logger import Log


def calculate_confidence_score(text: str | None, metadata: DocumentMetadata | None) -> float:
    """Heuristic extraction quality in [0, 1].

    Starts at 0.5 and rewards non-blank text, some length, visible structure
    and the presence of page count, title and author.
    """
    score = 0.5

    if text and text.strip():
        score += 0.3
        if len(text) > 10:
            score += 0.1
        if "\n" in text or "." in text:
            score += 0.1

    if metadata is not None:
        if metadata.page_count > 0:
            score += 0.05
        if metadata.title:
            score += 0.05
        if metadata.author:
            score += 0.05

    return min(1.0, score)


class ExtractionOrchestrator:
    """Dispatch a file to its format processor and build a ProcessingOutcome.

    Text and metadata are extracted as two tasks on a shared thread pool.
    ``process`` never raises: any processor failure becomes a failed outcome.
    """

    def __init__(self, registry: ProcessorRegistry, max_workers: int = 4) -> None:
        self._registry = registry
        # Two tasks per document, so the pool fits max_workers documents at once.
        self._executor = ThreadPoolExecutor(
            max_workers=max(2, max_workers * 2),
            thread_name_prefix="extract",
        )

    def process(self, file_path: Path, file_name: str, content_type: str) -> ProcessingOutcome:
        started = time.perf_counter()
        processor: BaseFormatProcessor | None = None

        try:
            processor = self._registry.resolve(content_type)
            Log.info(f"Processing {file_name} ({content_type}) with {processor.processor_type}")

            text_future = self._executor.submit(processor.extract_text, file_path)
            metadata_future = self._executor.submit(processor.extract_metadata, file_path)
            try:
                text = text_future.result()
            finally:
                # Wait for both tasks even when the first one failed.
                metadata_exc = metadata_future.exception()
            if metadata_exc is not None:
                raise metadata_exc
            metadata = metadata_future.result()
        except Exception as exc:
            elapsed_ms = self._elapsed_ms(started)
            Log.error(f"Extraction failed for {file_name} after {elapsed_ms}ms: {exc}")
            return ProcessingOutcome(
                success=False,
                processing_time_ms=elapsed_ms,
                processor_type=processor.processor_type if processor else None,
                error_message=str(exc) or type(exc).__name__,
            )

        metadata.ensure_page_count()
        outcome = ProcessingOutcome(
            success=True,
            processing_time_ms=self._elapsed_ms(started),
            processor_type=processor.processor_type,
            extracted_text=text,
            metadata=metadata,
            word_count=count_words(text),
            character_count=len(text),
            confidence_score=calculate_confidence_score(text, metadata),
            detected_language=detect_language(text, metadata),
        )
        Log.info(
            f"Extracted {outcome.character_count} chars ({outcome.word_count} words) "
            f"from {file_name} in {outcome.processing_time_ms}ms, "
            f"confidence {outcome.confidence_score:.2f}"
        )
        return outcome

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
