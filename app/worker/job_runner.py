import uuid
from dataclasses import replace

from app.config.settings import Settings
from app.database.models import DocumentRecord, ProcessingResultRecord, ProcessingStatus
from app.database.repositories.document_repository import DocumentRepository
from app.database.repositories.processing_result_repository import (
    ProcessingResultRepository,
)
from app.extraction.models import ProcessingOutcome
from app.extraction.orchestrator import ExtractionOrchestrator
from app.logging.logger import Log
from app.storage.file_store import LocalFileStore

DEFAULT_PROCESSING_TYPE = "Extraction"


class ExtractionJobRunner:
    """Run extraction for one document and record the outcome.

    Nothing escapes ``run``: errors are logged and, where possible, stored
    as a failed processing result with the document marked Failed.
    """

    def __init__(
        self,
        orchestrator: ExtractionOrchestrator,
        file_store: LocalFileStore,
        doc_repo: DocumentRepository,
        result_repo: ProcessingResultRepository,
        settings: Settings,
    ) -> None:
        self._orchestrator = orchestrator
        self._file_store = file_store
        self._doc_repo = doc_repo
        self._result_repo = result_repo
        self._settings = settings

    def run(self, document_id: str) -> None:
        """Execute extraction for a single document with error handling."""
        document: DocumentRecord | None = None
        try:
            document = self._doc_repo.find_by_id(document_id)
            if document.status is not ProcessingStatus.PENDING:
                Log.info(
                    f"Skipping document {document_id}: status is '{document.status.value}'"
                )
                return

            document.transition_to(ProcessingStatus.PROCESSING)
            self._doc_repo.update(document)
            Log.info(f"Running extraction for document {document_id}")

            file_path = self._file_store.resolve(document.blob_path)
            outcome = self._orchestrator.process(
                file_path, document.file_name, document.content_type
            )
            self._record(document, outcome)
        except Exception as exc:
            Log.exception(f"Extraction job for document {document_id} failed: {exc}")
            if document is not None and document.status is ProcessingStatus.PROCESSING:
                self._record_failure(document, exc)

    def _record(self, document: DocumentRecord, outcome: ProcessingOutcome) -> None:
        """Store the result, then write the terminal status.

        The terminal status is applied to a copy, so ``document`` keeps the
        last status actually written when the update fails.
        """
        self._result_repo.create(self._to_result(document.id, outcome))

        finished = replace(document)
        if outcome.success:
            finished.transition_to(ProcessingStatus.COMPLETED)
            if outcome.metadata is not None:
                finished.page_count = outcome.metadata.page_count
            finished.detected_language = outcome.detected_language
        else:
            finished.transition_to(ProcessingStatus.FAILED)
        self._doc_repo.update(finished)

        if outcome.success:
            Log.info(
                f"Document {document.id} completed in {outcome.processing_time_ms}ms"
            )
        else:
            Log.error(f"Document {document.id} failed: {outcome.error_message}")

    def _record_failure(self, document: DocumentRecord, exc: Exception) -> None:
        """Best effort: store a failed result and mark the document Failed."""
        outcome = ProcessingOutcome(
            success=False,
            processing_time_ms=0,
            error_message=str(exc) or type(exc).__name__,
        )
        try:
            self._record(document, outcome)
        except Exception as record_exc:
            Log.error(f"Could not record failure for document {document.id}: {record_exc}")

    def _to_result(self, document_id: str, outcome: ProcessingOutcome) -> ProcessingResultRecord:
        return ProcessingResultRecord(
            id=str(uuid.uuid4()),
            document_id=document_id,
            processing_type=outcome.processor_type or DEFAULT_PROCESSING_TYPE,
            processing_version=self._settings.processing_version,
            extracted_text=outcome.extracted_text if outcome.success else None,
            metadata=outcome.metadata.to_dict() if outcome.metadata else {},
            confidence_score=outcome.confidence_score,
            processing_time_ms=outcome.processing_time_ms,
            error_message=None if outcome.success else outcome.error_message or "Extraction failed",
        )
