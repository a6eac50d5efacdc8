"""Upload ingestion: validate, deduplicate, store, persist, schedule.

Flow for one upload:
1. Validate the bytes (FileValidator); nothing is stored on failure.
2. Hash the content (SHA-256). A known hash returns the existing document.
3. Refuse the upload if the extraction queue has no room.
4. Write the bytes, insert a Pending document, schedule extraction.

The unique constraint on the content hash is the final dedup guard: when two
uploads of the same bytes race past the lookup, the loser's insert fails, its
blob is removed and the winner's document is returned.
"""

import hashlib
import uuid

from app.database.exceptions import DuplicateDocumentError
from app.database.models import DocumentRecord, ProcessingStatus
from app.database.repositories.document_repository import DocumentRepository
from app.ingestion.exceptions import IngestionRejectedError
from app.ingestion.validator import FileValidator, extension_for
from app.logging.logger import Log
from app.storage.file_store import LocalFileStore
from app.worker.extraction_queue import ExtractionQueue, QueueFullError


def compute_content_hash(data: bytes) -> str:
    """Return the SHA-256 hex digest of file bytes."""
    return hashlib.sha256(data).hexdigest()


class IngestionService:
    """Accepts uploads and hands them to the extraction queue."""

    def __init__(
        self,
        validator: FileValidator,
        file_store: LocalFileStore,
        doc_repo: DocumentRepository,
        queue: ExtractionQueue,
    ) -> None:
        self._validator = validator
        self._file_store = file_store
        self._doc_repo = doc_repo
        self._queue = queue

    def ingest(
        self,
        owner_id: str,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> DocumentRecord:
        """Ingest one upload and return its document without waiting for extraction.

        Raises:
            UploadValidationError: if the upload fails validation.
            IngestionRejectedError: if the extraction queue is full.
        """
        file_format = self._validator.validate(file_bytes, file_name, content_type)

        content_hash = compute_content_hash(file_bytes)
        existing = self._doc_repo.find_by_hash(content_hash)
        if existing is not None:
            Log.info(f"Duplicate upload of {file_name}, returning document {existing.id}")
            return existing

        if not self._queue.has_capacity():
            Log.warning(f"Extraction queue full, rejecting upload {file_name}")
            raise IngestionRejectedError("Extraction queue is full, try again later")

        document_id = str(uuid.uuid4())
        blob_path = self._file_store.save(
            owner_id, document_id, file_name, file_bytes, extension_for(file_format)
        )
        document = DocumentRecord(
            id=document_id,
            owner_id=owner_id,
            file_name=file_name,
            file_size=len(file_bytes),
            content_type=content_type,
            blob_path=blob_path,
            content_hash=content_hash,
        )

        try:
            self._doc_repo.create(document)
        except DuplicateDocumentError:
            self._file_store.delete(blob_path)
            winner = self._doc_repo.find_by_hash(content_hash)
            if winner is None:
                raise
            Log.info(f"Concurrent duplicate upload of {file_name}, returning document {winner.id}")
            return winner
        except Exception:
            self._file_store.delete(blob_path)
            raise

        Log.info(f"Stored document {document.id} ({file_name}, {document.file_size} bytes)")
        self._schedule(document)
        return document

    def resubmit(self, document_id: str) -> DocumentRecord:
        """Reset a terminal document to Pending and schedule it again.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            InvalidStatusTransitionError: if the document is not terminal.
            IngestionRejectedError: if the extraction queue is full.
        """
        document = self._doc_repo.find_by_id(document_id)
        if not self._queue.has_capacity():
            raise IngestionRejectedError("Extraction queue is full, try again later")

        document.transition_to(ProcessingStatus.PENDING)
        self._doc_repo.update(document)
        Log.info(f"Document {document.id} resubmitted for extraction")
        self._schedule(document)
        return document

    def _schedule(self, document: DocumentRecord) -> None:
        try:
            self._queue.submit(document.id)
        except QueueFullError as exc:
            # Lost the last slot between the capacity check and submit.
            document.transition_to(ProcessingStatus.CANCELLED)
            self._doc_repo.update(document)
            Log.warning(f"Document {document.id} cancelled: {exc}")
            raise IngestionRejectedError("Extraction queue is full, try again later") from exc
