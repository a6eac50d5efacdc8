from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from app.database.exceptions import InvalidStatusTransitionError


class ProcessingStatus(str, Enum):
    """Lifecycle state of an uploaded document."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {ProcessingStatus.COMPLETED, ProcessingStatus.FAILED, ProcessingStatus.CANCELLED}
)

# Terminal -> PENDING is the explicit re-submission path.
ALLOWED_TRANSITIONS: dict[ProcessingStatus, frozenset[ProcessingStatus]] = {
    ProcessingStatus.PENDING: frozenset(
        {ProcessingStatus.PROCESSING, ProcessingStatus.CANCELLED}
    ),
    ProcessingStatus.PROCESSING: frozenset(
        {
            ProcessingStatus.COMPLETED,
            ProcessingStatus.FAILED,
            ProcessingStatus.CANCELLED,
        }
    ),
    ProcessingStatus.COMPLETED: frozenset({ProcessingStatus.PENDING}),
    ProcessingStatus.FAILED: frozenset({ProcessingStatus.PENDING}),
    ProcessingStatus.CANCELLED: frozenset({ProcessingStatus.PENDING}),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    owner_id: str
    file_name: str
    file_size: int
    content_type: str
    blob_path: str
    content_hash: str
    status: ProcessingStatus = ProcessingStatus.PENDING
    detected_language: str | None = None
    page_count: int | None = None
    created_at: datetime = field(default_factory=utcnow)
    processed_at: datetime | None = None

    def transition_to(
        self,
        status: ProcessingStatus,
        *,
        now: datetime | None = None,
    ) -> None:
        """Move the document to a new status, keeping processed_at consistent.

        processed_at is stamped on entry to a terminal state and cleared when
        a document is re-submitted.

        Raises:
            InvalidStatusTransitionError: if the lifecycle does not allow it.
        """
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(
                f"Document {self.id}: cannot move from "
                f"'{self.status.value}' to '{status.value}'"
            )
        self.status = status
        if status.is_terminal:
            self.processed_at = now or utcnow()
        else:
            self.processed_at = None


@dataclass(frozen=True)
class ProcessingResultRecord:
    """Represents a row from the processing_results table. Immutable once created."""

    id: str
    document_id: str
    processing_type: str
    processing_version: str
    extracted_text: str | None
    metadata: dict[str, Any]
    confidence_score: float
    processing_time_ms: int
    error_message: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def succeeded(self) -> bool:
        return self.error_message is None
