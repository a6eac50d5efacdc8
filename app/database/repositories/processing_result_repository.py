from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import ProcessingResultRecord


class ProcessingResultRepository:
    """Database operations for the processing_results table."""

    def create(self, result: ProcessingResultRecord) -> ProcessingResultRecord:
        """Insert one extraction attempt. Results are never updated afterwards."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO processing_results
                    (id, document_id, processing_type, processing_version,
                     extracted_text, metadata, confidence_score,
                     processing_time_ms, error_message, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        result.id,
                        result.document_id,
                        result.processing_type,
                        result.processing_version,
                        result.extracted_text,
                        Jsonb(result.metadata),
                        result.confidence_score,
                        result.processing_time_ms,
                        result.error_message,
                        result.created_at,
                    ),
                )
            conn.commit()
        return result

    def find_latest_for_document(self, document_id: str) -> ProcessingResultRecord | None:
        """Return the most recent attempt for a document, which is authoritative."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, processing_type, processing_version,
                           extracted_text, metadata, confidence_score,
                           processing_time_ms, error_message, created_at
                    FROM processing_results
                    WHERE document_id = %s
                    ORDER BY created_at DESC
                    LIMIT 1
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return ProcessingResultRecord(
            id=str(row["id"]),
            document_id=str(row["document_id"]),
            processing_type=row["processing_type"],
            processing_version=row["processing_version"],
            extracted_text=row["extracted_text"],
            metadata=row["metadata"] or {},
            confidence_score=row["confidence_score"],
            processing_time_ms=row["processing_time_ms"],
            error_message=row["error_message"],
            created_at=row["created_at"],
        )
