from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.exceptions import DocumentNotFoundError, DuplicateDocumentError
from app.database.models import DocumentRecord, ProcessingStatus

_COLUMNS = """
    id, owner_id, file_name, file_size, content_type, blob_path,
    content_hash, status, detected_language, page_count,
    created_at, processed_at
"""


class DocumentRepository:
    """Database operations for the documents table."""

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return self._to_record(row)

    def find_by_hash(self, content_hash: str) -> DocumentRecord | None:
        """Find the document holding the given content hash, if any."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE content_hash = %s",
                    (content_hash,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return self._to_record(row)

    def create(self, document: DocumentRecord) -> DocumentRecord:
        """Insert a new document row.

        Raises:
            DuplicateDocumentError: if another document already holds the hash.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO documents
                        (id, owner_id, file_name, file_size, content_type,
                         blob_path, content_hash, status, detected_language,
                         page_count, created_at, processed_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            document.id,
                            document.owner_id,
                            document.file_name,
                            document.file_size,
                            document.content_type,
                            document.blob_path,
                            document.content_hash,
                            document.status.value,
                            document.detected_language,
                            document.page_count,
                            document.created_at,
                            document.processed_at,
                        ),
                    )
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise DuplicateDocumentError(
                f"Document with hash {document.content_hash} already exists"
            ) from exc
        return document

    def update(self, document: DocumentRecord) -> None:
        """Persist the mutable fields of a document.

        Status, processed_at, page_count and detected_language are written in
        one statement so a terminal status never lands without its derived
        fields.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s,
                        processed_at = %s,
                        page_count = %s,
                        detected_language = %s
                    WHERE id = %s
                    """,
                    (
                        document.status.value,
                        document.processed_at,
                        document.page_count,
                        document.detected_language,
                        document.id,
                    ),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document.id} not found")
            conn.commit()

    @staticmethod
    def _to_record(row: dict[str, Any]) -> DocumentRecord:
        return DocumentRecord(
            id=str(row["id"]),
            owner_id=row["owner_id"],
            file_name=row["file_name"],
            file_size=row["file_size"],
            content_type=row["content_type"],
            blob_path=row["blob_path"],
            content_hash=row["content_hash"],
            status=ProcessingStatus(row["status"]),
            detected_language=row["detected_language"],
            page_count=row["page_count"],
            created_at=row["created_at"],
            processed_at=row["processed_at"],
        )
