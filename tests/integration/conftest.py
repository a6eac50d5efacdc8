import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.models import DocumentRecord

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "app" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docextract_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    """Collect document ids; their rows and results are deleted after the test."""
    document_ids: list[str] = []
    yield document_ids
    if not document_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for document_id in document_ids:
                cur.execute(
                    "DELETE FROM processing_results WHERE document_id = %s", (document_id,)
                )
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        conn.commit()


def _make_document(**overrides: Any) -> DocumentRecord:
    document_id = str(uuid.uuid4())
    values: dict[str, Any] = {
        "id": document_id,
        "owner_id": "owner-it",
        "file_name": "notes.txt",
        "file_size": 5,
        "content_type": "text/plain",
        "blob_path": f"owner-it/{document_id}.txt",
        "content_hash": uuid.uuid4().hex + uuid.uuid4().hex,
    }
    values.update(overrides)
    return DocumentRecord(**values)


@pytest.fixture
def document_factory(integration_pool: None) -> Any:
    return _make_document
