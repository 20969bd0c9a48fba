import os
import uuid
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from uuid import UUID

import psycopg
import pytest

from pdftext.config.settings import Settings
from pdftext.database.connection import close_pool, get_connection, init_pool
from pdftext.database.repositories.document_repository import DocumentRepository
from pdftext.database.schema import ensure_schema
from pdftext.documents.models import Document, DocumentStatus, storage_key_for
from pdftext.storage.local_adapter import LocalBlobStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "pdftext_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        ensure_schema()
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[UUID], None, None]:
    cleanup: list[UUID] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for document_id in cleanup:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        conn.commit()


@pytest.fixture
def repository(integration_pool: None) -> DocumentRepository:
    return DocumentRepository()


@pytest.fixture
def local_blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path)


@pytest.fixture
def owner_id() -> str:
    return f"it-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def seed_document(
    repository: DocumentRepository,
    local_blob_store: LocalBlobStore,
    integration_cleanup: list[UUID],
    owner_id: str,
) -> Callable[[bytes], Document]:
    def _seed(data: bytes) -> Document:
        document_id = uuid.uuid4()
        key = storage_key_for(owner_id, document_id)
        local_blob_store.put(key, data, "application/pdf")
        integration_cleanup.append(document_id)
        return repository.create(
            Document(
                id=document_id,
                owner_id=owner_id,
                filename="hello.pdf",
                storage_key=key,
                status=DocumentStatus.QUEUED,
            )
        )

    return _seed
