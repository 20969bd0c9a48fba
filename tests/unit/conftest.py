import io
import threading
import uuid
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import BinaryIO
from unittest.mock import MagicMock
from uuid import UUID

import pytest

from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.exceptions import DocumentNotFoundError
from pdftext.documents.models import Document, DocumentStatus, storage_key_for
from pdftext.storage.base import BaseBlobStore
from pdftext.storage.exceptions import BlobNotFoundError


class InMemoryDocumentStore(BaseDocumentStore):
    """Thread-safe document store that records every status write."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[UUID, Document] = {}
        self.status_history: dict[UUID, list[DocumentStatus]] = {}
        self.update_calls = 0
        self.create_calls = 0
        self.max_processing = 0

    def create(self, document: Document) -> Document:
        with self._lock:
            if document.id in self._documents:
                raise ValueError(f"duplicate document {document.id}")
            now = datetime.now(timezone.utc)
            stored = replace(document, created_at=now, updated_at=now)
            self._documents[document.id] = stored
            self.status_history[document.id] = [document.status]
            self.create_calls += 1
            return stored

    def find_by_id(self, document_id: UUID) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def update(self, document_id: UUID, fields: Mapping[str, object]) -> Document:
        with self._lock:
            current = self._documents.get(document_id)
            if current is None:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            updated = replace(
                current, updated_at=datetime.now(timezone.utc), **dict(fields)
            )
            self._documents[document_id] = updated
            self.update_calls += 1
            if "status" in fields:
                self.status_history[document_id].append(updated.status)
            processing = sum(
                1 for d in self._documents.values() if d.status is DocumentStatus.PROCESSING
            )
            self.max_processing = max(self.max_processing, processing)
            return updated

    def list_by_owner(self, owner_id: str) -> list[Document]:
        with self._lock:
            docs = [d for d in self._documents.values() if d.owner_id == owner_id]
        return sorted(docs, key=lambda d: d.created_at or datetime.min, reverse=True)

    def all(self) -> list[Document]:
        with self._lock:
            return list(self._documents.values())


class InMemoryBlobStore(BaseBlobStore):
    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.blobs[key] = data

    def get(self, key: str) -> BinaryIO:
        if key not in self.blobs:
            raise BlobNotFoundError(f"Blob not found: {key}")
        return io.BytesIO(self.blobs[key])


@pytest.fixture()
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture()
def seed_document(
    document_store: InMemoryDocumentStore,
    blob_store: InMemoryBlobStore,
):  # type: ignore[no-untyped-def]
    """Return a factory that stores a blob and a QUEUED record, like an upload."""

    def _seed(data: bytes, owner_id: str = "user-1", filename: str = "hello.pdf") -> Document:
        document_id = uuid.uuid4()
        key = storage_key_for(owner_id, document_id)
        blob_store.put(key, data, "application/pdf")
        return document_store.create(
            Document(
                id=document_id,
                owner_id=owner_id,
                filename=filename,
                storage_key=key,
                status=DocumentStatus.QUEUED,
            )
        )

    return _seed


@pytest.fixture()
def worker_settings() -> MagicMock:
    return MagicMock(
        worker_concurrency=2,
        worker_drain_timeout_seconds=0.05,
        failure_reason_max_length=500,
    )
