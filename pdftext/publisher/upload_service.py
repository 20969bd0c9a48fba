from uuid import UUID, uuid4

from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.exceptions import (
    DocumentAccessError,
    DocumentNotFoundError,
    InvalidStatusTransitionError,
)
from pdftext.documents.models import Document, DocumentStatus, storage_key_for
from pdftext.logging.logger import Log
from pdftext.messaging.exceptions import QueuePublishError
from pdftext.publisher.job_publisher import JobPublisher
from pdftext.storage.base import BaseBlobStore


class DocumentUploadService:
    """Producer-side use cases: upload, listing, lookup and manual re-publish."""

    def __init__(
        self,
        blob_store: BaseBlobStore,
        document_store: BaseDocumentStore,
        publisher: JobPublisher,
    ) -> None:
        self._blob_store = blob_store
        self._document_store = document_store
        self._publisher = publisher

    def upload(
        self,
        owner_id: str,
        filename: str,
        data: bytes,
        content_type: str = "application/pdf",
    ) -> Document:
        """Store the blob, record the document as QUEUED, then enqueue its job.

        Raises:
            BlobStoreError: if the blob cannot be stored; nothing is recorded.
            QueuePublishError: if the job cannot be enqueued. The document is
                already recorded and stays QUEUED until re-published.
        """
        document_id = uuid4()
        storage_key = storage_key_for(owner_id, document_id)

        self._blob_store.put(storage_key, data, content_type)
        document = self._document_store.create(
            Document(
                id=document_id,
                owner_id=owner_id,
                filename=filename,
                storage_key=storage_key,
                status=DocumentStatus.QUEUED,
            )
        )
        Log.info(f"Stored document {document_id} ({len(data)} bytes) for owner {owner_id}")

        try:
            self._publisher.publish(document)
        except QueuePublishError as exc:
            Log.warning(
                f"Document {document_id} recorded but not enqueued, "
                f"stays QUEUED until re-published: {exc}"
            )
            raise
        return document

    def list_documents(self, owner_id: str) -> list[Document]:
        return self._document_store.list_by_owner(owner_id)

    def get_document(self, owner_id: str, document_id: UUID) -> Document:
        """Raises DocumentAccessError for missing and foreign documents alike."""
        document = self._document_store.find_by_id(document_id)
        if document is None or document.owner_id != owner_id:
            raise DocumentAccessError(f"Document {document_id} is not accessible")
        return document

    def republish(self, document_id: UUID) -> Document:
        """Enqueue a new job for a document stuck in QUEUED.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            InvalidStatusTransitionError: if the document already left QUEUED.
            QueuePublishError: if the job cannot be enqueued.
        """
        document = self._document_store.find_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        if document.status is not DocumentStatus.QUEUED:
            raise InvalidStatusTransitionError(
                f"Document {document_id} is {document.status.value}, only QUEUED "
                "documents can be re-published"
            )
        self._publisher.publish(document)
        return document
