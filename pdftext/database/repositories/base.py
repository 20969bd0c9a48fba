from abc import ABC, abstractmethod
from collections.abc import Mapping
from uuid import UUID

from pdftext.documents.models import Document


class BaseDocumentStore(ABC):
    """Contract for durable document record storage."""

    @abstractmethod
    def create(self, document: Document) -> Document:
        """Insert a new document record and return it as stored."""

    @abstractmethod
    def find_by_id(self, document_id: UUID) -> Document | None:
        """Return the document, or None if no record has this ID."""

    @abstractmethod
    def update(self, document_id: UUID, fields: Mapping[str, object]) -> Document:
        """Unconditionally overwrite the given mutable fields of one document.

        Args:
            document_id: Target document ID.
            fields: Column name -> new value. Only status, extracted_text,
                    failure_reason and extracted_at may be written.

        Returns:
            The document after the update.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            ValueError: if fields is empty or names an immutable column.
        """

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Document]:
        """Return all documents of one owner, newest first."""
