from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class DocumentStatus(str, Enum):
    """Processing status exposed verbatim to polling clients."""

    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.DONE, DocumentStatus.FAILED)


def storage_key_for(owner_id: str, document_id: UUID) -> str:
    """Build the blob key for a document: {owner_id}/{document_id}.pdf"""
    return f"{owner_id}/{document_id}.pdf"


@dataclass(frozen=True)
class Document:
    """Domain model for an uploaded document (one row of the documents table)."""

    id: UUID
    owner_id: str
    filename: str
    storage_key: str
    status: DocumentStatus
    extracted_text: str | None = None
    failure_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    extracted_at: datetime | None = None
