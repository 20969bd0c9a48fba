from datetime import datetime, timezone
from typing import ClassVar

from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.exceptions import InvalidStatusTransitionError
from pdftext.documents.models import Document, DocumentStatus
from pdftext.logging.logger import Log

FAILURE_REASON_MAX_LENGTH = 500
ELLIPSIS = "…"


def truncate_reason(reason: str, limit: int = FAILURE_REASON_MAX_LENGTH) -> str:
    """Bound a failure reason to at most `limit` characters."""
    reason = reason.strip() or "unknown error"
    if len(reason) <= limit:
        return reason
    return reason[: limit - len(ELLIPSIS)] + ELLIPSIS


class DocumentStateMachine:
    """Owns every status write for a document.

    Each transition writes status, extracted_text, extracted_at and
    failure_reason together, so extracted_text is set iff DONE and
    failure_reason is set iff FAILED after every write. The legality check
    runs against the caller's snapshot; the write itself is unconditional.
    """

    TRANSITIONS: ClassVar[dict[DocumentStatus, frozenset[DocumentStatus]]] = {
        DocumentStatus.QUEUED: frozenset(
            {DocumentStatus.PROCESSING, DocumentStatus.FAILED}
        ),
        DocumentStatus.PROCESSING: frozenset(
            {DocumentStatus.PROCESSING, DocumentStatus.DONE, DocumentStatus.FAILED}
        ),
        DocumentStatus.DONE: frozenset(
            {DocumentStatus.PROCESSING, DocumentStatus.FAILED}
        ),
        DocumentStatus.FAILED: frozenset(
            {DocumentStatus.PROCESSING, DocumentStatus.FAILED}
        ),
    }

    def __init__(
        self,
        store: BaseDocumentStore,
        failure_reason_max_length: int = FAILURE_REASON_MAX_LENGTH,
    ) -> None:
        self._store = store
        self._failure_reason_max_length = failure_reason_max_length

    @classmethod
    def can_transition(cls, current: DocumentStatus, target: DocumentStatus) -> bool:
        return target in cls.TRANSITIONS[current]

    def start_processing(self, document: Document) -> Document:
        """Move to PROCESSING, clearing any result of a previous attempt."""
        return self._transition(
            document,
            DocumentStatus.PROCESSING,
            extracted_text=None,
            extracted_at=None,
            failure_reason=None,
        )

    def complete(self, document: Document, text: str) -> Document:
        """Move to DONE and record the extracted text."""
        return self._transition(
            document,
            DocumentStatus.DONE,
            extracted_text=text,
            extracted_at=datetime.now(timezone.utc),
            failure_reason=None,
        )

    def fail(self, document: Document, reason: str) -> Document:
        """Move to FAILED with a bounded human-readable reason."""
        return self._transition(
            document,
            DocumentStatus.FAILED,
            extracted_text=None,
            extracted_at=None,
            failure_reason=truncate_reason(reason, self._failure_reason_max_length),
        )

    def _transition(
        self,
        document: Document,
        target: DocumentStatus,
        **fields: object,
    ) -> Document:
        if not self.can_transition(document.status, target):
            raise InvalidStatusTransitionError(
                f"Document {document.id} cannot move from "
                f"{document.status.value} to {target.value}"
            )
        updated = self._store.update(document.id, {"status": target, **fields})
        Log.info(
            f"Document {document.id}: {document.status.value} -> {target.value}"
        )
        return updated
