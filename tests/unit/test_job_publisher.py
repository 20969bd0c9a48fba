import uuid
from unittest.mock import MagicMock

import pytest

from pdftext.documents.models import Document, DocumentStatus
from pdftext.messaging.exceptions import QueuePublishError
from pdftext.messaging.job_queue import JobQueue
from pdftext.publisher.job_publisher import JobPublisher


def _make_document() -> Document:
    document_id = uuid.uuid4()
    return Document(
        id=document_id,
        owner_id="user-1",
        filename="hello.pdf",
        storage_key=f"user-1/{document_id}.pdf",
        status=DocumentStatus.QUEUED,
    )


class TestJobPublisher:
    def test_publishes_document_id_with_message_id(self) -> None:
        job_queue = MagicMock(spec=JobQueue)
        document = _make_document()

        JobPublisher(job_queue, "extract_text").publish(document)

        job_queue.publish.assert_called_once_with(
            "extract_text",
            {"documentId": str(document.id)},
            message_id=str(document.id),
        )

    def test_propagates_publish_error(self) -> None:
        job_queue = MagicMock(spec=JobQueue)
        job_queue.publish.side_effect = QueuePublishError("broker down")

        with pytest.raises(QueuePublishError):
            JobPublisher(job_queue, "extract_text").publish(_make_document())
