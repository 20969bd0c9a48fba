from pdftext.documents.models import Document
from pdftext.logging.logger import Log
from pdftext.messaging.job_queue import JobQueue
from pdftext.messaging.messages import ExtractTextJob


class JobPublisher:
    """Enqueues one extraction job per stored document.

    Call only after the document record is committed: the worker treats a
    job whose document is missing as a terminal failure.
    """

    def __init__(self, job_queue: JobQueue, routing_key: str) -> None:
        self._job_queue = job_queue
        self._routing_key = routing_key

    def publish(self, document: Document) -> None:
        """Raises QueuePublishError if the broker did not accept the job."""
        job = ExtractTextJob(document_id=document.id)
        self._job_queue.publish(
            self._routing_key,
            job.to_payload(),
            message_id=str(document.id),
        )
        Log.info(f"Published extraction job for document {document.id}")
