from enum import Enum

from pdftext.documents.exceptions import DocumentNotFoundError
from pdftext.logging.logger import Log
from pdftext.messaging.exceptions import PoisonMessageError
from pdftext.messaging.messages import parse_job
from pdftext.processor.processor import Processor


class JobOutcome(Enum):
    """How the consuming thread settles a delivered message."""

    ACK = "ack"
    REJECT = "reject"


class JobRunner:
    """Run one delivered job, catch every exception, and pick its outcome.

    Failures are terminal from the queue's point of view: a rejected
    message is never requeued, since redelivering a broken PDF or a
    missing document cannot succeed.
    """

    def __init__(self, processor: Processor) -> None:
        self._processor = processor

    def run(self, body: bytes | str) -> JobOutcome:
        try:
            job = parse_job(body)
        except PoisonMessageError as exc:
            Log.error(f"Dropping poison message: {exc}")
            return JobOutcome.REJECT

        Log.info(f"Running extraction job for document {job.document_id}")
        try:
            self._processor.process(job.document_id)
        except DocumentNotFoundError as exc:
            Log.error(f"Dropping job, nothing to process: {exc}")
            return JobOutcome.REJECT
        except Exception as exc:
            Log.exception(f"Job for document {job.document_id} failed: {exc}")
            return JobOutcome.REJECT

        Log.info(f"Job for document {job.document_id} completed successfully")
        return JobOutcome.ACK
