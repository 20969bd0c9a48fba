import argparse
import sys
from uuid import UUID

from pdftext.config.settings import Settings
from pdftext.database.connection import close_pool, init_pool
from pdftext.database.repositories.document_repository import DocumentRepository
from pdftext.database.schema import ensure_schema
from pdftext.documents.exceptions import DocumentError
from pdftext.logging.logger import Log
from pdftext.messaging.exceptions import QueuePublishError
from pdftext.messaging.job_queue import JobQueue, open_connection
from pdftext.messaging.topology import QueueTopology
from pdftext.processor.processor import build_processor
from pdftext.publisher.job_publisher import JobPublisher
from pdftext.publisher.upload_service import DocumentUploadService
from pdftext.storage.factory import BlobStoreFactory
from pdftext.worker.job_runner import JobRunner
from pdftext.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> open broker connection -> build dependencies -> consume."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if settings.db_apply_schema:
            ensure_schema()
        with open_connection(settings) as connection:
            job_queue = JobQueue(
                connection,
                QueueTopology.from_settings(settings),
                publish_max_retries=settings.rabbitmq_publish_max_retries,
            )
            processor = build_processor(settings, DocumentRepository())
            worker = Worker(job_queue, JobRunner(processor), settings)
            worker.run()
    finally:
        close_pool()


def republish(argv: list[str] | None = None) -> int:
    """Re-enqueue extraction jobs for documents stuck in QUEUED."""
    parser = argparse.ArgumentParser(
        prog="pdftext-republish",
        description="Publish a new extraction job for each QUEUED document ID.",
    )
    parser.add_argument("document_ids", nargs="+", type=UUID, metavar="DOCUMENT_ID")
    args = parser.parse_args(argv)

    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    failures = 0
    try:
        with open_connection(settings) as connection:
            job_queue = JobQueue(
                connection,
                QueueTopology.from_settings(settings),
                publish_max_retries=settings.rabbitmq_publish_max_retries,
            )
            job_queue.declare_topology()
            service = DocumentUploadService(
                blob_store=BlobStoreFactory.create(settings),
                document_store=DocumentRepository(),
                publisher=JobPublisher(job_queue, settings.rabbitmq_routing_key),
            )
            for document_id in args.document_ids:
                try:
                    service.republish(document_id)
                except (DocumentError, QueuePublishError) as exc:
                    Log.error(f"Could not re-publish document {document_id}: {exc}")
                    failures += 1
    finally:
        close_pool()
    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "republish":
        sys.exit(republish(sys.argv[2:]))
    main()
