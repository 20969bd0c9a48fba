from pdftext.messaging.job_queue import JobQueue, open_connection
from pdftext.messaging.messages import ExtractTextJob, parse_job
from pdftext.messaging.topology import QueueTopology

__all__ = ["ExtractTextJob", "JobQueue", "QueueTopology", "open_connection", "parse_job"]
