class QueueError(Exception):
    """Base exception for job queue errors."""


class QueuePublishError(QueueError):
    """Raised when a job could not be enqueued.

    Covers broker unavailability and back-pressure that outlasts the publish
    retry policy. The caller may publish the same job again.
    """

    retryable = True


class PoisonMessageError(QueueError):
    """Raised when a delivered message cannot be parsed into a job."""
