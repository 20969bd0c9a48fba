class DocumentError(Exception):
    """Base exception for all document-related errors."""


class DocumentNotFoundError(DocumentError):
    """Raised when a document cannot be found in the document store."""


class DocumentAccessError(DocumentError):
    """Raised when a document is missing or not owned by the requesting principal."""


class InvalidStatusTransitionError(DocumentError):
    """Raised when a status change is not allowed by the state machine."""
