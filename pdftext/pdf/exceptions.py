class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from PDF bytes."""


class PdfExtractionTimeoutError(PdfExtractionError):
    """Raised when extraction does not finish before its deadline."""
