from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

from pdftext.pdf.base import BasePdfExtractor
from pdftext.pdf.exceptions import PdfExtractionTimeoutError


class TimeoutPdfExtractor(BasePdfExtractor):
    """Fences another extractor with a wall-clock deadline.

    Python threads cannot be killed, so an extraction that overruns keeps
    running in the background until the wrapped engine returns; only the
    caller is released.
    """

    def __init__(self, inner: BasePdfExtractor, timeout_seconds: float) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._inner = inner
        self._timeout_seconds = timeout_seconds

    def extract(self, pdf_bytes: bytes) -> str:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdftext-extract")
        future = executor.submit(self._inner.extract, pdf_bytes)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FuturesTimeoutError as exc:
            raise PdfExtractionTimeoutError(
                f"timeout: extraction exceeded {self._timeout_seconds:g}s"
            ) from exc
        finally:
            executor.shutdown(wait=False)
