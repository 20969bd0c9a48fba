import pytest

from pdftext.pdf.exceptions import PdfExtractionError
from pdftext.pdf.pdfplumber_adapter import PdfPlumberAdapter


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(sample_pdf_bytes)
        assert isinstance(result, str)
        assert "Hello PDF World" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(multi_page_pdf_bytes)
        assert "Page one content" in result
        assert "Page two content" in result
        assert result.index("Page one content") < result.index("Page two content")

    def test_extract_empty_pdf_returns_blank_text(self, empty_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(empty_pdf_bytes)
        assert isinstance(result, str)
        assert result.strip() == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(PdfExtractionError, match="pdfplumber extraction failed"):
            adapter.extract(b"not a pdf")

    def test_extract_raises_on_truncated_pdf(self, broken_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(PdfExtractionError):
            adapter.extract(broken_pdf_bytes)

    def test_extract_raises_on_empty_input(self) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(PdfExtractionError, match="empty input"):
            adapter.extract(b"")
