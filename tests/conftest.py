import io
import uuid
from collections.abc import Generator

import pytest
from kombu import Connection
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from pdftext.messaging.job_queue import JobQueue
from pdftext.messaging.topology import QueueTopology


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content (hello.pdf)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def broken_pdf_bytes() -> bytes:
    """A PDF header followed by a truncated xref table and no objects or trailer."""
    return b"%PDF-1.4\nxref\n0 6\n0000000000 65535 f \n0000000"


@pytest.fixture()
def memory_connection() -> Generator[Connection, None, None]:
    with Connection("memory://", transport_options={"polling_interval": 0.01}) as conn:
        yield conn


@pytest.fixture()
def topology() -> QueueTopology:
    """Unique names per test: the memory transport shares state process-wide."""
    suffix = uuid.uuid4().hex[:8]
    return QueueTopology(
        exchange_name=f"pdftext-{suffix}",
        queue_name=f"pdftext.extract-{suffix}",
        routing_key="extract_text",
    )


@pytest.fixture()
def job_queue(memory_connection: Connection, topology: QueueTopology) -> JobQueue:
    queue = JobQueue(memory_connection, topology, publish_max_retries=1)
    queue.declare_topology()
    return queue
