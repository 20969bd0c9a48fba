from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from pdftext.documents.models import Document


@dataclass(slots=True)
class PipelineContext:
    document_id: UUID
    document: Document | None = None
    raw_bytes: bytes = b""
    extracted_text: str = ""
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
