from contextlib import closing

from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.exceptions import DocumentNotFoundError
from pdftext.documents.models import Document
from pdftext.documents.state_machine import DocumentStateMachine
from pdftext.logging.logger import Log
from pdftext.pdf.base import BasePdfExtractor
from pdftext.processor.pipeline import PipelineContext, PipelineStep
from pdftext.storage.base import BaseBlobStore


def _require_document(context: PipelineContext) -> Document:
    if context.document is None:
        raise ValueError("PipelineContext.document must be loaded first")
    return context.document


class LoadDocumentStep(PipelineStep):
    def __init__(self, document_store: BaseDocumentStore) -> None:
        self._document_store = document_store

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._document_store.find_by_id(context.document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {context.document_id} not found")
        context.document = document
        return context


class MarkProcessingStep(PipelineStep):
    def __init__(self, state_machine: DocumentStateMachine) -> None:
        self._state_machine = state_machine

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if document.status.is_terminal:
            Log.info(f"Re-running document {document.id}, previously {document.status.value}")
        context.document = self._state_machine.start_processing(document)
        return context


class FetchBlobStep(PipelineStep):
    def __init__(self, blob_store: BaseBlobStore) -> None:
        self._blob_store = blob_store

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        with closing(self._blob_store.get(document.storage_key)) as stream:
            context.raw_bytes = stream.read()
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {document.id}")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = self._pdf_extractor.extract(context.raw_bytes).strip()
        Log.info(
            f"Extracted {len(context.extracted_text)} chars from document "
            f"{context.document_id}"
        )
        return context


class MarkDoneStep(PipelineStep):
    def __init__(self, state_machine: DocumentStateMachine) -> None:
        self._state_machine = state_machine

    def run(self, context: PipelineContext) -> PipelineContext:
        context.document = self._state_machine.complete(
            _require_document(context), context.extracted_text
        )
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, state_machine: DocumentStateMachine) -> None:
        self._state_machine = state_machine

    def run(self, context: PipelineContext) -> PipelineContext:
        context.document = self._state_machine.fail(
            _require_document(context), context.error_message
        )
        Log.error(f"Document {context.document_id} marked as failed: {context.error_message}")
        return context
