from uuid import UUID

from pdftext.config.settings import Settings
from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.state_machine import DocumentStateMachine
from pdftext.logging.logger import Log
from pdftext.pdf.base import BasePdfExtractor
from pdftext.pdf.factory import PdfExtractorFactory
from pdftext.processor.pipeline import PipelineContext, PipelineStep
from pdftext.processor.steps import (
    ExtractTextStep,
    FetchBlobStep,
    LoadDocumentStep,
    MarkDoneStep,
    MarkFailedStep,
    MarkProcessingStep,
)
from pdftext.storage.base import BaseBlobStore
from pdftext.storage.factory import BlobStoreFactory


class Processor:
    """Runs the extraction pipeline for one document.

    Pipeline: load -> mark processing -> fetch blob -> extract -> mark done.
    Any error after the document is loaded runs the failure step, then the
    original error is re-raised to the caller.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: UUID) -> PipelineContext:
        Log.info(f"Processing document {document_id}")
        context = PipelineContext(document_id=document_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            self._record_failure(context, exc)
            raise
        return context

    def _record_failure(self, context: PipelineContext, exc: Exception) -> None:
        if context.document is None:
            # Nothing was loaded, so there is no record to mark.
            return
        context.error_message = str(exc) or type(exc).__name__
        try:
            self._failed_step.run(context)
        except Exception as record_exc:
            Log.exception(
                f"Could not record failure for document {context.document_id}: {record_exc}"
            )


def build_processor(
    settings: Settings,
    document_store: BaseDocumentStore,
    blob_store: BaseBlobStore | None = None,
    pdf_extractor: BasePdfExtractor | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    blob_store = blob_store if blob_store is not None else BlobStoreFactory.create(settings)
    pdf_extractor = (
        pdf_extractor if pdf_extractor is not None else PdfExtractorFactory.create(settings)
    )
    state_machine = DocumentStateMachine(
        document_store,
        failure_reason_max_length=settings.failure_reason_max_length,
    )
    steps: list[PipelineStep] = [
        LoadDocumentStep(document_store),
        MarkProcessingStep(state_machine),
        FetchBlobStep(blob_store),
        ExtractTextStep(pdf_extractor),
        MarkDoneStep(state_machine),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(state_machine))
