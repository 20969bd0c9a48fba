from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pdftext.messaging.exceptions import PoisonMessageError


class ExtractTextJob(BaseModel):
    """Message model for text extraction jobs.

    The message only points at a document; all state lives in the
    document store.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    document_id: UUID = Field(alias="documentId")

    def to_payload(self) -> dict[str, str]:
        return {"documentId": str(self.document_id)}


def parse_job(body: bytes | str) -> ExtractTextJob:
    """Decode a raw message body.

    Raises:
        PoisonMessageError: if the body is not JSON or lacks a valid documentId.
    """
    try:
        return ExtractTextJob.model_validate_json(body)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        raise PoisonMessageError(f"Invalid job payload ({errors})") from exc
