from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID

from psycopg.rows import dict_row

from pdftext.database.connection import get_connection
from pdftext.database.repositories.base import BaseDocumentStore
from pdftext.documents.exceptions import DocumentNotFoundError
from pdftext.documents.models import Document, DocumentStatus

_COLUMNS = (
    "id, owner_id, filename, storage_key, status, extracted_text, "
    "failure_reason, created_at, updated_at, extracted_at"
)


class DocumentRepository(BaseDocumentStore):
    """Database operations for the documents table."""

    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"status", "extracted_text", "failure_reason", "extracted_at"}
    )

    def create(self, document: Document) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (id, owner_id, filename, storage_key, status)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        document.id,
                        document.owner_id,
                        document.filename,
                        document.storage_key,
                        document.status.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Insert of document {document.id} returned no row")
        return _row_to_document(row)

    def find_by_id(self, document_id: UUID) -> Document | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _row_to_document(row)

    def update(self, document_id: UUID, fields: Mapping[str, object]) -> Document:
        """Overwrite mutable columns of one document and bump updated_at.

        Column names are checked against UPDATABLE_FIELDS before they are
        interpolated into the statement.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            ValueError: if fields is empty or names an immutable column.
        """
        if not fields:
            raise ValueError("update requires at least one field")
        immutable = sorted(set(fields) - self.UPDATABLE_FIELDS)
        if immutable:
            raise ValueError(f"Fields cannot be updated: {immutable}")

        assignments = ", ".join(f"{name} = %s" for name in fields)
        params = [_to_db_value(value) for value in fields.values()]
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET {assignments}, updated_at = NOW()
                    WHERE id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (*params, document_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def list_by_owner(self, owner_id: str) -> list[Document]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE owner_id = %s
                    ORDER BY created_at DESC, id
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()

        return [_row_to_document(row) for row in rows]


def _to_db_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    return value


def _row_to_document(row: dict[str, Any]) -> Document:
    return Document(
        id=row["id"],
        owner_id=row["owner_id"],
        filename=row["filename"],
        storage_key=row["storage_key"],
        status=DocumentStatus(row["status"]),
        extracted_text=row["extracted_text"],
        failure_reason=row["failure_reason"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        extracted_at=row["extracted_at"],
    )
