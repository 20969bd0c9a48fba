from pdftext.database.connection import get_connection

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id UUID PRIMARY KEY,
    owner_id TEXT NOT NULL,
    filename TEXT NOT NULL,
    storage_key TEXT NOT NULL UNIQUE,
    status TEXT NOT NULL DEFAULT 'QUEUED'
        CHECK (status IN ('QUEUED', 'PROCESSING', 'DONE', 'FAILED')),
    extracted_text TEXT,
    failure_reason VARCHAR(500),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    extracted_at TIMESTAMPTZ,
    CONSTRAINT documents_text_iff_done
        CHECK ((status = 'DONE') = (extracted_text IS NOT NULL)),
    CONSTRAINT documents_reason_iff_failed
        CHECK ((status = 'FAILED') = (failure_reason IS NOT NULL))
);

CREATE INDEX IF NOT EXISTS documents_owner_created_idx
    ON documents (owner_id, created_at DESC);
"""


def ensure_schema() -> None:
    """Create the documents table and its index if they do not exist yet."""
    with get_connection() as conn:
        conn.execute(SCHEMA_SQL)
        conn.commit()
