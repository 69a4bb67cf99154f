from psycopg.rows import dict_row

from pdf_signer.database.connection import Database
from pdf_signer.database.models import SignedDocumentRecord


class SignedDocumentsRepository:
    """Database operations for the signed_documents audit table."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def create_table(self) -> None:
        """Create the audit table if it does not exist yet."""
        with self._database.connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS signed_documents (
                    id SERIAL PRIMARY KEY,
                    original_hash CHAR(64) NOT NULL,
                    final_hash CHAR(64) NOT NULL,
                    pdf_id TEXT NOT NULL,
                    file_path TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            conn.commit()

    def insert(self, record: SignedDocumentRecord) -> int:
        """Persist an audit record and return its new ID."""
        with self._database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO signed_documents
                    (original_hash, final_hash, pdf_id, file_path)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        record.original_hash,
                        record.final_hash,
                        record.pdf_id,
                        record.file_path,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT into signed_documents returned no row")
        return int(row[0])

    def find_by_id(self, record_id: int) -> SignedDocumentRecord | None:
        return self._find_one("id = %s", record_id)

    def find_by_final_hash(self, final_hash: str) -> SignedDocumentRecord | None:
        """Look up the audit record for a signed file by its content hash."""
        return self._find_one("final_hash = %s", final_hash)

    def _find_one(self, condition: str, value: object) -> SignedDocumentRecord | None:
        with self._database.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT id, original_hash, final_hash, pdf_id, file_path, created_at
                    FROM signed_documents
                    WHERE {condition}
                    ORDER BY id DESC
                    LIMIT 1
                    """,  # noqa: S608
                    (value,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return SignedDocumentRecord(
            id=row["id"],
            original_hash=row["original_hash"],
            final_hash=row["final_hash"],
            pdf_id=row["pdf_id"],
            file_path=row["file_path"],
            created_at=row["created_at"],
        )
