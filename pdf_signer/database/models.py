from dataclasses import dataclass
from datetime import datetime


@dataclass
class SignedDocumentRecord:
    """Represents a row from the signed_documents table."""

    original_hash: str
    final_hash: str
    pdf_id: str
    file_path: str
    id: int | None = None
    created_at: datetime | None = None
