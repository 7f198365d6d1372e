"""Generic archive document model, backend-independent."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from shared.clients.db.models.Paper import PaperDetails

DOCUMENT_STATUSES = ("active", "pending", "archived")

class DocumentBase(BaseModel):
    """
    Represents a single archived case file, as returned by a DB client.
    """
    engine: str
    id: str

class DocumentDetails(DocumentBase):
    """
    Represents a single case file with its metadata and its ordered papers.

    reference follows the block.row.section form (e.g. "A.1.1"). A document
    without papers is empty and cannot be bundled.
    """
    title: str | None = None
    reference: str | None = None
    category: str | None = None
    status: str | None = None
    description: str | None = None
    section_id: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    metadata: dict[str, Any] = {}
    papers: list[PaperDetails] = []

    def is_empty(self) -> bool:
        return not self.papers
