"""Generic paper model: one uploaded file attached to a document."""

from datetime import datetime

from pydantic import BaseModel

class PaperBase(BaseModel):
    """
    Represents a single paper as returned by a DB client.
    """
    engine: str
    id: str

class PaperDetails(PaperBase):
    """
    Represents a single paper with all its metadata.

    storage_reference points into the object store and is None when no file
    was ever uploaded for the paper.
    """
    document_id: str | None = None
    title: str | None = None
    content: str | None = None
    storage_reference: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    created_at: datetime | None = None
