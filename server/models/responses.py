from pydantic import BaseModel

from shared.clients.db.models.Document import DocumentDetails
from shared.clients.db.models.Paper import PaperDetails


class ErrorResponse(BaseModel):
    message: str


class DocumentResponse(BaseModel):
    document: DocumentDetails
    paper_count: int


class PapersResponse(BaseModel):
    document_id: str
    papers: list[PaperDetails]
    total: int


class HealthResponse(BaseModel):
    status: str
    version: str
    backends: dict[str, bool]
