from pydantic import BaseModel


class ArchiveEntry(BaseModel):
    """One (name, bytes) unit of a ZIP archive. placeholder marks synthetic text entries."""

    name: str
    content: bytes
    placeholder: bool = False


class ArchiveResult(BaseModel):
    """A built document archive, ready to be sent."""

    document_id: str
    title: str | None
    filename: str
    content: bytes
    entry_count: int
    placeholder_count: int = 0
