"""Result of a single object store lookup."""

from pydantic import BaseModel


class StorageObject(BaseModel):
    """
    Outcome of fetching one object from the object store.

    Exactly one of content / error is meaningful: content when found is True,
    error (the store's own message) when it is False.
    """
    reference: str
    found: bool
    content: bytes | None = None
    content_type: str | None = None
    error: str | None = None
