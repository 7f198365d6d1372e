"""Pydantic models for the document downloader."""

from typing import Literal

from pydantic import BaseModel

NotificationKind = Literal["success", "failure", "empty_document"]


class DownloadNotification(BaseModel):
    """A user-facing message published once per download attempt."""

    kind: NotificationKind
    document_id: str
    title: str | None = None
    message: str
    path: str | None = None


class DownloadOutcome(BaseModel):
    """Result of DocumentDownloader.do_download()."""

    document_id: str
    success: bool
    message: str
    path: str | None = None
    size: int | None = None
