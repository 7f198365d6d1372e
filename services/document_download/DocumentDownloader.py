"""Document downloader.

Requests a document's ZIP archive from the archive API, checks that an
archive actually came back, saves it under a sanitized name and notifies
subscribers of the outcome.
"""

import os
import tempfile
from pathlib import Path

import httpx

from services.document_download.DownloadNotifier import DownloadNotifier
from services.document_download.models import DownloadNotification, DownloadOutcome
from shared.clients.archive.ArchiveClientInterface import ArchiveClientInterface
from shared.clients.db.models.Paper import PaperDetails
from shared.helper.HelperConfig import HelperConfig
from shared.helper.HelperFilename import build_archive_filename

ARCHIVE_MEDIA_TYPE = "application/zip"

MESSAGE_SUCCESS = "تم تحميل الوثيقة بنجاح"
MESSAGE_EMPTY_DOCUMENT = "الوثيقة فارغة"
MESSAGE_FAILED = "فشل في تحميل الوثيقة"
MESSAGE_INVALID_FORMAT = "Invalid response format"


class DownloadError(Exception):
    """A download failure carrying the message shown to the user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DocumentDownloader:
    """Downloads document archives to a local directory, one at a time."""

    def __init__(
        self,
        helper_config: HelperConfig,
        archive_client: ArchiveClientInterface,
        notifier: DownloadNotifier,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._archive = archive_client
        self._notifier = notifier
        self._is_downloading = False

    @property
    def is_downloading(self) -> bool:
        """True while a download is in flight. Always False again once do_download() returns."""
        return self._is_downloading

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_download(
        self,
        document_id: str,
        title: str | None,
        papers: list[PaperDetails],
        target_dir: Path,
    ) -> DownloadOutcome:
        """Download a document archive into target_dir.

        Args:
            document_id (str): The ID of the document.
            title (str | None): The document title, used for the saved file name.
            papers (list[PaperDetails]): The known papers; an empty list stops before any request.
            target_dir (Path): Directory the archive is saved into (created if missing).

        Returns:
            DownloadOutcome: Whether the archive was saved, where, and the user-facing message.
        """
        if not papers:
            self.logging.info("Document %s has no papers, nothing to download.", document_id)
            self._notify("empty_document", document_id, title, MESSAGE_EMPTY_DOCUMENT)
            return DownloadOutcome(document_id=document_id, success=False, message=MESSAGE_EMPTY_DOCUMENT)

        self._is_downloading = True
        try:
            self.logging.info("Starting download for document %s", document_id)
            response = await self._archive.do_request_download(document_id)
            content = self._validate_response(response)
            path = self._save(content, build_archive_filename(title, document_id), Path(target_dir))
        except DownloadError as exc:
            return self._fail(document_id, title, exc.message)
        except httpx.HTTPError as exc:
            self.logging.error("Network error while downloading document %s: %s", document_id, exc)
            return self._fail(document_id, title, MESSAGE_FAILED)
        except Exception as exc:
            self.logging.exception("Unexpected error while downloading document %s: %s", document_id, exc)
            return self._fail(document_id, title, MESSAGE_FAILED)
        finally:
            self._is_downloading = False

        self.logging.info("Saved archive of document %s to %s (%d bytes)", document_id, path, len(content))
        self._notify("success", document_id, title, MESSAGE_SUCCESS, path=str(path))
        return DownloadOutcome(document_id=document_id, success=True, message=MESSAGE_SUCCESS, path=str(path), size=len(content))

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _validate_response(self, response: httpx.Response) -> bytes:
        """Return the archive bytes, or raise DownloadError for a failed or non-archive response."""
        if not response.is_success:
            raise DownloadError(self._extract_error_message(response))

        # proxies may answer 200 with an HTML error page
        content_type = response.headers.get("content-type", "")
        if content_type.split(";")[0].strip().lower() != ARCHIVE_MEDIA_TYPE:
            self.logging.error("Expected %s but received %r", ARCHIVE_MEDIA_TYPE, content_type)
            raise DownloadError(MESSAGE_INVALID_FORMAT)
        return response.content

    def _extract_error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return MESSAGE_FAILED
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return MESSAGE_FAILED

    def _save(self, content: bytes, filename: str, target_dir: Path) -> Path:
        """Write content to target_dir/filename through a temporary file in the same directory."""
        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / filename
        with tempfile.NamedTemporaryFile("wb", dir=str(target_dir), prefix=".", suffix=".part", delete=False) as handle:
            temp_name = handle.name
            try:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            except OSError:
                handle.close()
                os.unlink(temp_name)
                raise
        try:
            Path(temp_name).replace(destination)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise
        return destination

    def _fail(self, document_id: str, title: str | None, message: str) -> DownloadOutcome:
        self.logging.error("Download of document %s failed: %s", document_id, message)
        self._notify("failure", document_id, title, message)
        return DownloadOutcome(document_id=document_id, success=False, message=message)

    def _notify(self, kind: str, document_id: str, title: str | None, message: str, path: str | None = None) -> None:
        self._notifier.publish(
            DownloadNotification(kind=kind, document_id=document_id, title=title, message=message, path=path)
        )
