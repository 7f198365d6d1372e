"""Document download service.

Resolves a document, fetches every paper from the object store (substituting
a text placeholder for any paper whose file cannot be retrieved), and packs
the result into one ZIP archive.
"""

import asyncio

from shared.clients.db.models.Document import DocumentDetails
from shared.clients.db.models.Paper import PaperDetails
from shared.clients.storage.StorageClientInterface import StorageClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.HelperFilename import (
    DEFAULT_ENTRY_EXTENSION,
    build_archive_filename,
    build_entry_basename,
    build_entry_name,
    make_unique_name,
)
from server.core.ArchiveBuilder import ArchiveBuilder
from server.core.DocumentService import DocumentService
from server.models.archive import ArchiveEntry, ArchiveResult
from server.models.errors import EmptyDocumentError

PAPER_CONCURRENCY = 5   # max parallel object store fetches per request


def _format_created(paper: PaperDetails) -> str:
    return paper.created_at.isoformat() if paper.created_at else "unknown"


def _missing_file_placeholder(paper: PaperDetails, document: DocumentDetails, store_error: str) -> bytes:
    return (
        f"Placeholder file for: {paper.title}\n\n"
        "This is a placeholder file because the actual file is not available in storage.\n\n"
        f"Paper ID: {paper.id}\n"
        f"Document ID: {document.id}\n"
        f"Created: {_format_created(paper)}\n"
        f"Storage Error: {store_error}"
    ).encode("utf-8")


def _no_attachment_placeholder(paper: PaperDetails, document: DocumentDetails) -> bytes:
    return (
        f"Placeholder file for: {paper.title}\n\n"
        "This is a placeholder file because no attachment was ever provided for this paper.\n\n"
        f"Paper ID: {paper.id}\n"
        f"Document ID: {document.id}\n"
        f"Created: {_format_created(paper)}"
    ).encode("utf-8")


def _error_placeholder(paper: PaperDetails, document: DocumentDetails, error: BaseException) -> bytes:
    return (
        f"Error loading file: {paper.title}\n\n"
        f"Paper ID: {paper.id}\n"
        f"Document ID: {document.id}\n"
        f"Created: {_format_created(paper)}\n"
        f"Error: {str(error) or type(error).__name__}"
    ).encode("utf-8")


class DownloadService:
    """Builds the ZIP archive of one document's papers."""

    def __init__(
        self,
        helper_config: HelperConfig,
        document_service: DocumentService,
        storage_client: StorageClientInterface,
        archive_builder: ArchiveBuilder | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._documents = document_service
        self._storage = storage_client
        self._builder = archive_builder or ArchiveBuilder()
        self._concurrency = int(helper_config.get_number_val("DOWNLOAD_PAPER_CONCURRENCY", default=PAPER_CONCURRENCY))

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_download(self, document_id: str) -> ArchiveResult:
        """Resolve the document, fetch its papers and assemble the archive.

        Args:
            document_id (str): The ID of the document to bundle.

        Returns:
            ArchiveResult: The archive bytes and its attachment file name.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            EmptyDocumentError: If the document has no papers.
            ArchiveAssemblyError: If the ZIP encoder fails.
        """
        self.logging.info("Download requested for document %s", document_id)

        # resolve
        document = await self._documents.get_document_with_papers(document_id)

        # guard
        if document.is_empty():
            self.logging.warning("Document %s (%r) has no papers, refusing to bundle.", document.id, document.title)
            raise EmptyDocumentError(document_id=document.id)

        # fetch each paper, concurrently but bounded; gather keeps paper order
        sem = asyncio.Semaphore(max(1, self._concurrency))
        results = await asyncio.gather(
            *[self._build_entry(paper, document, sem) for paper in document.papers],
            return_exceptions=True,
        )

        entries: list[ArchiveEntry] = []
        taken_names: set[str] = set()
        for paper, result in zip(document.papers, results):
            if isinstance(result, BaseException):
                entry = self._build_error_entry(paper, document, result)
            else:
                entry = result
            name = make_unique_name(entry.name, taken_names)
            if name != entry.name:
                self.logging.warning("Entry name %r already used in archive, writing paper %s as %r.", entry.name, paper.id, name)
                entry = entry.model_copy(update={"name": name})
            entries.append(entry)

        # assemble
        content = self._builder.build(entries)
        placeholders = sum(1 for entry in entries if entry.placeholder)
        archive = ArchiveResult(
            document_id=document.id,
            title=document.title,
            filename=build_archive_filename(document.title, document.id),
            content=content,
            entry_count=len(entries),
            placeholder_count=placeholders,
        )
        self.logging.info(
            "Archive built for document %s (%r): %d entries, %d placeholder(s), %d bytes.",
            document.id, document.title, archive.entry_count, placeholders, len(content),
        )
        return archive

    ##########################################
    ############### ENTRIES ##################
    ##########################################

    async def _build_entry(
        self,
        paper: PaperDetails,
        document: DocumentDetails,
        sem: asyncio.Semaphore,
    ) -> ArchiveEntry:
        """Fetch one paper's file, or synthesize a placeholder for it.

        Never raises for a single paper: any unexpected failure is turned into
        an error placeholder entry.
        """
        name = build_entry_name(paper)
        if paper.title and build_entry_basename(paper) != paper.title:
            self.logging.warning("Title %r of paper %s contains path syntax, writing it as %r.", paper.title, paper.id, name)
        async with sem:
            try:
                if not paper.storage_reference:
                    self.logging.warning("Paper %s (%r) has no attachment, writing placeholder.", paper.id, paper.title)
                    return ArchiveEntry(name=name, content=_no_attachment_placeholder(paper, document), placeholder=True)

                stored = await self._storage.do_fetch_object(paper.storage_reference)
                if not stored.found:
                    self.logging.warning(
                        "File for paper %s not found in storage (%s), writing placeholder.",
                        paper.id, stored.error,
                    )
                    return ArchiveEntry(
                        name=name,
                        content=_missing_file_placeholder(paper, document, stored.error or "unknown error"),
                        placeholder=True,
                    )

                self.logging.debug("Added %r to archive (%d bytes).", name, len(stored.content or b""))
                return ArchiveEntry(name=name, content=stored.content or b"")
            except Exception as exc:
                return self._build_error_entry(paper, document, exc)

    def _build_error_entry(self, paper: PaperDetails, document: DocumentDetails, error: BaseException) -> ArchiveEntry:
        self.logging.error("Error processing paper %s of document %s: %s", paper.id, document.id, error)
        return ArchiveEntry(
            name=f"{build_entry_basename(paper)}.{DEFAULT_ENTRY_EXTENSION}",
            content=_error_placeholder(paper, document, error),
            placeholder=True,
        )
