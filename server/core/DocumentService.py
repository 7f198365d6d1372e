from shared.clients.db.DBClientInterface import DBClientInterface
from shared.clients.db.models.Document import DocumentDetails
from shared.clients.db.models.Paper import PaperDetails
from shared.helper.HelperConfig import HelperConfig
from server.models.errors import DocumentNotFoundError


class DocumentService:
    """Resolves documents and their papers from the database client. Read-only."""

    def __init__(
        self,
        helper_config: HelperConfig,
        db_client: DBClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._db = db_client

    ##########################################
    ############### CORE #####################
    ##########################################

    async def get_document_with_papers(self, document_id: str) -> DocumentDetails:
        """Return the document with its papers in backend order.

        When the embedded select returns no papers, the papers table is asked
        directly, so listing and download agree on whether a document is empty.

        Args:
            document_id (str): The ID of the document.

        Returns:
            DocumentDetails: The document and its papers.

        Raises:
            DocumentNotFoundError: If no document has this ID.
        """
        document = await self._db.do_fetch_document(document_id)
        if document is None:
            self.logging.info("Document %s not found.", document_id)
            raise DocumentNotFoundError(document_id=document_id)

        if not document.papers:
            # the embedded select can be filtered by row level security
            papers = await self._db.do_fetch_papers(document_id)
            if papers:
                self.logging.warning(
                    "Embedded select of document %s returned no papers, the papers table has %d.",
                    document_id, len(papers),
                )
                document = document.model_copy(update={"papers": papers})

        self.logging.info(
            "Resolved document %s (%r) with %d paper(s).",
            document.id, document.title, len(document.papers),
        )
        return document

    async def get_papers(self, document_id: str) -> list[PaperDetails]:
        """Return the papers of an existing document, as get_document_with_papers() resolves them.

        Raises:
            DocumentNotFoundError: If no document has this ID.
        """
        document = await self.get_document_with_papers(document_id)
        return document.papers
