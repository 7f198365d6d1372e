from abc import abstractmethod

import httpx
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.db.models.Document import DocumentDetails


class ArchiveClientInterface(ClientInterface):
    """Client for the archive bridge's own REST API, used by the downloader."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "archive"
        """
        return "archive"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_document_details(self, document_id: str) -> str:
        """
        Returns the endpoint path for a document with its papers (e.g. "/api/documents/{id}").
        """
        pass

    @abstractmethod
    def _get_endpoint_document_download(self, document_id: str) -> str:
        """
        Returns the endpoint path for a document archive download (e.g. "/api/documents/{id}/download").
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_document(self, document_id: str) -> DocumentDetails:
        """
        Fetches a document with its papers.

        Args:
            document_id (str): The ID of the document.

        Returns:
            DocumentDetails: The document.

        Raises:
            Exception: If the API answers with a non-2xx status.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_document_details(document_id), raise_on_error=True)
        return self._parse_document(resp.json())

    async def do_request_download(self, document_id: str) -> httpx.Response:
        """
        Requests the ZIP archive of a document.

        The raw response is returned untouched: status and content type are
        judged by the caller.

        Args:
            document_id (str): The ID of the document.

        Returns:
            httpx.Response: The raw response.

        Raises:
            httpx.HTTPError: On transport failures.
        """
        return await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_document_download(document_id),
            json={},
        )

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def _parse_document(self, response: dict) -> DocumentDetails:
        """
        Parses the document details response.

        Args:
            response (dict): The decoded JSON body.

        Returns:
            DocumentDetails: The parsed document.
        """
        pass
