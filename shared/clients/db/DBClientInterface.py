from abc import abstractmethod

import httpx
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.db.models.Document import DocumentDetails
from shared.clients.db.models.Paper import PaperDetails


class DBClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "db"
        """
        return "db"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_document_details(self, document_id: str) -> tuple[str, dict]:
        """
        Returns the endpoint path and query parameters for fetching one document
        together with its papers.

        Args:
            document_id (str): The ID of the document.

        Returns:
            tuple[str, dict]: The endpoint path and its query parameters.
        """
        pass

    @abstractmethod
    def _get_endpoint_papers(self, document_id: str) -> tuple[str, dict]:
        """
        Returns the endpoint path and query parameters for listing the papers of a document.

        Args:
            document_id (str): The ID of the parent document.

        Returns:
            tuple[str, dict]: The endpoint path and its query parameters.
        """
        pass

    ##########################################
    ############### CHECKER ##################
    ##########################################

    @abstractmethod
    def _is_not_found_response(self, response: httpx.Response) -> bool:
        """
        Decides whether a failed response means "no such row" rather than a backend failure
        (e.g. an identifier that is not even a valid key).

        Args:
            response (httpx.Response): The non-2xx response.

        Returns:
            bool: True if the response should be treated as not found.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_document(self, document_id: str) -> DocumentDetails | None:
        """
        Fetches a document with all of its papers.

        Args:
            document_id (str): The ID of the document to fetch.

        Returns:
            DocumentDetails | None: The document, or None if it does not exist.

        Raises:
            Exception: If the backend answers with an unexpected error.
        """
        endpoint, params = self._get_endpoint_document_details(document_id)
        resp = await self.do_request(method="GET", endpoint=endpoint, params=params)
        if not resp.is_success:
            if self._is_not_found_response(resp):
                return None
            self._raise_for_response(resp, f"document {document_id}")

        rows = self._extract_rows(resp.json())
        if not rows:
            return None
        document = self._parse_document(rows[0])
        self.logging.debug("Fetched document %s from %s with %d paper(s)", document.id, self._get_engine_name(), len(document.papers))
        return document

    async def do_fetch_papers(self, document_id: str) -> list[PaperDetails]:
        """
        Fetches the papers attached to a document.

        Args:
            document_id (str): The ID of the parent document.

        Returns:
            list[PaperDetails]: The papers in backend order. Empty if there are none.

        Raises:
            Exception: If the backend answers with an unexpected error.
        """
        endpoint, params = self._get_endpoint_papers(document_id)
        resp = await self.do_request(method="GET", endpoint=endpoint, params=params)
        if not resp.is_success:
            if self._is_not_found_response(resp):
                return []
            self._raise_for_response(resp, f"papers of document {document_id}")
        return [self._parse_paper(row) for row in self._extract_rows(resp.json())]

    def _raise_for_response(self, response: httpx.Response, what: str) -> None:
        self.logging.error(
            "Fetching %s from %s failed with status %d: %s",
            what, self._get_engine_name(), response.status_code, response.text[:300],
        )
        raise Exception(f"Fetching {what} from {self._get_engine_name()} failed with status {response.status_code}")

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def _extract_rows(self, response: dict | list) -> list[dict]:
        """
        Extracts the list of raw rows from a listing response.

        Args:
            response (dict | list): The decoded JSON body.

        Returns:
            list[dict]: The raw rows.
        """
        pass

    @abstractmethod
    def _parse_document(self, response: dict) -> DocumentDetails:
        """
        Parses a raw document row (including its embedded papers) into a DocumentDetails object.

        Args:
            response (dict): The raw document row.

        Returns:
            DocumentDetails: The parsed document.
        """
        pass

    @abstractmethod
    def _parse_paper(self, response: dict) -> PaperDetails:
        """
        Parses a raw paper row into a PaperDetails object.

        Args:
            response (dict): The raw paper row.

        Returns:
            PaperDetails: The parsed paper.
        """
        pass
