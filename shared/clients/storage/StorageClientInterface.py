from abc import abstractmethod

import httpx
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.storage.models.StorageObject import StorageObject


class StorageClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "storage"
        """
        return "storage"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_object(self, reference: str) -> str:
        """
        Returns the endpoint path for downloading one object.

        Args:
            reference (str): The storage reference of the object (its path inside the bucket).

        Returns:
            str: The endpoint path (e.g. "/storage/v1/object/archive-documents/{reference}")
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_object(self, reference: str) -> StorageObject:
        """
        Fetches the bytes of one object.

        A store-reported absence or error is returned as a StorageObject with
        found=False and the store's message, never raised.

        Args:
            reference (str): The storage reference of the object.

        Returns:
            StorageObject: The fetched object or the reason it could not be fetched.

        Raises:
            httpx.HTTPError: On transport failures (timeout, connection refused).
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_object(reference))
        if not resp.is_success:
            error = self._parse_error_message(resp)
            self.logging.warning(
                "Object %r not available in %s (status %d): %s",
                reference, self._get_engine_name(), resp.status_code, error,
            )
            return StorageObject(reference=reference, found=False, error=error)

        self.logging.debug("Fetched object %r from %s (%d bytes)", reference, self._get_engine_name(), len(resp.content))
        return StorageObject(
            reference=reference,
            found=True,
            content=resp.content,
            content_type=resp.headers.get("content-type"),
        )

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def _parse_error_message(self, response: httpx.Response) -> str:
        """
        Extracts a human readable error message from a failed object request.

        Args:
            response (httpx.Response): The non-2xx response.

        Returns:
            str: The store's error message.
        """
        pass
