from abc import ABC, abstractmethod
from typing import Any, Callable

import httpx
from httpx._types import QueryParamTypes, RequestContent

from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class ClientInterface(ABC):
    """Base of every backend client: env-driven config, auth headers and one shared httpx.AsyncClient.

    Settings are namespaced "{TYPE}_{ENGINE}_{KEY}" (e.g. DB_SUPABASE_URL). The
    request timeout is per client type: "{TYPE}_TIMEOUT", 30 seconds by default.
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)
        self._client: httpx.AsyncClient | None = None

        # fail at construction, not on the first request
        self.validate_full_configuration()

    async def __aenter__(self) -> "ClientInterface":
        await self.boot()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Resolves every configuration key the engine declares.

        Raises:
            ValueError: If a key without default is unset, or a value has the wrong type.
        """
        for config in self._get_required_config():
            self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def is_booted(self) -> bool:
        return self._client is not None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """Lowercase client type, e.g. "db" or "storage"."""
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        pass

    def get_engine_name(self) -> str:
        """Lowercase engine name, e.g. "supabase"."""
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the display name of the engine, e.g. "Supabase". It also names
        the engine's module and class ("DBClientSupabase").
        """
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Declares the settings the engine reads.

        Returns:
            list[EnvConfig]: One entry per key; a None default makes the key mandatory.
        """
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        return f"{self.get_client_type()}_{self.get_engine_name()}_{raw_key}".upper()

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Reads one namespaced setting of this client.

        Args:
            raw_key (str): The key without prefix, e.g. "BUCKET" for STORAGE_SUPABASE_BUCKET.
            default (Any): Value used when the variable is unset.
            val_type (str): "string", "number", "bool" or "list".

        Raises:
            ValueError: If the variable is unset without default, or val_type is unknown.
        """
        readers: dict[str, Callable[..., Any]] = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
            "bool": self._helper_config.get_bool_val,
            "list": self._helper_config.get_list_val,
        }
        if val_type not in readers:
            raise ValueError(f"Unsupported config value type '{val_type}' for key '{raw_key}' of {self.get_client_type()} client '{self.get_engine_name()}'.")
        return readers[val_type](self._get_config_key_name(raw_key), default=default)

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns:
            dict: Headers authenticating every request (empty if the backend is open).
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """Scheme and host of the backend, e.g. "https://xyz.supabase.co"."""
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """Path answering 2xx when the backend is reachable and the credentials work."""
        pass

    def _build_url(self, endpoint: str) -> str:
        path = endpoint.strip().lstrip("/")
        return f"{self._get_base_url().rstrip('/')}/{path}" if path else self._get_base_url().rstrip("/")

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Send a GET to the healthcheck endpoint and return the raw response."""
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Open the HTTP connection pool.

        Args:
            transport: Replaces the network layer, e.g. an httpx.MockTransport in tests.
        """
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        content: RequestContent | None = None,
        json: dict | list | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send one request to the backend with the auth headers applied.

        Args:
            method: HTTP verb.
            content: Raw body. Takes precedence over json.
            json: JSON body.
            params: Query string parameters.
            endpoint: Path below the base URL.
            additional_headers: Merged over the auth headers.
            raise_on_error: Raise instead of returning a non-2xx response.

        Returns:
            httpx.Response: The response, whatever its status unless raise_on_error is set.

        Raises:
            Exception: If boot() was not called, or on a non-2xx status with raise_on_error.
            httpx.HTTPError: On timeouts and connection failures.
        """
        if self._client is None:
            raise Exception(f"{self.get_client_type()} client '{self.get_engine_name()}' is not booted. Call boot() first.")

        url = self._build_url(endpoint)
        headers = {**self._get_auth_header(), **(additional_headers or {})}
        body: dict = {"content": content} if content is not None else ({"json": json} if json is not None else {})

        self.logging.debug("%s %s", method, url)
        response = await self._client.request(method, url, headers=headers, params=params, timeout=self.timeout, **body)

        if raise_on_error and not response.is_success:
            self.logging.error("%s %s answered %d: %s", method, url, response.status_code, response.text[:300])
            raise Exception(f"{method} {url} failed with status {response.status_code}")
        return response
