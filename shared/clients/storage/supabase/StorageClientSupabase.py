import httpx
from urllib.parse import quote
from shared.clients.storage.StorageClientInterface import StorageClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class StorageClientSupabase(StorageClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")
        self._bucket = self.get_config_val("BUCKET", default="archive-documents", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Supabase"

    def get_bucket(self) -> str:
        return self._bucket

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="BUCKET", val_type="string", default="archive-documents"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return f"/storage/v1/bucket/{quote(self._bucket)}"

    def _get_endpoint_object(self, reference: str) -> str:
        # references are stored relative to the bucket, some rows carry a leading slash
        path = quote(reference.strip().lstrip("/"), safe="/")
        return f"/storage/v1/object/{quote(self._bucket)}/{path}"

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
            if message:
                return str(message)
        return response.reason_phrase or f"HTTP {response.status_code}"
