from urllib.parse import quote
from shared.clients.archive.ArchiveClientInterface import ArchiveClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.clients.db.models.Document import DocumentDetails


class ArchiveClientApi(ArchiveClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Api"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"X-Api-Key": self._api_key}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/health"

    def _get_endpoint_document_details(self, document_id: str) -> str:
        return f"/api/documents/{quote(document_id, safe='')}"

    def _get_endpoint_document_download(self, document_id: str) -> str:
        return f"/api/documents/{quote(document_id, safe='')}/download"

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_document(self, response: dict) -> DocumentDetails:
        return DocumentDetails.model_validate(response.get("document") or {})
