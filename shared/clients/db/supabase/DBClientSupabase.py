import httpx
from shared.clients.db.DBClientInterface import DBClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.clients.db.models.Document import DOCUMENT_STATUSES, DocumentDetails
from shared.clients.db.models.Paper import PaperDetails
from datetime import datetime

# PostgREST error codes meaning "no such row" for an id lookup
_NOT_FOUND_CODES = ("22P02", "PGRST116")


class DBClientSupabase(DBClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Supabase"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
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
        return "/rest/v1/"

    def _get_endpoint_document_details(self, document_id: str) -> tuple[str, dict]:
        return "/rest/v1/documents", {"id": f"eq.{document_id}", "select": "*,papers(*)"}

    def _get_endpoint_papers(self, document_id: str) -> tuple[str, dict]:
        return "/rest/v1/papers", {"document_id": f"eq.{document_id}", "select": "*"}

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def _is_not_found_response(self, response: httpx.Response) -> bool:
        if response.status_code == 404:
            return True
        try:
            code = (response.json() or {}).get("code")
        except ValueError:
            return False
        return code in _NOT_FOUND_CODES

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _extract_rows(self, response: dict | list) -> list[dict]:
        # PostgREST answers a filtered select with a plain JSON array
        if isinstance(response, list):
            return response
        return [response] if response else []

    def _parse_document(self, response: dict) -> DocumentDetails:
        status = response.get("status")
        if status is not None and status not in DOCUMENT_STATUSES:
            # carried through verbatim
            self.logging.warning("Document %s has unknown status %r.", response.get("id"), status)
        return DocumentDetails(
                #base
                engine=self._get_engine_name(),
                id=str(response.get("id")),

                #details
                title=response.get("title"),
                reference=response.get("reference"),
                category=response.get("category"),
                status=status,
                description=response.get("description"),
                section_id=response.get("section_id"),
                created_by=response.get("created_by"),
                created_at=self._parse_timestamp(response.get("created_at")),
                updated_at=self._parse_timestamp(response.get("updated_at")),
                metadata=response.get("metadata") or {},
                papers=[self._parse_paper(paper) for paper in response.get("papers") or []],
            )

    def _parse_paper(self, response: dict) -> PaperDetails:
        file_size = response.get("file_size")
        return PaperDetails(
                #base
                engine=self._get_engine_name(),
                id=str(response.get("id")),

                #details
                document_id=response.get("document_id"),
                title=response.get("title"),
                content=response.get("content"),
                storage_reference=response.get("attachment_url") or None,
                file_type=response.get("file_type"),
                file_size=int(file_size) if file_size is not None else None,
                created_at=self._parse_timestamp(response.get("created_at")),
            )

    def _parse_timestamp(self, value: str | None) -> datetime | None:
        if not value:
            return None
        # Python < 3.11 does not accept the trailing "Z"
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
