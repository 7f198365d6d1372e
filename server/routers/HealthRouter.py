import httpx
from fastapi import APIRouter, Request

from server.models.responses import HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health(request: Request) -> HealthResponse:
    """Report liveness and whether each backend answers its healthcheck.

    Unreachable backends are reported, not raised: the service stays up and
    failing downloads surface their own errors.
    """
    backends: dict[str, bool] = {}
    for client in request.app.state.clients:
        name = f"{client.get_client_type()}_{client.get_engine_name()}"
        try:
            result: httpx.Response = await client.do_healthcheck()
            backends[name] = result.is_success
        except Exception as exc:
            request.app.state.logging.warning("Healthcheck of %s failed: %s", name, exc)
            backends[name] = False

    status = "ok" if all(backends.values()) else "degraded"
    return HealthResponse(status=status, version=request.app.state.app_version, backends=backends)
