from fastapi import Header, HTTPException, Request

from server.models.errors import MESSAGE_UNAUTHORIZED


async def verify_api_key(request: Request, x_api_key: str | None = Header(default=None)) -> None:
    """Verify the X-Api-Key header against API_SERVER_API_KEY, when one is configured.

    User authentication itself is handled by the Supabase backend; this key
    only guards the bridge when it is exposed beyond the web frontend.

    Args:
        request (Request): The FastAPI request object (provides app.state).
        x_api_key (str | None): The value of the X-Api-Key header.

    Raises:
        HTTPException: 401 if a key is configured and the header does not match.
    """
    helper_config = request.app.state.helper_config
    expected_key = helper_config.get_string_val("API_SERVER_API_KEY", default="")
    if expected_key and x_api_key != expected_key:
        raise HTTPException(status_code=401, detail=MESSAGE_UNAUTHORIZED)
