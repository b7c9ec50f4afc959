"""
Request relay API route.

Executes a caller-described HTTP request server-side so the browser is
not limited by cross-origin restrictions. Every attempt is saved to
history, whether or not the origin was reached.
"""

from typing import Union

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..dependencies import get_http_client, get_storage
from ..schemas.proxy import ProxyRequest, ProxyResponse, ProxyErrorResponse
from ..services.relay import relay_request
from ..services.storage import Storage


router = APIRouter(prefix="/api/proxy", tags=["proxy"])


# HTTP status returned to the caller when the failure carries no upstream status
ERROR_STATUS_CODES = {
    "timeout": status.HTTP_504_GATEWAY_TIMEOUT,
    "network_error": status.HTTP_502_BAD_GATEWAY,
    "invalid_url": status.HTTP_400_BAD_REQUEST,
    "unknown": status.HTTP_502_BAD_GATEWAY,
}


@router.post(
    "",
    response_model=Union[ProxyResponse, ProxyErrorResponse],
    responses={
        200: {"model": ProxyResponse, "description": "Origin answered (any status code)"},
        400: {"model": ProxyErrorResponse, "description": "Invalid target URL"},
        502: {"model": ProxyErrorResponse, "description": "Network error"},
        504: {"model": ProxyErrorResponse, "description": "Request timeout"},
    }
)
async def proxy_request(
    request: ProxyRequest,
    storage: Storage = Depends(get_storage),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings)
):
    """
    Relay an HTTP request and return the normalized outcome.

    Args:
        request: Method, URL and optional headers and body to send
        storage: Record store receiving the history entry
        client: Outbound HTTP client
        settings: Supplies the overall relay timeout

    Returns:
        ProxyResponse with data, status, statusText, headers and duration.
        On transport failure a ProxyErrorResponse is returned with the
        upstream status if one is known, otherwise a status chosen by
        error type (504 timeout, 400 invalid URL, 502 otherwise). Earlier
        releases answered every such failure with 500.
    """
    result = await relay_request(
        request=request,
        storage=storage,
        client=client,
        timeout=settings.relay_timeout,
    )

    if isinstance(result, ProxyErrorResponse):
        return JSONResponse(
            status_code=result.status or ERROR_STATUS_CODES[result.error_type],
            content=result.model_dump(),
        )

    return result
