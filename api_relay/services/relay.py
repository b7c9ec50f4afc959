"""
Relay service for executing caller-described HTTP requests.

Sends the request to the target origin with httpx, measures it,
normalizes success and failure into a single response shape and
records a history entry for every attempt.
"""

import asyncio
import json
import logging
import time
from typing import Any

import httpx
from fastapi.concurrency import run_in_threadpool

from ..schemas.api_request import ApiRequestCreate
from ..schemas.proxy import ErrorType, ProxyRequest, ProxyResponse, ProxyErrorResponse
from .storage import Storage


logger = logging.getLogger(__name__)


# Default timeout in seconds
DEFAULT_TIMEOUT = 30.0


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create the outbound client shared by all relay calls.

    No status code raises; only transport failures are errors.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=follow_redirects,
        transport=transport,
    )


def parse_response_data(body: str, content_type: str | None) -> Any:
    """
    Decode a relayed response body.

    Args:
        body: Response body text
        content_type: Content-Type header value

    Returns:
        The parsed JSON value for JSON responses, otherwise the text itself
    """
    if body and content_type and "json" in content_type.lower():
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return body
    return body


def classify_error(exc: Exception) -> tuple[ErrorType, str]:
    """
    Map a transport exception to an error type and a fallback message.
    """
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "timeout", "Request timed out"
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return "invalid_url", "Invalid URL"
    if isinstance(exc, httpx.ConnectError):
        return "network_error", "Failed to connect to server"
    if isinstance(exc, httpx.HTTPError):
        return "network_error", "HTTP error occurred"
    return "unknown", "An unexpected error occurred"


def upstream_status(exc: Exception) -> int:
    """Status code carried by the exception's response, or 0 if there is none."""
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        return response.status_code
    return 0


def elapsed_ms(start_time: float) -> int:
    return max(0, int((time.perf_counter() - start_time) * 1000))


async def relay_request(
    request: ProxyRequest,
    storage: Storage,
    client: httpx.AsyncClient,
    timeout: float = DEFAULT_TIMEOUT,
) -> ProxyResponse | ProxyErrorResponse:
    """
    Execute a request against its target origin and record it in history.

    Exactly one history record is written per call, in both the success
    and the failure branch, before this function returns. Nothing is
    retried.

    Args:
        request: The request to relay
        storage: Record store receiving the history entry
        client: Outbound HTTP client
        timeout: Upper bound in seconds for the whole call, body included

    Returns:
        ProxyResponse if the origin answered (any status code),
        ProxyErrorResponse on transport failure
    """
    headers = dict(request.headers or {})
    content = request.body.encode("utf-8") if request.body is not None else None

    start_time = time.perf_counter()
    try:
        response = await asyncio.wait_for(
            client.request(
                method=request.method.upper(),
                url=request.url,
                headers=headers,
                content=content,
            ),
            timeout,
        )
    except Exception as e:
        duration = elapsed_ms(start_time)
        error_type, fallback = classify_error(e)
        message = str(e) or fallback
        status_code = upstream_status(e)

        if error_type == "unknown":
            logger.exception("Relay %s %s failed unexpectedly", request.method, request.url)
        else:
            logger.warning(
                "Relay %s %s failed after %dms (%s): %s",
                request.method, request.url, duration, error_type, message,
            )

        await run_in_threadpool(storage.create_api_request, ApiRequestCreate(
            method=request.method,
            url=request.url,
            headers=headers,
            body=request.body,
            response={"error": message},
            status=status_code,
            duration=duration,
        ))
        return ProxyErrorResponse(
            error=message,
            error_type=error_type,
            status=status_code,
            duration=duration,
        )

    duration = elapsed_ms(start_time)
    response_headers = dict(response.headers)
    data = parse_response_data(response.text, response.headers.get("content-type"))

    logger.info(
        "Relay %s %s -> %d in %dms",
        request.method, request.url, response.status_code, duration,
    )

    await run_in_threadpool(storage.create_api_request, ApiRequestCreate(
        method=request.method,
        url=request.url,
        headers=headers,
        body=request.body,
        response=data,
        status=response.status_code,
        duration=duration,
    ))
    return ProxyResponse(
        data=data,
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers=response_headers,
        duration=duration,
    )
