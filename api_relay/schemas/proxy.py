"""
Pydantic schemas for the request relay.

Defines the relay input and the normalized success and failure shapes.
"""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field


ErrorType = Literal["network_error", "timeout", "invalid_url", "unknown"]


class ProxyRequest(BaseModel):
    """
    Schema for a request to relay.

    The URL is not checked beyond being non-empty; an unusable URL is
    reported by the transport as a relay failure.
    """
    method: str = Field(min_length=1)
    url: str = Field(min_length=1)
    headers: dict[str, str] | None = None
    body: str | None = None


class ProxyResponse(BaseModel):
    """
    Normalized response of a relay that reached the origin.

    Any status code, including 4xx and 5xx, is a successful relay.
    """
    data: Any | None
    status: int
    status_text: str = Field(
        validation_alias=AliasChoices("status_text", "statusText"),
        serialization_alias="statusText",
    )
    headers: dict[str, str]
    duration: int


class ProxyErrorResponse(BaseModel):
    """Normalized response of a relay that failed at the transport level."""
    error: str
    error_type: ErrorType
    status: int
    duration: int
