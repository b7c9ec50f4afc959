"""
Pydantic schemas for request history records.

Defines the insert payload accepted by the store and the record shape
returned to callers.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiRequestCreate(BaseModel):
    """
    Schema for creating a history record.

    Server-owned fields (id, timestamp) are not accepted and are ignored
    if present in the payload.
    """
    method: str = Field(min_length=1)
    url: str = Field(min_length=1)
    headers: dict[str, str] | None = None
    body: str | None = None
    response: Any | None = None
    status: int | None = None
    duration: int | None = Field(default=None, ge=0)


class ApiRequestResponse(BaseModel):
    """Schema for a stored history record."""
    id: int
    method: str
    url: str
    headers: dict[str, str]
    body: str | None
    response: Any | None
    status: int | None
    duration: int | None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
