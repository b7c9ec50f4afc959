"""
Pydantic schemas for configurations.

Defines schemas for creating, partially updating and returning
saved request bundles.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


class ConfigurationCreate(BaseModel):
    """Schema for creating a new configuration."""
    name: str
    description: str | None = None
    endpoints: list[dict[str, Any]]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Name is stored trimmed and must not be blank."""
        return _check_name(v)


class ConfigurationUpdate(BaseModel):
    """
    Schema for updating an existing configuration. All fields are optional.

    Only fields present in the payload are applied. name and endpoints
    may be omitted but not set to null; description may be cleared.
    """
    name: str | None = None
    description: str | None = None
    endpoints: list[dict[str, Any]] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _check_name(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ConfigurationUpdate":
        for field in ("name", "endpoints"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class ConfigurationResponse(BaseModel):
    """Schema for configuration response with server-assigned fields."""
    id: int
    name: str
    description: str | None
    endpoints: list[dict[str, Any]]
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )

    model_config = ConfigDict(from_attributes=True)
