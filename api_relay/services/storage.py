"""
Record store interface.

The relay executor and the HTTP routes depend on this interface only.
A single instance is built at application startup by create_storage()
and closed at shutdown.
"""

from abc import ABC, abstractmethod

from ..config import Settings
from ..schemas.api_request import ApiRequestCreate, ApiRequestResponse
from ..schemas.configuration import (
    ConfigurationCreate,
    ConfigurationUpdate,
    ConfigurationResponse,
)
from ..schemas.user import UserCreate, UserResponse


class Storage(ABC):
    """
    Identity-assigning, recency-ordered persistence for history records,
    configurations and users.

    Implementations assign ids from a per-kind counter starting at 1 that
    is never reused, fill timestamps with the current time, and list
    records newest first with ties broken by id descending.
    """

    # Users

    @abstractmethod
    def create_user(self, data: UserCreate) -> UserResponse:
        """Create a user. Raises ConflictError if the username is taken."""

    @abstractmethod
    def get_user(self, user_id: int) -> UserResponse | None:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserResponse | None:
        ...

    # Request history

    @abstractmethod
    def create_api_request(self, data: ApiRequestCreate) -> ApiRequestResponse:
        """Record a request. headers default to {} and other optional fields to None."""

    @abstractmethod
    def get_api_request(self, request_id: int) -> ApiRequestResponse | None:
        ...

    @abstractmethod
    def list_api_requests(self) -> list[ApiRequestResponse]:
        """Return all history records, most recent first."""

    # Configurations

    @abstractmethod
    def create_configuration(self, data: ConfigurationCreate) -> ConfigurationResponse:
        ...

    @abstractmethod
    def get_configuration(self, config_id: int) -> ConfigurationResponse | None:
        ...

    @abstractmethod
    def list_configurations(self) -> list[ConfigurationResponse]:
        """Return all configurations, most recently created first."""

    @abstractmethod
    def update_configuration(
        self, config_id: int, data: ConfigurationUpdate
    ) -> ConfigurationResponse | None:
        """
        Apply the fields set on data to an existing configuration.

        Returns None if the configuration does not exist.
        """

    @abstractmethod
    def delete_configuration(self, config_id: int) -> bool:
        """Delete a configuration, returning whether one existed."""

    def close(self) -> None:
        """Release backend resources."""


def create_storage(settings: Settings) -> Storage:
    """
    Build the record store selected by settings.storage_backend.

    Args:
        settings: Application settings

    Returns:
        A ready-to-use store instance
    """
    if settings.storage_backend == "sql":
        from .sql_storage import SqlStorage
        return SqlStorage(settings.database_url)

    from .memory_storage import MemStorage
    return MemStorage()
