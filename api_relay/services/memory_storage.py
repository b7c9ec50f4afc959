"""
In-memory record store.

Records live in per-kind dictionaries for the lifetime of the process.
A single lock serializes id assignment and every mutation, so concurrent
creates never lose updates or hand out duplicate ids.
"""

import itertools
import logging
import threading
from datetime import datetime

from ..exceptions import ConflictError
from ..schemas.api_request import ApiRequestCreate, ApiRequestResponse
from ..schemas.configuration import (
    ConfigurationCreate,
    ConfigurationUpdate,
    ConfigurationResponse,
)
from ..schemas.user import UserCreate, UserResponse
from .storage import Storage


logger = logging.getLogger(__name__)


class MemStorage(Storage):
    """Dictionary-backed store. Returned records are copies of stored state."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: dict[int, UserResponse] = {}
        self._api_requests: dict[int, ApiRequestResponse] = {}
        self._configurations: dict[int, ConfigurationResponse] = {}
        self._user_ids = itertools.count(1)
        self._request_ids = itertools.count(1)
        self._config_ids = itertools.count(1)

    # Users

    def create_user(self, data: UserCreate) -> UserResponse:
        with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise ConflictError(f"User {data.username!r} already exists")
            user = UserResponse(id=next(self._user_ids), **data.model_dump())
            self._users[user.id] = user
            return user.model_copy()

    def get_user(self, user_id: int) -> UserResponse | None:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> UserResponse | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
        return None

    # Request history

    def create_api_request(self, data: ApiRequestCreate) -> ApiRequestResponse:
        with self._lock:
            record = ApiRequestResponse(
                id=next(self._request_ids),
                method=data.method,
                url=data.url,
                headers=data.headers or {},
                body=data.body,
                response=data.response,
                status=data.status,
                duration=data.duration,
                timestamp=datetime.utcnow(),
            )
            self._api_requests[record.id] = record
        logger.debug("Recorded request %d: %s %s", record.id, record.method, record.url)
        return record.model_copy(deep=True)

    def get_api_request(self, request_id: int) -> ApiRequestResponse | None:
        with self._lock:
            record = self._api_requests.get(request_id)
            return record.model_copy(deep=True) if record else None

    def list_api_requests(self) -> list[ApiRequestResponse]:
        with self._lock:
            records = sorted(
                self._api_requests.values(),
                key=lambda r: (r.timestamp, r.id),
                reverse=True,
            )
            return [r.model_copy(deep=True) for r in records]

    # Configurations

    def create_configuration(self, data: ConfigurationCreate) -> ConfigurationResponse:
        with self._lock:
            config = ConfigurationResponse(
                id=next(self._config_ids),
                name=data.name,
                description=data.description,
                endpoints=data.endpoints,
                created_at=datetime.utcnow(),
            )
            self._configurations[config.id] = config
        logger.debug("Created configuration %d (%s)", config.id, config.name)
        return config.model_copy(deep=True)

    def get_configuration(self, config_id: int) -> ConfigurationResponse | None:
        with self._lock:
            config = self._configurations.get(config_id)
            return config.model_copy(deep=True) if config else None

    def list_configurations(self) -> list[ConfigurationResponse]:
        with self._lock:
            configs = sorted(
                self._configurations.values(),
                key=lambda c: (c.created_at, c.id),
                reverse=True,
            )
            return [c.model_copy(deep=True) for c in configs]

    def update_configuration(
        self, config_id: int, data: ConfigurationUpdate
    ) -> ConfigurationResponse | None:
        changes = data.model_dump(exclude_unset=True)
        with self._lock:
            existing = self._configurations.get(config_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=changes, deep=True)
            self._configurations[config_id] = updated
        logger.debug("Updated configuration %d: %s", config_id, sorted(changes))
        return updated.model_copy(deep=True)

    def delete_configuration(self, config_id: int) -> bool:
        with self._lock:
            removed = self._configurations.pop(config_id, None) is not None
        if removed:
            logger.debug("Deleted configuration %d", config_id)
        return removed
