"""
Table-backed record store using SQLAlchemy.

Each operation runs in its own session and commits before returning,
so every create, update and delete is atomic for a single row.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import init_db, make_engine, make_session_factory
from ..exceptions import ConflictError
from ..models.api_request import ApiRequest
from ..models.configuration import ApiConfiguration
from ..models.user import User
from ..schemas.api_request import ApiRequestCreate, ApiRequestResponse
from ..schemas.configuration import (
    ConfigurationCreate,
    ConfigurationUpdate,
    ConfigurationResponse,
)
from ..schemas.user import UserCreate, UserResponse
from .storage import Storage


logger = logging.getLogger(__name__)


class SqlStorage(Storage):
    """
    Store backed by the api_requests, api_configurations and users tables.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log emitted SQL
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = make_engine(database_url, echo=echo)
        self.SessionLocal = make_session_factory(self.engine)
        init_db(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def close(self) -> None:
        self.engine.dispose()

    # Users

    def create_user(self, data: UserCreate) -> UserResponse:
        with self.session() as db:
            user = User(username=data.username, password=data.password)
            db.add(user)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"User {data.username!r} already exists")
            db.refresh(user)
            return UserResponse.model_validate(user)

    def get_user(self, user_id: int) -> UserResponse | None:
        with self.session() as db:
            user = db.get(User, user_id)
            return UserResponse.model_validate(user) if user else None

    def get_user_by_username(self, username: str) -> UserResponse | None:
        with self.session() as db:
            user = db.scalars(select(User).where(User.username == username)).first()
            return UserResponse.model_validate(user) if user else None

    # Request history

    def create_api_request(self, data: ApiRequestCreate) -> ApiRequestResponse:
        with self.session() as db:
            record = ApiRequest(
                method=data.method,
                url=data.url,
                headers=data.headers or {},
                body=data.body,
                response=data.response,
                status=data.status,
                duration=data.duration,
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.debug("Recorded request %d: %s %s", record.id, record.method, record.url)
            return ApiRequestResponse.model_validate(record)

    def get_api_request(self, request_id: int) -> ApiRequestResponse | None:
        with self.session() as db:
            record = db.get(ApiRequest, request_id)
            return ApiRequestResponse.model_validate(record) if record else None

    def list_api_requests(self) -> list[ApiRequestResponse]:
        with self.session() as db:
            records = db.scalars(
                select(ApiRequest).order_by(ApiRequest.timestamp.desc(), ApiRequest.id.desc())
            ).all()
            return [ApiRequestResponse.model_validate(r) for r in records]

    # Configurations

    def create_configuration(self, data: ConfigurationCreate) -> ConfigurationResponse:
        with self.session() as db:
            config = ApiConfiguration(
                name=data.name,
                description=data.description,
                endpoints=data.endpoints,
            )
            db.add(config)
            db.commit()
            db.refresh(config)
            logger.debug("Created configuration %d (%s)", config.id, config.name)
            return ConfigurationResponse.model_validate(config)

    def get_configuration(self, config_id: int) -> ConfigurationResponse | None:
        with self.session() as db:
            config = db.get(ApiConfiguration, config_id)
            return ConfigurationResponse.model_validate(config) if config else None

    def list_configurations(self) -> list[ConfigurationResponse]:
        with self.session() as db:
            configs = db.scalars(
                select(ApiConfiguration).order_by(
                    ApiConfiguration.created_at.desc(), ApiConfiguration.id.desc()
                )
            ).all()
            return [ConfigurationResponse.model_validate(c) for c in configs]

    def update_configuration(
        self, config_id: int, data: ConfigurationUpdate
    ) -> ConfigurationResponse | None:
        changes = data.model_dump(exclude_unset=True)
        with self.session() as db:
            config = db.get(ApiConfiguration, config_id)
            if config is None:
                return None
            for field, value in changes.items():
                setattr(config, field, value)
            db.commit()
            db.refresh(config)
            logger.debug("Updated configuration %d: %s", config_id, sorted(changes))
            return ConfigurationResponse.model_validate(config)

    def delete_configuration(self, config_id: int) -> bool:
        with self.session() as db:
            config = db.get(ApiConfiguration, config_id)
            if config is None:
                return False
            db.delete(config)
            db.commit()
            logger.debug("Deleted configuration %d", config_id)
            return True
