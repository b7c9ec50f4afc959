"""
ApiRequest model for storing relayed request history.

Each relay attempt, successful or not, creates exactly one row.
Rows are never updated after creation.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Text, JSON, Integer
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class ApiRequest(Base):
    """
    SQLAlchemy model for request history.

    Attributes:
        id: Unique identifier, never reused
        method: HTTP method as supplied by the caller
        url: Target URL as supplied by the caller
        headers: Headers sent with the request
        body: Body sent with the request
        response: Relayed response body, or an error payload
        status: HTTP status code, 0 when the origin was never reached
        duration: Elapsed time in milliseconds
        timestamp: Creation time of the record
    """
    __tablename__ = "api_requests"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    method: Mapped[str] = mapped_column(Text)
    url: Mapped[str] = mapped_column(Text)
    headers: Mapped[dict] = mapped_column(JSON, default=dict)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    response: Mapped[Any] = mapped_column(JSON, nullable=True)
    status: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)
