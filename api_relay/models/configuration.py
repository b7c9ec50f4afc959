"""
ApiConfiguration model for saved request bundles.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class ApiConfiguration(Base):
    """
    SQLAlchemy model for configurations.

    A configuration is a named, reusable list of request descriptors.
    Any of name, description and endpoints may be updated; id and
    created_at never change.

    Attributes:
        id: Unique identifier, never reused after deletion
        name: Human-readable name
        description: Optional free-form description
        endpoints: Ordered list of request descriptor objects
        created_at: Timestamp when the configuration was created
    """
    __tablename__ = "api_configurations"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    endpoints: Mapped[list] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True)
