"""
Models package for API Relay.

Exports all SQLAlchemy models used by the table-backed record store.
"""

from .api_request import ApiRequest
from .configuration import ApiConfiguration
from .user import User

__all__ = [
    "ApiRequest",
    "ApiConfiguration",
    "User",
]
