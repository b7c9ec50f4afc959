"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .api_request import (
    ApiRequestCreate,
    ApiRequestResponse,
)

from .configuration import (
    ConfigurationCreate,
    ConfigurationUpdate,
    ConfigurationResponse,
)

from .proxy import (
    ErrorType,
    ProxyRequest,
    ProxyResponse,
    ProxyErrorResponse,
)

from .user import (
    UserCreate,
    UserResponse,
)

__all__ = [
    # History schemas
    "ApiRequestCreate",
    "ApiRequestResponse",
    # Configuration schemas
    "ConfigurationCreate",
    "ConfigurationUpdate",
    "ConfigurationResponse",
    # Proxy schemas
    "ErrorType",
    "ProxyRequest",
    "ProxyResponse",
    "ProxyErrorResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
]
