# Services package

from .storage import Storage, create_storage
from .memory_storage import MemStorage
from .sql_storage import SqlStorage
from .relay import create_http_client, relay_request

__all__ = [
    "Storage",
    "create_storage",
    "MemStorage",
    "SqlStorage",
    "create_http_client",
    "relay_request",
]
