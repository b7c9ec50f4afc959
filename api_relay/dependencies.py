"""
FastAPI dependencies giving routes access to the shared store and
outbound HTTP client created in the application lifespan.

Usage:
    @router.get("/items")
    def get_items(storage: Storage = Depends(get_storage)):
        ...
"""

import httpx
from fastapi import Request

from .services.storage import Storage


def get_storage(request: Request) -> Storage:
    """Return the record store attached to the application."""
    return request.app.state.storage


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the outbound client used for relayed requests."""
    return request.app.state.http_client
