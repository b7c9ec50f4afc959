"""
API Relay - FastAPI Application Entry Point

Server side of a browser-based API testing tool: relays arbitrary HTTP
requests, records every attempt in history and stores named request
configurations.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .exceptions import register_exception_handlers
from .routers import configurations, proxy, requests
from .services.relay import create_http_client
from .services.storage import create_storage


settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: build the record store and the outbound client
    app.state.storage = create_storage(settings)
    app.state.http_client = create_http_client(
        timeout=settings.relay_timeout,
        follow_redirects=settings.follow_redirects,
    )
    logger.info("Started with %s storage", settings.storage_backend)
    yield
    # Shutdown
    await app.state.http_client.aclose()
    app.state.storage.close()
    logger.info("Shut down")


app = FastAPI(
    title="API Relay",
    description="Server-side relay and request history for testing HTTP APIs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "API Relay",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(requests.router)
app.include_router(configurations.router)
app.include_router(proxy.router)
