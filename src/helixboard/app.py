"""
App factory for the Helixboard server.

Creates a pre-configured FastAPI application with:
- CORS middleware
- Health check endpoint
- HelixDB client and metadata provider on app.state
- Logging filter to suppress noisy healthcheck logs
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import router
from .config import AppConfig
from .runtime.helix_client import HelixClient
from .runtime.metadata import MetadataProvider

logger = logging.getLogger(__name__)


class HealthcheckLogFilter(logging.Filter):
    """Filter out noisy healthcheck logs."""

    FILTERED_PATHS = ("/health",)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        for path in self.FILTERED_PATHS:
            if f'"{path}' in message or f" {path} " in message:
                return False
        return True


def _setup_logging_filter():
    """Add filter to uvicorn access logger to suppress healthcheck logs."""
    uvicorn_access = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, HealthcheckLogFilter) for f in uvicorn_access.filters):
        uvicorn_access.addFilter(HealthcheckLogFilter())


def create_app(
    config: AppConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create the Helixboard FastAPI app.

    Args:
        config: Resolved runtime configuration
        transport: Custom httpx transport for the HelixDB client (used by tests)

    Returns:
        Configured FastAPI application
    """
    client = HelixClient(config.helix_url, config.api_key, transport=transport)
    metadata = MetadataProvider(
        config.source,
        client,
        schema_path=config.schema_file_path,
        queries_path=config.queries_file_path,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        _setup_logging_filter()
        logger.info(f"Helixboard serving {config.source.value} metadata from {config.helix_url}")

        yield

        # Shutdown
        await client.close()

    app = FastAPI(
        title="Helixboard",
        description="REST API over a HelixDB schema and its queries",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.helix_client = client
    app.state.metadata = metadata

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
