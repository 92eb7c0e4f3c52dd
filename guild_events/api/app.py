"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal imports
from guild_events.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from guild_events import __version__
from guild_events.config.cors import CORS_CONFIG
from guild_events.config.external_services import DiscordConfig, get_discord_config
from guild_events.clients import DiscordEventsClient
from guild_events.store import EventStore
from guild_events.utils.logging_config import setup_logging
from .routes import events, health

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

def build_event_store(config: Optional[DiscordConfig] = None) -> EventStore:
    """Build the store from configuration; no credentials means mock data."""
    config = config or get_discord_config()
    source = DiscordEventsClient(config) if config.is_configured() else None
    return EventStore(source, cdn_base=config.cdn_base_url, ttl=config.cache_ttl)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    store = app.state.event_store
    if store.is_mock:
        logger.warning("Discord credentials not configured, serving mock events")
    else:
        logger.info(f"Serving Discord scheduled events (cache TTL {store.ttl:g}s)")
    yield

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, 'headers', None)
    )

def create_application(store: Optional[EventStore] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Guild Events API",
        description="Discord scheduled events, normalized and cached for the events board",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )
    app.state.event_store = store or build_event_store()

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")

    return app

# Create the application instance
app = create_application()
