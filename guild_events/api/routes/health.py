"""Health check routes for the FastAPI application."""

from fastapi import APIRouter, Depends

from guild_events import __version__
from guild_events.config.environment import IS_PRODUCTION_ENVIRONMENT
from ..dependencies import get_event_store
from ...store import EventStore

router = APIRouter(tags=["health"])

@router.get("/health")
def health_check(store: EventStore = Depends(get_event_store)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__,
        "upstream": "mock" if store.is_mock else "discord",
    }
