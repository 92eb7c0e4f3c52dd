"""Request dependencies shared by the routers."""

from fastapi import Request

from ..store import EventStore

def get_event_store(request: Request) -> EventStore:
    """The EventStore built at application startup."""
    return request.app.state.event_store
