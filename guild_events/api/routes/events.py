"""Events router module."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..dependencies import get_event_store
from ...errors import EventNotFound, InvalidAction, NoCacheAvailable
from ...queries import EventQuery, apply_query, find_event
from ...store import EventStore, FetchResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

SOURCE_HEADER = "X-Events-Source"

def _load(store: EventStore, response: Response, error: str, force_refresh: bool = False) -> FetchResult:
    """Load events, turning a failed load into a 500 with the given message."""
    try:
        result = store.load(force_refresh).raise_for_failure()
    except NoCacheAvailable as e:
        logger.error(f"No events to serve: {e}")
        raise HTTPException(status_code=500, detail=error)
    if result.degraded:
        logger.warning(f"Serving stale events: {result.reason}")
    response.headers[SOURCE_HEADER] = result.source.value
    return result

@router.get("/events", response_model=List[Dict])
def get_events(
    response: Response,
    type: Optional[str] = None,
    status: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Optional[str] = None,
    force: Optional[str] = None,
    store: EventStore = Depends(get_event_store)
):
    """Get events filtered by type and status; past events are hidden unless asked for."""
    query = EventQuery.from_params(type=type, status=status, sort=sort, limit=limit, force=force)
    result = _load(store, response, "Failed to load events", query.force_refresh)
    return [event.to_dict() for event in apply_query(result.events, query)]

@router.get("/events/live", response_model=List[Dict])
def get_live_events(response: Response, store: EventStore = Depends(get_event_store)):
    """Get events happening right now."""
    result = _load(store, response, "Failed to load live events")
    return [event.to_dict() for event in result.events if event.status.code == 'live']

@router.get("/events/{event_id}", response_model=Dict)
def get_event(event_id: str, response: Response, store: EventStore = Depends(get_event_store)):
    """Get a single event by ID."""
    result = _load(store, response, "Failed to load event")
    try:
        return find_event(result.events, event_id).to_dict()
    except EventNotFound:
        raise HTTPException(status_code=404, detail="Event not found")

@router.post("/events/{event_id}/interest", response_model=Dict)
async def record_interest(
    event_id: str,
    request: Request,
    store: EventStore = Depends(get_event_store)
):
    """
    Count a 'going' or 'interested' vote for an event.

    Votes are not deduplicated and are kept in memory only. A missing or
    malformed body counts as an invalid action.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    action = payload.get('action') if isinstance(payload, dict) else None
    try:
        stats = store.record_interest(event_id, action)
    except InvalidAction:
        raise HTTPException(status_code=400, detail="Invalid action")
    return stats.to_dict()
