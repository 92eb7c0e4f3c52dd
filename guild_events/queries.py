"""Filter, sort and limit an event list according to request parameters."""

from dataclasses import dataclass
from typing import List, Optional

from .errors import EventNotFound
from .models.event import NormalizedEvent
from .normalizer import sort_events

STATUS_CODES = ('live', 'upcoming', 'past')
SORT_START_DESC = 'start_desc'

@dataclass
class EventQuery:
    """
    Parsed query parameters for the events list.

    Fields:
        type: Event type to keep, empty for all
        status: Status code to keep; anything not in STATUS_CODES hides past events
        descending: Latest start first (events without a start stay last)
        limit: Maximum number of results, None for no limit
        force_refresh: Bypass the cache TTL
    """
    type: str = ''
    status: str = ''
    descending: bool = False
    limit: Optional[int] = None
    force_refresh: bool = False

    @classmethod
    def from_params(
        cls,
        type: Optional[str] = None,
        status: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[str] = None,
        force: Optional[str] = None,
    ) -> 'EventQuery':
        return cls(
            type=(type or '').lower(),
            status=(status or '').lower(),
            descending=(sort or '').lower() == SORT_START_DESC,
            limit=_parse_limit(limit),
            force_refresh=force == '1',
        )

def _parse_limit(value: Optional[str]) -> Optional[int]:
    """Positive integers only; anything else means no limit."""
    if value is None:
        return None
    try:
        limit = int(str(value).strip())
    except ValueError:
        return None
    return limit if limit > 0 else None

def apply_query(events: List[NormalizedEvent], query: EventQuery) -> List[NormalizedEvent]:
    """Apply type/status filters, ordering and limit. Does not modify ``events``."""
    result = list(events)

    if query.type:
        result = [e for e in result if e.type == query.type]

    if query.status in STATUS_CODES:
        result = [e for e in result if e.status.code == query.status]
    else:
        result = [e for e in result if e.status.code != 'past']

    result = sort_events(result)
    if query.descending:
        known = [e for e in result if e.start_unix is not None]
        unknown = [e for e in result if e.start_unix is None]
        result = known[::-1] + unknown

    if query.limit is not None:
        result = result[:query.limit]

    return result

def find_event(events: List[NormalizedEvent], event_id: str) -> NormalizedEvent:
    """
    Look up one event by id.

    Raises:
        EventNotFound: If no event has that id
    """
    for event in events:
        if event.id == event_id:
            return event
    raise EventNotFound(f"Event not found: {event_id}")
