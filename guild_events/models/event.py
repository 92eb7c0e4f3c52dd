"""Event model definitions."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import InvalidEventRecord

def _optional_str(value: Any) -> Optional[str]:
    """Keep non-empty strings, drop anything else."""
    if isinstance(value, str) and value:
        return value
    return None

@dataclass
class RawEvent:
    """
    A scheduled event record as returned by the Discord API.

    Fields:
        id: Event snowflake id
        name: Event title
        description: Free text, may contain hashtags and links (optional)
        scheduled_start_time: ISO 8601 start (optional)
        scheduled_end_time: ISO 8601 end (optional)
        location: entity_metadata.location for external events (optional)
        image: Absolute image URL or Discord asset hash (optional)
    """
    id: str
    name: str
    description: Optional[str] = None
    scheduled_start_time: Optional[str] = None
    scheduled_end_time: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'RawEvent':
        """
        Decode an upstream record.

        Only id and name are required. Optional fields of the wrong type are
        dropped rather than rejected.

        Raises:
            InvalidEventRecord: If the record is not an object or lacks id/name
        """
        if not isinstance(data, dict):
            raise InvalidEventRecord(f"Event record must be an object, got {type(data).__name__}")

        missing_fields = [name for name in ('id', 'name') if data.get(name) in (None, '')]
        if missing_fields:
            raise InvalidEventRecord(f"Missing required fields: {', '.join(missing_fields)}")

        metadata = data.get('entity_metadata')
        location = metadata.get('location') if isinstance(metadata, dict) else None

        return cls(
            id=str(data['id']),
            name=str(data['name']),
            description=_optional_str(data.get('description')),
            scheduled_start_time=_optional_str(data.get('scheduled_start_time')),
            scheduled_end_time=_optional_str(data.get('scheduled_end_time')),
            location=_optional_str(location),
            image=_optional_str(data.get('image')),
        )

@dataclass
class EventStats:
    """Interest counters for one event."""
    going: int = 0
    interested: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {'going': self.going, 'interested': self.interested}

@dataclass(frozen=True)
class EventStatus:
    """Where an event is relative to now."""
    code: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {'code': self.code, 'label': self.label}

UPCOMING = EventStatus('upcoming', 'Upcoming')
LIVE = EventStatus('live', 'Live')
PAST = EventStatus('past', 'Past')

@dataclass(frozen=True)
class EventLink:
    """A link found in an event description."""
    url: str
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {'url': self.url, 'label': self.label}

@dataclass
class NormalizedEvent:
    """
    Event in the shape served to the browser client.

    ``stats`` is the shared counter object for the event id, so cached lists
    always expose the latest counts.
    """
    id: str
    name: str
    description: Optional[str]
    image: Optional[str]
    start: Optional[str]
    end: Optional[str]
    start_unix: Optional[int]
    end_unix: Optional[int]
    duration_minutes: Optional[int]
    type: str
    location: Optional[str]
    status: EventStatus
    stats: EventStats
    links: List[EventLink] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    link: str = '#'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON payload used by the API."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'image': self.image,
            'start': self.start,
            'end': self.end,
            'startUnix': self.start_unix,
            'endUnix': self.end_unix,
            'durationMinutes': self.duration_minutes,
            'type': self.type,
            'location': self.location,
            'link': self.link,
            'links': [link.to_dict() for link in self.links],
            'tags': list(self.tags),
            'status': self.status.to_dict(),
            'stats': self.stats.to_dict(),
        }
