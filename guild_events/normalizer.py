"""Turn raw Discord scheduled events into the payload served to the client.

Everything here is pure apart from the stats entry handed to
``normalize_event``. Bad per-record data degrades to safe defaults
(``upcoming`` status, no duration) instead of failing the batch.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

from .errors import InvalidEventRecord
from .models.event import (
    RawEvent,
    NormalizedEvent,
    EventStats,
    EventStatus,
    EventLink,
    UPCOMING,
    LIVE,
    PAST,
)

logger = logging.getLogger(__name__)

# Events without an end time are assumed to last this long
DEFAULT_EVENT_DURATION_MS = 3 * 3600 * 1000

URL_PATTERN = re.compile(r'https?://\S+')
TAG_PATTERN = re.compile(r'#(\w+)', re.ASCII)

# Checked in order, first match wins
TYPE_MARKERS = (
    ('irl', ('#IRL',)),
    ('virtual', ('#VR', '#VIRTUAL')),
    ('radio', ('#RADIO',)),
)
TYPE_MARKER_TAGS = frozenset({'IRL', 'VR', 'VIRTUAL', 'RADIO'})

PLATFORM_LABELS = (
    (('youtube.com', 'youtu.be'), 'YouTube'),
    (('twitch.tv',), 'Twitch'),
    (('spotify.com',), 'Spotify'),
    (('soundcloud.com',), 'SoundCloud'),
    (('mixcloud.com',), 'Mixcloud'),
    (('bandcamp.com',), 'Bandcamp'),
    (('tiktok.com',), 'TikTok'),
    (('facebook.com',), 'Facebook'),
    (('instagram.com',), 'Instagram'),
)
RADIO_HOSTS = ('hpsbassline.myftp.biz', 'azura.hpsbassline.myftp.biz', 'radio')

def detect_type(name: str, description: Optional[str]) -> str:
    """Classify an event as irl, virtual, radio or other from its hashtags."""
    text = f"{name}\n{description or ''}".upper()
    for event_type, markers in TYPE_MARKERS:
        if any(marker in text for marker in markers):
            return event_type
    return 'other'

def label_for_url(url: str) -> str:
    """Friendly label for a link: platform name, 'Radio', or the bare host."""
    try:
        host = (urlsplit(url).hostname or '').lower()
    except ValueError:
        return 'Link'
    if not host:
        return 'Link'

    for needles, label in PLATFORM_LABELS:
        if any(needle in host for needle in needles):
            return label

    if any(needle in host for needle in RADIO_HOSTS):
        return 'Radio'

    return re.sub(r'^www\.', '', host)

def extract_links_tags(description: Optional[str]) -> Tuple[List[EventLink], List[str]]:
    """Pull links and uppercase hashtags (minus type markers) out of a description."""
    if not description:
        return [], []

    links = [EventLink(url=match, label=label_for_url(match))
             for match in URL_PATTERN.findall(description)]
    tags = [tag.upper() for tag in TAG_PATTERN.findall(description)
            if tag.upper() not in TYPE_MARKER_TAGS]
    return links, tags

def parse_timestamp_ms(value: Optional[str]) -> Optional[int]:
    """Parse an ISO 8601 timestamp to epoch milliseconds, None if absent or invalid."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (TypeError, ValueError):
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(round(parsed.timestamp() * 1000))

def get_status(start: Optional[str], end: Optional[str], now_ms: int) -> EventStatus:
    """
    Work out whether an event is upcoming, live or past.

    Both bounds of the live window are inclusive. Without a usable start the
    event is reported as upcoming.
    """
    start_ms = parse_timestamp_ms(start)
    if start_ms is None:
        return UPCOMING

    end_ms = parse_timestamp_ms(end)
    if end_ms is None:
        end_ms = start_ms + DEFAULT_EVENT_DURATION_MS

    if now_ms < start_ms:
        return UPCOMING
    if start_ms <= now_ms <= end_ms:
        return LIVE
    return PAST

def resolve_image_url(event_id: str, image: Optional[str], cdn_base: str) -> Optional[str]:
    """Absolute image URLs pass through; asset hashes become CDN URLs."""
    if not image:
        return None
    if image.startswith('http'):
        return image
    return f"{cdn_base}/guild-events/{event_id}/{image}.webp?size=1024"

def normalize_event(raw: RawEvent, stats: EventStats, now_ms: int, cdn_base: str) -> NormalizedEvent:
    """Build the served representation of one event."""
    links, tags = extract_links_tags(raw.description)
    start_ms = parse_timestamp_ms(raw.scheduled_start_time)
    end_ms = parse_timestamp_ms(raw.scheduled_end_time)

    duration = None
    if start_ms is not None and end_ms is not None:
        duration = int(round((end_ms - start_ms) / 60000))

    return NormalizedEvent(
        id=raw.id,
        name=raw.name,
        description=raw.description,
        image=resolve_image_url(raw.id, raw.image, cdn_base),
        start=raw.scheduled_start_time,
        end=raw.scheduled_end_time,
        start_unix=start_ms,
        end_unix=end_ms,
        duration_minutes=duration,
        type=detect_type(raw.name, raw.description),
        location=raw.location,
        status=get_status(raw.scheduled_start_time, raw.scheduled_end_time, now_ms),
        stats=stats,
        links=links,
        tags=tags,
    )

def normalize_events(
    records: Iterable[Any],
    stats_for: Callable[[str], EventStats],
    now_ms: int,
    cdn_base: str,
) -> List[NormalizedEvent]:
    """Normalize a batch, skipping records that cannot be decoded."""
    events = []
    for record in records:
        try:
            raw = RawEvent.from_dict(record)
        except InvalidEventRecord as e:
            logger.warning(f"Skipping event record: {e}")
            continue
        events.append(normalize_event(raw, stats_for(raw.id), now_ms, cdn_base))
    return events

def _start_sort_key(event: NormalizedEvent) -> Tuple[int, int]:
    if event.start_unix is None:
        return (1, 0)
    return (0, event.start_unix)

def sort_events(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    """Stable ascending sort by start time, events without a start last."""
    return sorted(events, key=_start_sort_key)
