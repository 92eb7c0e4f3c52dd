"""In-process event cache and interest counters.

``EventStore`` owns the single cached event list, the time it was fetched and
the per-event stats map. One store is built at startup and handed to the
request handlers.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from .errors import InvalidAction, NoCacheAvailable, UpstreamError, UpstreamRateLimited
from .models.event import EventStats, NormalizedEvent
from .normalizer import normalize_events, sort_events

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 60.0  # seconds
INTEREST_ACTIONS = ('going', 'interested')

class EventSource(Protocol):
    """Anything that can produce raw scheduled-event records."""

    def get_scheduled_events(self) -> List[Any]: ...

class FetchSource(str, Enum):
    """Which path produced a list of events."""
    FRESH = 'fresh'    # just fetched from upstream
    CACHED = 'cached'  # cache within its TTL
    MOCK = 'mock'      # no credentials, built-in sample data
    STALE = 'stale'    # upstream failed, cache served regardless of age
    FAILED = 'failed'  # upstream failed and nothing was cached

@dataclass
class FetchResult:
    """Events plus the path that produced them."""
    events: List[NormalizedEvent] = field(default_factory=list)
    source: FetchSource = FetchSource.FRESH
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.source is not FetchSource.FAILED

    @property
    def degraded(self) -> bool:
        return self.source in (FetchSource.STALE, FetchSource.FAILED)

    def raise_for_failure(self) -> 'FetchResult':
        """Raise NoCacheAvailable for a failed load, otherwise return self."""
        if not self.ok:
            raise NoCacheAvailable(self.reason or "No cached events available")
        return self

def build_mock_records(now_ms: int) -> List[Dict[str, Any]]:
    """Two sample events relative to now, used when no credentials are configured."""
    def iso(ms: int) -> str:
        return time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(ms / 1000)) + f".{ms % 1000:03d}Z"

    return [
        {
            'id': '1',
            'name': 'Street Session: Downtown Vibes #IRL #DNB',
            'description': "Open DJ set in the city center.\n#IRL #DNB\nhttps://hpsbassline.myftp.biz/",
            'scheduled_start_time': iso(now_ms + 30 * 60 * 1000),
            'scheduled_end_time': iso(now_ms + 2 * 3600 * 1000),
            'entity_metadata': {'location': 'Haapsalu'},
            'image': 'https://images.pexels.com/photos/1190298/pexels-photo-1190298.jpeg',
        },
        {
            'id': '2',
            'name': 'VR Club Showcase #VR #HARDCORE',
            'description': "Immersive VR experience.\n#VR #HARDCORE\nhttps://twitch.tv/hps_bassline",
            'scheduled_start_time': iso(now_ms + 3 * 3600 * 1000),
            'scheduled_end_time': None,
            'entity_metadata': {'location': 'VRChat'},
            'image': 'https://images.pexels.com/photos/3404200/pexels-photo-3404200.jpeg',
        },
    ]

class EventStore:
    """
    Short-TTL cache in front of the upstream events API.

    Args:
        source: Upstream client, or None to serve mock data
        cdn_base: Base URL for event images given as asset hashes
        ttl: Seconds a fetched list is served without asking upstream again
        clock: Returns the current time in seconds since the epoch
    """

    def __init__(
        self,
        source: Optional[EventSource],
        cdn_base: str,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time
    ):
        self.source = source
        self.cdn_base = cdn_base
        self.ttl = ttl
        self.clock = clock

        self._cached_events: Optional[List[NormalizedEvent]] = None
        self._cached_at: float = 0.0
        self._stats: Dict[str, EventStats] = {}

        # Guards the cache slot only, never held across the upstream call
        self._cache_lock = threading.Lock()
        # Serializes refreshes so concurrent cold requests share one upstream call
        self._refresh_lock = threading.Lock()
        self._stats_lock = threading.Lock()

    @property
    def is_mock(self) -> bool:
        return self.source is None

    @property
    def cached_events(self) -> Optional[List[NormalizedEvent]]:
        return self._cached_events

    @property
    def cached_at(self) -> Optional[float]:
        return self._cached_at if self._cached_events is not None else None

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def get_stats(self, event_id: str) -> EventStats:
        """Counters for an event, created on first access."""
        with self._stats_lock:
            stats = self._stats.get(event_id)
            if stats is None:
                stats = self._stats[event_id] = EventStats()
            return stats

    def record_interest(self, event_id: str, action: str) -> EventStats:
        """
        Add one 'going' or 'interested' vote to an event.

        Raises:
            InvalidAction: If action is not one of INTEREST_ACTIONS
        """
        if action not in INTEREST_ACTIONS:
            raise InvalidAction(f"Invalid action: {action!r}")

        stats = self.get_stats(event_id)
        with self._stats_lock:
            setattr(stats, action, getattr(stats, action) + 1)
        logger.debug(f"Recorded '{action}' for event {event_id}: {stats}")
        return stats

    def _normalize(self, records: List[Any]) -> List[NormalizedEvent]:
        events = normalize_events(records, self.get_stats, self._now_ms(), self.cdn_base)
        return sort_events(events)

    def fetch(self, force_refresh: bool = False) -> FetchResult:
        """
        Get the sorted event list, from cache when fresh enough.

        Raises:
            UpstreamRateLimited: If rate limited and nothing is cached
            UpstreamUnavailable: If upstream failed for any other reason
        """
        if self.source is None:
            logger.warning("No GUILD_ID or DISCORD_BOT_TOKEN - using mock data")
            return FetchResult(self._normalize(build_mock_records(self._now_ms())), FetchSource.MOCK)

        cached = self._fresh_cache(force_refresh)
        if cached is not None:
            return cached

        # One refresh at a time; cache readers never wait on it
        with self._refresh_lock:
            cached = self._fresh_cache(force_refresh)
            if cached is not None:
                return cached

            try:
                records = self.source.get_scheduled_events()
            except UpstreamRateLimited as e:
                with self._cache_lock:
                    stale = self._cached_events
                if stale is not None:
                    logger.info("Rate limited, returning cached events")
                    return FetchResult(stale, FetchSource.STALE, str(e))
                raise

            events = self._normalize(records)
            with self._cache_lock:
                self._cached_events = events
                self._cached_at = self.clock()
            logger.info(f"Cached {len(events)} events")
            return FetchResult(events, FetchSource.FRESH)

    def _fresh_cache(self, force_refresh: bool) -> Optional[FetchResult]:
        """The cached list if it is still within its TTL and no refresh was forced."""
        if force_refresh:
            return None
        with self._cache_lock:
            if self._cached_events is not None and self.clock() - self._cached_at < self.ttl:
                logger.debug("Serving events from cache")
                return FetchResult(self._cached_events, FetchSource.CACHED)
        return None

    def load(self, force_refresh: bool = False) -> FetchResult:
        """Like fetch, but degrades to the stale cache or a failed result instead of raising."""
        try:
            return self.fetch(force_refresh)
        except UpstreamError as e:
            logger.error(f"Failed to fetch events: {e}")
            cached = self._cached_events
            if cached is not None:
                logger.info("Returning cached events due to error")
                return FetchResult(cached, FetchSource.STALE, str(e))
            return FetchResult([], FetchSource.FAILED, str(e))
