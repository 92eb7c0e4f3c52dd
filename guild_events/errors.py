"""Exceptions raised while fetching, decoding and serving events."""

from typing import Optional

class GuildEventsError(Exception):
    """Base exception for guild events errors."""
    pass

class UpstreamError(GuildEventsError):
    """Raised when the upstream events API cannot deliver a fresh list."""
    pass

class UpstreamRateLimited(UpstreamError):
    """Raised when the upstream API answers with HTTP 429."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after

class UpstreamUnavailable(UpstreamError):
    """Raised on any other non-success status, transport error or bad payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class NoCacheAvailable(GuildEventsError):
    """Raised when upstream failed and there is no cached list to fall back to."""
    pass

class EventNotFound(GuildEventsError):
    """Raised when a requested event id is not in the current list."""
    pass

class InvalidAction(GuildEventsError):
    """Raised when an interest action is neither 'going' nor 'interested'."""
    pass

class InvalidEventRecord(GuildEventsError):
    """Raised when a raw upstream record cannot be decoded."""
    pass
