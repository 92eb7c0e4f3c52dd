"""Models package initialization."""

from .event import (
    RawEvent,
    NormalizedEvent,
    EventStats,
    EventStatus,
    EventLink,
)

__all__ = ['RawEvent', 'NormalizedEvent', 'EventStats', 'EventStatus', 'EventLink']
