"""Shared fixtures: a fixed clock, a scripted upstream and an app around them."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from guild_events.api.app import create_application
from guild_events.store import EventStore

NOW = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)
CDN = "https://cdn.discordapp.com"

def iso(minutes: float) -> str:
    """ISO timestamp `minutes` after NOW (negative for the past)."""
    return (NOW + timedelta(minutes=minutes)).isoformat()

def raw_event(event_id, name="Event", description=None, start=None, end=None, **extra):
    record = {
        'id': event_id,
        'name': name,
        'description': description,
        'scheduled_start_time': start,
        'scheduled_end_time': end,
    }
    record.update(extra)
    return record

class FakeClock:
    def __init__(self, start: datetime = NOW):
        self.now = start.timestamp()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds

class FakeSource:
    """Upstream stand-in: each call pops the next scripted response (a list or an exception)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def queue(self, *responses):
        self.responses.extend(responses)

    def get_scheduled_events(self):
        self.calls += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def source():
    return FakeSource([])

@pytest.fixture
def store(source, clock):
    return EventStore(source, cdn_base=CDN, ttl=60, clock=clock)

@pytest.fixture
def client(store):
    return TestClient(create_application(store))
