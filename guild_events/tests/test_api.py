from fastapi.testclient import TestClient

from guild_events.api.app import create_application
from guild_events.errors import UpstreamRateLimited, UpstreamUnavailable
from guild_events.store import EventStore
from .conftest import CDN, iso, raw_event

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()['status'] == "healthy"
    assert response.json()['upstream'] == "discord"

def test_cold_start_serves_mock_events(clock):
    client = TestClient(create_application(EventStore(None, cdn_base=CDN, clock=clock)))

    response = client.get("/api/events")

    assert response.status_code == 200
    assert response.headers['X-Events-Source'] == "mock"
    events = response.json()
    assert [e['id'] for e in events] == ["1", "2"]
    assert events[0]['startUnix'] < events[1]['startUnix']
    assert client.get("/health").json()['upstream'] == "mock"

def test_list_is_cached_within_ttl(client, source):
    source.responses = [[raw_event("1", start=iso(10)), raw_event("2", start=iso(20))]]

    first = client.get("/api/events?type=&status=")
    second = client.get("/api/events?type=&status=")

    assert first.json() == second.json()
    assert second.headers['X-Events-Source'] == "cached"
    assert source.calls == 1

def test_force_refresh(client, source):
    source.responses = [[raw_event("1", start=iso(10))], [raw_event("2", start=iso(10))]]

    client.get("/api/events")
    response = client.get("/api/events?force=1")

    assert [e['id'] for e in response.json()] == ["2"]
    assert source.calls == 2

def test_rate_limit_after_success_serves_cache(client, source, clock):
    source.responses = [[raw_event("1", start=iso(10))], UpstreamRateLimited("slow down")]
    cached = client.get("/api/events").json()
    clock.advance(120)

    response = client.get("/api/events")

    assert response.status_code == 200
    assert response.headers['X-Events-Source'] == "stale"
    assert response.json() == cached

def test_upstream_error_applies_filters_to_stale_cache(client, source):
    source.responses = [
        [
            raw_event("radio", description="#RADIO", start=iso(-10)),
            raw_event("irl-1", description="#IRL", start=iso(-30)),
            raw_event("irl-2", description="#IRL", start=iso(-20)),
        ],
        UpstreamUnavailable("boom", status_code=503),
    ]
    client.get("/api/events")

    response = client.get("/api/events?type=IRL&status=live&sort=start_desc&limit=1&force=1")

    assert response.status_code == 200
    assert response.headers['X-Events-Source'] == "stale"
    assert [e['id'] for e in response.json()] == ["irl-2"]

def test_failure_without_cache_is_500(client, source):
    source.responses = [UpstreamRateLimited("slow down")]

    assert client.get("/api/events").json() == {'error': "Failed to load events"}
    assert client.get("/api/events").status_code == 500
    assert client.get("/api/events/live").json() == {'error': "Failed to load live events"}
    assert client.get("/api/events/1").json() == {'error': "Failed to load event"}

def test_live_endpoint(client, source):
    source.responses = [[
        raw_event("live", start=iso(-10)),
        raw_event("soon", start=iso(10)),
        raw_event("done", start=iso(-300), end=iso(-200)),
    ]]
    response = client.get("/api/events/live")
    assert [e['id'] for e in response.json()] == ["live"]

def test_single_event(client, source):
    source.responses = [[raw_event("55", name="Rave #IRL", start=iso(10), image="abc")]]

    event = client.get("/api/events/55").json()

    assert event['name'] == "Rave #IRL"
    assert event['type'] == "irl"
    assert event['image'] == f"{CDN}/guild-events/55/abc.webp?size=1024"
    assert event['status'] == {'code': "upcoming", 'label': "Upcoming"}

def test_single_event_not_found(client, source):
    source.responses = [[raw_event("55")]]
    response = client.get("/api/events/56")
    assert response.status_code == 404
    assert response.json() == {'error': "Event not found"}

def test_interest_counter(client):
    for _ in range(3):
        response = client.post("/api/events/abc/interest", json={'action': "going"})
    assert response.status_code == 200
    assert response.json() == {'going': 3, 'interested': 0}

def test_invalid_interest_action(client, store):
    client.post("/api/events/abc/interest", json={'action': "interested"})

    response = client.post("/api/events/abc/interest", json={'action': "maybe"})
    missing = client.post("/api/events/abc/interest")

    assert response.status_code == 400
    assert response.json() == {'error': "Invalid action"}
    assert missing.status_code == 400
    assert store.get_stats("abc").to_dict() == {'going': 0, 'interested': 1}

def test_votes_show_up_in_event_stats(client, source):
    source.responses = [[raw_event("9", start=iso(10))]]
    client.post("/api/events/9/interest", json={'action': "interested"})

    event = client.get("/api/events/9").json()

    assert event['stats'] == {'going': 0, 'interested': 1}

def test_malformed_interest_body(client, store):
    response = client.post(
        "/api/events/abc/interest",
        content=b"{not json",
        headers={'Content-Type': "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {'error': "Invalid action"}
    assert store.get_stats("abc").to_dict() == {'going': 0, 'interested': 0}

def test_non_object_interest_body(client):
    response = client.post("/api/events/abc/interest", json=["going"])
    assert response.status_code == 400
    assert response.json() == {'error': "Invalid action"}
