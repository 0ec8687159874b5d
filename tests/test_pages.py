"""Tests for the server-rendered pages."""

import pytest

from conftest import StubApiClient, make_event_doc
from dev_events.app.main import app
from dev_events.app.web.api_client import get_api_client


@pytest.fixture
def events(store):
    created = [
        store.events.create(make_event_doc(title="React Summit", tags=["react", "javascript"])),
        store.events.create(make_event_doc(title="JS Nation", tags=["javascript"])),
        store.events.create(make_event_doc(title="PyCon", tags=["python"])),
    ]
    stub = StubApiClient(events=[event.model_dump(mode="json") for event in created])
    app.dependency_overrides[get_api_client] = lambda: stub
    return created


def test_home_lists_events(client, events):
    response = client.get("/")

    assert response.status_code == 200
    for title in ("React Summit", "JS Nation", "PyCon"):
        assert title in response.text


def test_home_shows_not_found_when_fetch_fails(client):
    app.dependency_overrides[get_api_client] = lambda: StubApiClient(
        error={"status_code": 500, "message": "Failed to Retrieve Events"}
    )

    response = client.get("/")

    assert response.status_code == 404
    assert "Event not found" in response.text


def test_event_detail_page(client, events):
    response = client.get("/events/react-summit")

    assert response.status_code == 200
    page = response.text
    assert "React Summit" in page
    assert "Opening Keynote" in page
    assert "Be the first to book your spot!" in page
    # Similar events: shares "javascript" with JS Nation only.
    assert 'href="/events/js-nation"' in page
    assert 'href="/events/pycon"' not in page


def test_event_detail_not_found(client, events):
    response = client.get("/events/missing")

    assert response.status_code == 404
    assert "Event not found" in response.text


def test_booking_form(client, store, events):
    response = client.post(
        "/events/react-summit/book",
        data={"email": "ada@example.com", "event_id": str(events[0].id)},
    )

    assert response.status_code == 200
    assert "Thank you for signing up!" in response.text
    assert "Join 1 people who have already booked their spot!" in response.text
    assert store.bookings.count(slug="react-summit") == 1


def test_booking_form_failure(client, store, events):
    response = client.post(
        "/events/react-summit/book",
        data={"email": "nope", "event_id": str(events[0].id)},
    )

    assert response.status_code == 200
    assert "Booking failed" in response.text
    assert store.bookings.count(slug="react-summit") == 0
