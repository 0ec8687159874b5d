"""Tests for the event JSON endpoints."""

import json

from conftest import IMAGE, FakeBlobStore, make_event_doc, make_event_form
from dev_events.app.core.blob_store import get_blob_store
from dev_events.app.core.db import DocumentStore, get_store
from dev_events.app.main import app


def create(client, **overrides):
    return client.post("/api/events", data=make_event_form(**overrides), files={"image": IMAGE})


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_event_stores_uploaded_image_url(client, store, blob_store):
    response = create(client)

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Event Created Successfully"
    event = data["event"]
    assert event["slug"] == "react-summit-2025"
    assert event["image"] == "https://cdn.example.com/events/image-1"
    assert event["tags"] == ["react", "javascript"]
    assert len(store.events.find()) == 1
    assert blob_store.uploads == ["events/image-1"]
    assert blob_store.deletes == []


def test_create_event_parses_tags_and_agenda(client, store):
    response = create(client, tags='["a","b"]', agenda='["x"]')

    assert response.status_code == 201
    stored = store.events.find_one(slug="react-summit-2025")
    assert stored.tags == ["a", "b"]
    assert stored.agenda == ["x"]


def test_create_event_without_image(client, store, blob_store):
    response = client.post("/api/events", data=make_event_form())

    assert response.status_code == 400
    assert response.json()["message"] == "Image file is required"
    assert blob_store.uploads == []
    assert store.events.find() == []


def test_create_event_with_duplicate_slug(client, store, blob_store):
    assert create(client).status_code == 201

    response = create(client)

    assert response.status_code == 409
    data = response.json()
    assert data["message"] == "Duplicate Key Error"
    assert data["duplicates"] == [
        {"field": "slug", "value": "react-summit-2025", "message": "slug must be unique"}
    ]
    assert blob_store.deletes == ["events/image-2"]
    assert len(store.events.find()) == 1


def test_create_event_slug_collision_is_case_insensitive(client):
    assert create(client, slug="Launch-Party").status_code == 201

    response = create(client, title="Another title", slug="  launch-party ")

    assert response.status_code == 409
    assert response.json()["duplicates"][0]["value"] == "launch-party"


def test_create_event_validation_errors(client, blob_store):
    response = create(client, overview=None, venue="   ")

    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation Failed"
    fields = {error["field"] for error in data["errors"]}
    assert {"overview", "venue"} <= fields
    assert all(error["message"] for error in data["errors"])
    assert blob_store.deletes == blob_store.uploads == ["events/image-1"]


def test_malformed_lists_default_to_empty(client, blob_store):
    # Unparsable tags become an empty list, which the event schema rejects.
    response = create(client, tags="not json", agenda=json.dumps({"not": "a list"}))

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"tags", "agenda"}
    assert blob_store.deletes == ["events/image-1"]


def test_cleanup_failure_does_not_change_reported_error(client, store):
    failing = FakeBlobStore(fail_delete=True)
    app.dependency_overrides[get_blob_store] = lambda: failing
    store.events.create(make_event_doc())

    response = create(client)

    assert response.status_code == 409
    assert response.json()["message"] == "Duplicate Key Error"
    assert failing.deletes == ["events/image-1"]


def test_upload_failure(client, store):
    failing = FakeBlobStore(fail_upload=True)
    app.dependency_overrides[get_blob_store] = lambda: failing

    response = create(client)

    assert response.status_code == 500
    assert response.json()["message"] == "Event Creation Failed"
    assert failing.deletes == []
    assert store.events.find() == []


def test_unclassified_store_failure(client, tmp_path, blob_store):
    app.dependency_overrides[get_store] = lambda: DocumentStore(str(tmp_path / "missing" / "db.sqlite"))

    response = create(client)

    assert response.status_code == 500
    data = response.json()
    assert data["message"] == "Event Creation Failed"
    assert data["error"]
    assert blob_store.deletes == ["events/image-1"]


def test_list_events_newest_first(client, store):
    store.events.create(make_event_doc(title="B Event"))
    store.events.create(make_event_doc(title="A Event"))

    response = client.get("/api/events")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Events Retrieved Successfully"
    assert [event["slug"] for event in data["events"]] == ["a-event", "b-event"]


def test_list_events_store_failure(client):
    app.dependency_overrides[get_store] = lambda: DocumentStore("")

    response = client.get("/api/events")

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to Retrieve Events"


def test_get_event_by_slug(client, store):
    store.events.create(make_event_doc())

    response = client.get("/api/events/react-summit-2025")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Event retrieved successfully"
    assert data["event"]["title"] == "React Summit 2025"


def test_get_event_slug_is_normalized(client, store):
    store.events.create(make_event_doc())

    response = client.get("/api/events/React-Summit-2025")

    assert response.status_code == 200
    assert response.json()["event"]["slug"] == "react-summit-2025"


def test_get_event_blank_slug(client):
    response = client.get("/api/events/%20%20")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid slug parameter"


def test_get_event_not_found(client):
    response = client.get("/api/events/nope")

    assert response.status_code == 404
    data = response.json()
    assert data["message"] == "Event not found"
    assert "nope" in data["error"]


def test_get_event_configuration_error(client):
    app.dependency_overrides[get_store] = lambda: DocumentStore("")

    response = client.get("/api/events/react-summit-2025")

    assert response.status_code == 500
    assert response.json()["message"] == "Database configuration error"


def test_get_event_connection_error(client, tmp_path):
    app.dependency_overrides[get_store] = lambda: DocumentStore(str(tmp_path / "missing" / "db.sqlite"))

    response = client.get("/api/events/react-summit-2025")

    assert response.status_code == 500
    assert response.json()["message"] == "Database connection error"


def test_similar_events_endpoint(client, store):
    store.events.create(make_event_doc(title="React Summit", tags=["react", "javascript"]))
    store.events.create(make_event_doc(title="JS Nation", tags=["javascript"]))
    store.events.create(make_event_doc(title="PyCon", tags=["python"]))

    response = client.get("/api/events/react-summit/similar")

    assert response.status_code == 200
    assert [event["slug"] for event in response.json()["events"]] == ["js-nation"]


def test_similar_events_endpoint_unknown_slug(client):
    response = client.get("/api/events/unknown/similar")

    assert response.status_code == 200
    assert response.json() == {"events": []}
