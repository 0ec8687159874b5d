"""Shared fixtures: a temporary document store, a fake blob store and a test client."""

import json

import pytest
from fastapi.testclient import TestClient

from dev_events.app.core.blob_store import UploadedImage, get_blob_store
from dev_events.app.core.db import DocumentStore, get_store
from dev_events.app.core.errors import BlobStoreError, UploadFailedError
from dev_events.app.main import app
from dev_events.app.web.api_client import get_api_client


class FakeBlobStore:
    """In-memory stand-in for ``S3BlobStore`` that records calls."""

    def __init__(self, *, fail_upload=False, fail_delete=False):
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.objects = {}
        self.uploads = []
        self.deletes = []

    def upload(self, data, *, filename="", content_type=None):
        if self.fail_upload:
            raise UploadFailedError("upload rejected")
        key = f"events/image-{len(self.uploads) + 1}"
        self.uploads.append(key)
        self.objects[key] = data
        return UploadedImage(url=f"https://cdn.example.com/{key}", id=key)

    def delete(self, id):
        self.deletes.append(id)
        if self.fail_delete:
            raise BlobStoreError("delete rejected")
        self.objects.pop(id, None)


class StubApiClient:
    """Stand-in for ``DevEventsClient`` returning canned responses."""

    def __init__(self, events=None, error=None):
        self.events = events or []
        self.error = error

    def list_events(self):
        if self.error:
            return [], self.error
        return self.events, None

    def get_event(self, slug):
        if self.error:
            return None, self.error
        wanted = slug.strip().lower()
        for event in self.events:
            if event["slug"] == wanted:
                return event, None
        return None, {"status_code": 404, "message": "Event not found"}


def make_event_form(**overrides):
    form = {
        "title": "React Summit 2025",
        "description": "The biggest React conference in Europe.",
        "overview": "Two days of talks on React 19 and Server Components.",
        "venue": "Amsterdam RAI",
        "location": "Amsterdam, Netherlands",
        "date": "2025-06-13",
        "time": "09:00",
        "mode": "hybrid",
        "audience": "Frontend developers",
        "organizer": "GitNation",
        "tags": json.dumps(["react", "javascript"]),
        "agenda": json.dumps(["Opening Keynote", "Server Components deep dive"]),
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


def make_event_doc(**overrides):
    """A document ready for ``store.events.create``."""
    doc = make_event_form()
    doc["tags"] = json.loads(doc["tags"])
    doc["agenda"] = json.loads(doc["agenda"])
    doc["image"] = "https://cdn.example.com/events/banner.png"
    doc.update(overrides)
    return doc


IMAGE = ("banner.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")


@pytest.fixture
def store(tmp_path):
    return DocumentStore(str(tmp_path / "events.db"))


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def api_client():
    return StubApiClient()


@pytest.fixture
def client(store, blob_store, api_client):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_api_client] = lambda: api_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
