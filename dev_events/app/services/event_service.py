"""
Business logic for events.

``EventService`` covers event creation (image upload followed by the
document insert, with the upload rolled back if the insert fails),
listing, lookup by slug and the "similar events" recommendation.  The
document store and blob store are passed in by the caller so the API
layer can inject them as FastAPI dependencies.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from fastapi.concurrency import run_in_threadpool

from ..core.blob_store import S3BlobStore
from ..core.db import DocumentStore
from ..core.errors import EventNotFoundError, MissingImageError
from ..schemas.event import EventRead, normalize_slug


logger = logging.getLogger(__name__)

# Form fields that are not copied verbatim into the event document.
LIST_FIELDS = ("tags", "agenda")
NON_DOCUMENT_FIELDS = LIST_FIELDS + ("image",)


@dataclass
class ImagePayload:
    """Binary image submitted with an event."""

    data: bytes
    filename: str = ""
    content_type: Optional[str] = None


def parse_json_list(raw: Any) -> List[str]:
    """Parse a form value holding a JSON array.

    Missing values, invalid JSON and JSON that is not an array all give
    an empty list.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed JSON list value %r", raw)
        return []
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value]


class EventService:
    """Operations on events."""

    @classmethod
    async def create_event(
        cls,
        fields: Mapping[str, Any],
        image: Optional[ImagePayload],
        *,
        store: DocumentStore,
        blob_store: S3BlobStore,
    ) -> EventRead:
        """Upload the event image and persist a new event.

        ``fields`` holds the submitted form values; ``tags`` and
        ``agenda`` are JSON arrays.  The image is uploaded first.  If
        the store then rejects the document, the uploaded image is
        deleted before the store error is re-raised.  A failure of that
        cleanup is only logged.

        Raises ``MissingImageError`` without an image,
        ``UploadFailedError`` when the upload fails and one of the
        ``DocumentStoreError`` subclasses when the insert fails.
        """
        if image is None or not image.data:
            raise MissingImageError()

        tags = parse_json_list(fields.get("tags"))
        agenda = parse_json_list(fields.get("agenda"))
        document = {
            key: value
            for key, value in fields.items()
            if key not in NON_DOCUMENT_FIELDS and isinstance(value, str)
        }

        # boto3 blocks; run it off the event loop.
        uploaded = await run_in_threadpool(
            blob_store.upload, image.data, filename=image.filename, content_type=image.content_type
        )

        try:
            event = store.events.create({**document, "tags": tags, "agenda": agenda, "image": uploaded.url})
        except Exception:
            try:
                await run_in_threadpool(blob_store.delete, uploaded.id)
            except Exception:
                logger.exception("Failed to cleanup uploaded image %s", uploaded.id)
            raise

        logger.info("Created event '%s' (%s)", event.title, event.slug)
        return event

    @classmethod
    async def list_events(cls, *, store: DocumentStore) -> List[EventRead]:
        """Return all events, newest first."""
        return store.events.find()

    @classmethod
    async def get_event_by_slug(cls, slug: Optional[str], *, store: DocumentStore) -> EventRead:
        """Retrieve a single event by slug.

        Raises ``ValueError`` for a missing or blank slug and
        ``EventNotFoundError`` when nothing matches.
        """
        if not slug or not isinstance(slug, str) or not slug.strip():
            raise ValueError("Slug is required and must be a non-empty string.")
        sanitized = normalize_slug(slug)
        event = store.events.find_one(slug=sanitized)
        if event is None:
            raise EventNotFoundError(sanitized)
        return event

    @classmethod
    async def get_similar_events_by_slug(cls, slug: str, *, store: DocumentStore) -> List[EventRead]:
        """Return events sharing at least one tag with the event ``slug``.

        The event itself is never part of the result.  An unknown slug
        and a failing store both yield an empty list; the cause is only
        logged.
        """
        try:
            event = store.events.find_one(slug=normalize_slug(slug or ""))
            if event is None:
                raise EventNotFoundError(normalize_slug(slug or ""))
            return store.events.find(exclude_id=event.id, tags_any=event.tags)
        except Exception as exc:
            # TODO: report "not found" separately from store failures once the
            # detail page needs to tell them apart.
            logger.error("Error fetching similar events for '%s': %s", slug, exc)
            return []
