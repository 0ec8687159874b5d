"""
Event endpoints.

``POST /events`` takes a multipart form (event fields, ``tags`` and
``agenda`` as JSON arrays, and an ``image`` file).  The read routes
return events as JSON.  Response bodies always carry a ``message``
so the pages and other clients can show something meaningful on
failure.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from dev_events.app.core.blob_store import S3BlobStore, get_blob_store
from dev_events.app.core.db import DocumentStore, get_store
from dev_events.app.core.errors import (
    BlobStoreError,
    DocumentStoreError,
    EventNotFoundError,
    FieldValidationError,
    MissingImageError,
    StoreConfigurationError,
    StoreConnectionError,
    UniquenessConflictError,
)
from dev_events.app.schemas.event import EventRead
from dev_events.app.services.event_service import EventService, ImagePayload


logger = logging.getLogger(__name__)

router = APIRouter()


def _dump(events: List[EventRead]) -> list:
    return [event.model_dump(mode="json") for event in events]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    store: DocumentStore = Depends(get_store),
    blob_store: S3BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Create a new event from multipart form data.

    - **201** with the created event.
    - **400** for an unreadable form, a missing image or field
      validation errors (listed under ``errors``).
    - **409** when the slug is already taken (listed under ``duplicates``).
    - **500** for upload and other store failures.
    """
    try:
        form = await request.form()
    except Exception as exc:
        logger.warning("Could not parse event form: %s", exc)
        return JSONResponse({"message": "Invalid Form Data"}, status_code=status.HTTP_400_BAD_REQUEST)

    image = None
    upload = form.get("image")
    if isinstance(upload, UploadFile):
        image = ImagePayload(
            data=await upload.read(),
            filename=upload.filename or "",
            content_type=upload.content_type,
        )
    fields = {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        event = await EventService.create_event(fields, image, store=store, blob_store=blob_store)
    except MissingImageError as e:
        return JSONResponse({"message": str(e)}, status_code=status.HTTP_400_BAD_REQUEST)
    except FieldValidationError as e:
        return JSONResponse(
            {"message": "Validation Failed", "errors": e.errors},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except UniquenessConflictError as e:
        return JSONResponse(
            {"message": "Duplicate Key Error", "duplicates": e.duplicates},
            status_code=status.HTTP_409_CONFLICT,
        )
    except (DocumentStoreError, BlobStoreError) as e:
        logger.error("Event creation failed: %s", e)
        return JSONResponse(
            {"message": "Event Creation Failed", "error": str(e) or "Unknown"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {"message": "Event Created Successfully", "event": event.model_dump(mode="json")},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
async def list_events(store: DocumentStore = Depends(get_store)) -> JSONResponse:
    """List all events, newest first."""
    try:
        events = await EventService.list_events(store=store)
    except DocumentStoreError as e:
        logger.error("Failed to retrieve events: %s", e)
        return JSONResponse(
            {"message": "Failed to Retrieve Events", "error": str(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse({"message": "Events Retrieved Successfully", "events": _dump(events)})


@router.get("/{slug}")
async def get_event(slug: str, store: DocumentStore = Depends(get_store)) -> JSONResponse:
    """Retrieve a single event by its slug.

    The slug is matched case-insensitively and ignoring surrounding
    whitespace.  Store failures are reported as configuration or
    connection errors when the cause is recognisable.
    """
    try:
        event = await EventService.get_event_by_slug(slug, store=store)
    except ValueError as e:
        return JSONResponse(
            {"message": "Invalid slug parameter", "error": str(e)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except EventNotFoundError as e:
        return JSONResponse(
            {"message": "Event not found", "error": str(e)},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    except StoreConfigurationError:
        logger.exception("Database configuration error")
        return JSONResponse(
            {"message": "Database configuration error", "error": "DATABASE_URL is not set or invalid."},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except StoreConnectionError:
        logger.exception("Database connection error")
        return JSONResponse(
            {
                "message": "Database connection error",
                "error": "Unable to connect to the database. Please try again later.",
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except DocumentStoreError as e:
        logger.exception("Failed to retrieve event '%s'", slug)
        return JSONResponse(
            {"message": "Failed to retrieve event", "error": str(e) or "Unknown error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse({"message": "Event retrieved successfully", "event": event.model_dump(mode="json")})


@router.get("/{slug}/similar")
async def list_similar_events(slug: str, store: DocumentStore = Depends(get_store)) -> JSONResponse:
    """Events sharing a tag with ``slug``.  Always 200; empty on failure."""
    events = await EventService.get_similar_events_by_slug(slug, store=store)
    return JSONResponse({"events": _dump(events)})
