"""
Server-rendered pages.

The homepage lists events and each event has a detail page with a
booking form and a "similar events" section.  Event data is fetched
through the JSON API (``DevEventsClient``).  When that fetch fails or
returns nothing the not-found page is shown.  Similar events and the
bookings count come from the services directly and quietly fall back
to nothing/zero.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from dev_events.app.core.db import DocumentStore, get_store
from dev_events.app.services.booking_service import BookingService
from dev_events.app.services.event_service import EventService
from dev_events.app.web.api_client import DevEventsClient, get_api_client


logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter()


def _not_found(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "not_found.html", {}, status_code=status.HTTP_404_NOT_FOUND
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, client: DevEventsClient = Depends(get_api_client)) -> HTMLResponse:
    # The API is served by this same process; keep the event loop free.
    events, error = await run_in_threadpool(client.list_events)
    if error:
        return _not_found(request)
    return templates.TemplateResponse(request, "index.html", {"events": events})


async def _render_event(
    request: Request,
    slug: str,
    *,
    store: DocumentStore,
    client: DevEventsClient,
    booking_success: Optional[bool] = None,
) -> HTMLResponse:
    event, error = await run_in_threadpool(client.get_event, slug)
    if error or not event:
        return _not_found(request)
    similar_events = await EventService.get_similar_events_by_slug(slug, store=store)
    bookings = await BookingService.count_bookings(slug, store=store)
    return templates.TemplateResponse(
        request,
        "event_detail.html",
        {
            "event": event,
            "similar_events": similar_events,
            "bookings": bookings,
            "booking_success": booking_success,
        },
    )


@router.get("/events/{slug}", response_class=HTMLResponse)
async def event_detail(
    request: Request,
    slug: str,
    store: DocumentStore = Depends(get_store),
    client: DevEventsClient = Depends(get_api_client),
) -> HTMLResponse:
    return await _render_event(request, slug, store=store, client=client)


@router.post("/events/{slug}/book", response_class=HTMLResponse)
async def book_event(
    request: Request,
    slug: str,
    email: str = Form(""),
    event_id: str = Form(""),
    store: DocumentStore = Depends(get_store),
    client: DevEventsClient = Depends(get_api_client),
) -> HTMLResponse:
    """Handle the booking form of the detail page."""
    result = await BookingService.create_booking(event_id, slug, email, store=store)
    return await _render_event(
        request, slug, store=store, client=client, booking_success=result.success
    )
