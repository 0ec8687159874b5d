"""
Booking endpoints.

The response only says whether the booking was recorded.  Invalid
input (including a body that is not a JSON object) is reported the
same way as a store failure, as ``{"success": false}`` with status 200.
"""

import logging

from fastapi import APIRouter, Depends, Request

from dev_events.app.core.db import DocumentStore, get_store
from dev_events.app.schemas.booking import BookingResult
from dev_events.app.services.booking_service import BookingService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=BookingResult)
async def create_booking(
    request: Request,
    store: DocumentStore = Depends(get_store),
) -> BookingResult:
    """Book a spot on an event.

    Expects a JSON object with ``event_id``, ``slug`` and ``email``.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.warning("Rejected booking with unreadable body: %s", exc)
        return BookingResult(success=False)
    if not isinstance(payload, dict):
        logger.warning("Rejected booking whose body is not a JSON object")
        return BookingResult(success=False)
    return await BookingService.create_booking(
        payload.get("event_id"),
        payload.get("slug"),
        payload.get("email"),
        store=store,
    )
