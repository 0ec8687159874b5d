"""
Business logic for bookings.

A booking records that an email address signed up for an event.  The
flow reports only success or failure to its caller; the reason for a
failure is logged and not passed on.
"""

import logging

from ..core.db import DocumentStore
from ..schemas.booking import BookingResult


logger = logging.getLogger(__name__)


class BookingService:
    """Service for creating and counting bookings."""

    @classmethod
    async def create_booking(
        cls, event_id: int, slug: str, email: str, *, store: DocumentStore
    ) -> BookingResult:
        """Create a booking for an event.

        ``event_id`` is not checked against the events collection.
        """
        try:
            booking = store.bookings.create({"event_id": event_id, "slug": slug, "email": email})
        except Exception:
            logger.exception("create booking failed for event %s (%s)", event_id, slug)
            return BookingResult(success=False)
        logger.info("Booking %s created for event %s", booking.id, booking.slug)
        return BookingResult(success=True)

    @classmethod
    async def count_bookings(cls, slug: str, *, store: DocumentStore) -> int:
        """Number of bookings for ``slug``; 0 when the store fails."""
        try:
            return store.bookings.count(slug=slug)
        except Exception as exc:
            logger.error("Could not count bookings for '%s': %s", slug, exc)
            return 0
