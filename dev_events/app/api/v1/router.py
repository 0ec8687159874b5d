"""
Router aggregator for the JSON API.

Each endpoint module defines its own ``APIRouter``; this module
mounts them under their resource prefixes.  The result is included by
``main.create_app`` under ``/api``.
"""

from fastapi import APIRouter

from .endpoints import bookings, events


router = APIRouter()

router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
