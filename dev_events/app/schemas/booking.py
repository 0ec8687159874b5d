"""
Pydantic models for event bookings.

A booking links an attendee's email address to an event, recorded
both by the event's id and by its slug.  The event reference is taken
on trust: nothing checks that ``event_id`` exists.
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .event import normalize_slug


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class BookingCreate(BaseModel):
    event_id: int = Field(..., examples=[1])
    slug: str = Field(..., examples=["react-summit-2025"])
    email: str = Field(..., examples=["ada@example.com"])

    @field_validator("slug")
    @classmethod
    def _normalize_slug(cls, value: str) -> str:
        value = normalize_slug(value)
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please provide a valid email address")
        return value


class BookingRead(BookingCreate):
    id: int
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class BookingResult(BaseModel):
    """Outcome of a booking attempt.  Failures carry no detail."""

    success: bool
