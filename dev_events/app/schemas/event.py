"""
Pydantic models for event data.

``EventBase`` carries the attributes an organizer submits, ``EventCreate``
adds the slug and image URL that make up a complete document, and
``EventRead`` is what the store hands back (with ``id`` and timestamps).
The slug helpers live here as well because normalization has to be the
same at write time and at lookup time.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def normalize_slug(slug: str) -> str:
    """Lowercase and trim a slug the same way it is stored."""
    return slug.lower().strip()


def slugify(title: str) -> str:
    """Derive a URL-safe slug from an event title."""
    value = normalize_slug(title)
    value = re.sub(r"[^a-z0-9\s_-]", "", value)
    value = re.sub(r"[\s_-]+", "-", value)
    return value.strip("-")


class EventBase(BaseModel):
    title: str = Field(..., max_length=100, examples=["React Summit 2025"])
    description: str = Field(..., max_length=1000)
    overview: str = Field(..., max_length=500)
    venue: str = Field(..., examples=["Amsterdam RAI"])
    location: str = Field(..., examples=["Amsterdam, Netherlands"])
    date: str = Field(..., examples=["2025-06-13"])
    time: str = Field(..., examples=["09:00"])
    mode: str = Field(..., examples=["hybrid"])
    audience: str
    agenda: List[str] = Field(..., min_length=1)
    organizer: str
    tags: List[str] = Field(..., min_length=1, examples=[["react", "javascript"]])

    @field_validator(
        "title", "description", "overview", "venue", "location", "date",
        "time", "mode", "audience", "organizer",
        mode="before",
    )
    @classmethod
    def _strip_required(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must not be empty")
        return value

    @field_validator("agenda")
    @classmethod
    def _clean_agenda(cls, value: List[str]) -> List[str]:
        items = [item.strip() for item in value if item and item.strip()]
        if not items:
            raise ValueError("agenda must contain at least one item")
        return items

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        # Tags behave as a set; keep the first occurrence of each.
        seen: List[str] = []
        for tag in value:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        if not seen:
            raise ValueError("tags must contain at least one item")
        return seen


class EventCreate(EventBase):
    """A complete event document as written to the store.

    ``slug`` is optional on input; when absent it is derived from the
    title.  Either way it is stored normalized.
    """

    slug: Optional[str] = None
    image: str = Field(..., examples=["https://bucket.s3.amazonaws.com/events/abc.png"])

    @model_validator(mode="after")
    def _fill_slug(self) -> "EventCreate":
        slug = normalize_slug(self.slug) if self.slug else slugify(self.title)
        if not slug:
            raise ValueError("slug could not be derived from the title")
        self.slug = slug
        return self


class EventRead(EventBase):
    """Schema for reading an event from the API."""

    id: int
    slug: str
    image: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
