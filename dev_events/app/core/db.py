"""
SQLite-backed document store.

Events and bookings are kept in two SQLite tables and exposed through
small collection objects (``store.events``, ``store.bookings``) with
``find_one``/``find``/``create`` operations.  List-valued fields
(``tags``, ``agenda``) are stored as JSON text and queried with
SQLite's JSON functions.

The collections are the only place that talks to ``sqlite3``.  Driver
and validation errors are translated into the exception classes of
``core.errors`` here, so callers never see ``sqlite3`` or pydantic
exceptions.

The schema is created lazily on first use and the store object is
reused for the lifetime of the process (``get_store``).  Connections
are opened per operation, which keeps the store safe to use from
FastAPI's worker threads.
"""

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, ValidationError

from .config import settings
from .errors import (
    DocumentStoreError,
    FieldValidationError,
    StoreConfigurationError,
    StoreConnectionError,
    UniquenessConflictError,
)
from ..schemas.booking import BookingCreate, BookingRead
from ..schemas.event import EventCreate, EventRead, normalize_slug


logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    slug TEXT NOT NULL,
    description TEXT NOT NULL,
    overview TEXT NOT NULL,
    image TEXT NOT NULL,
    venue TEXT NOT NULL,
    location TEXT NOT NULL,
    date TEXT NOT NULL,
    time TEXT NOT NULL,
    mode TEXT NOT NULL,
    audience TEXT NOT NULL,
    agenda TEXT NOT NULL,
    organizer TEXT NOT NULL,
    tags TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_events_slug ON events (slug);

CREATE TABLE IF NOT EXISTS bookings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL,
    slug TEXT NOT NULL,
    email TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_bookings_slug ON bookings (slug);
"""

EVENT_COLUMNS = (
    "title", "slug", "description", "overview", "image", "venue", "location",
    "date", "time", "mode", "audience", "agenda", "organizer", "tags",
)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validation_errors(exc: ValidationError) -> List[Dict[str, str]]:
    errors = []
    for item in exc.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "document"
        errors.append({"field": field, "message": item.get("msg", "Invalid value")})
    return errors


def _validate(model: type, doc: Dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(doc)
    except ValidationError as exc:
        raise FieldValidationError(_validation_errors(exc)) from exc


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are used as is; relative paths are
    resolved against the project root.  An empty value is a
    configuration error.
    """
    if not database_url or not database_url.strip():
        raise StoreConfigurationError("DATABASE_URL is not set or invalid.")
    if database_url == ":memory:" or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class _Collection:
    def __init__(self, store: "DocumentStore") -> None:
        self._store = store


class EventCollection(_Collection):
    """Operations on the ``events`` table."""

    @staticmethod
    def _to_record(row: sqlite3.Row) -> EventRead:
        data = dict(row)
        data["tags"] = json.loads(data["tags"])
        data["agenda"] = json.loads(data["agenda"])
        return EventRead.model_validate(data)

    def find_one(self, *, slug: Optional[str] = None, id: Optional[int] = None) -> Optional[EventRead]:
        """Return the event matching ``slug`` or ``id``, or ``None``."""
        if slug is not None:
            query, params = "SELECT * FROM events WHERE slug = ?", (normalize_slug(slug),)
        elif id is not None:
            query, params = "SELECT * FROM events WHERE id = ?", (id,)
        else:
            raise ValueError("find_one requires a slug or an id")
        with self._store.cursor() as cursor:
            row = cursor.execute(query, params).fetchone()
        return self._to_record(row) if row else None

    def find(
        self,
        *,
        exclude_id: Optional[int] = None,
        tags_any: Optional[Iterable[str]] = None,
    ) -> List[EventRead]:
        """Return events, newest first (ties broken by slug).

        ``tags_any`` keeps only events sharing at least one tag with
        the given collection; an empty collection matches nothing.
        ``exclude_id`` drops the event with that id.
        """
        query = "SELECT * FROM events"
        params: list = []
        where_clauses: List[str] = []
        if exclude_id is not None:
            where_clauses.append("id != ?")
            params.append(exclude_id)
        if tags_any is not None:
            tags = list(dict.fromkeys(tags_any))
            if not tags:
                return []
            placeholders = ", ".join("?" for _ in tags)
            where_clauses.append(
                f"EXISTS (SELECT 1 FROM json_each(events.tags) WHERE json_each.value IN ({placeholders}))"
            )
            params.extend(tags)
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY created_at DESC, slug ASC"
        with self._store.cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [self._to_record(row) for row in rows]

    def create(self, doc: Dict[str, Any]) -> EventRead:
        """Validate and insert a new event document."""
        event = _validate(EventCreate, doc)
        values = event.model_dump()
        values["tags"] = json.dumps(values["tags"])
        values["agenda"] = json.dumps(values["agenda"])
        now = _utcnow()
        columns = EVENT_COLUMNS + ("created_at", "updated_at")
        params = tuple(values[name] for name in EVENT_COLUMNS) + (now, now)
        try:
            with self._store.cursor() as cursor:
                cursor.execute(
                    f"INSERT INTO events ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    params,
                )
                event_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            if "events.slug" in str(exc):
                raise UniquenessConflictError(
                    [{"field": "slug", "value": event.slug, "message": "slug must be unique"}]
                ) from exc
            raise DocumentStoreError(str(exc)) from exc
        created = self.find_one(id=event_id)
        if created is None:
            raise DocumentStoreError(f"Event {event_id} vanished after insert")
        return created

    def delete(self, id: int) -> bool:
        """Remove an event; ``False`` if no row had that id."""
        with self._store.cursor() as cursor:
            cursor.execute("DELETE FROM events WHERE id = ?", (id,))
            return cursor.rowcount > 0


class BookingCollection(_Collection):
    """Operations on the ``bookings`` table."""

    def create(self, doc: Dict[str, Any]) -> BookingRead:
        booking = _validate(BookingCreate, doc)
        now = _utcnow()
        try:
            with self._store.cursor() as cursor:
                cursor.execute(
                    "INSERT INTO bookings (event_id, slug, email, created_at) VALUES (?, ?, ?, ?)",
                    (booking.event_id, booking.slug, booking.email, now),
                )
                booking_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise DocumentStoreError(str(exc)) from exc
        return BookingRead(id=booking_id, created_at=now, **booking.model_dump())

    def count(self, *, slug: str) -> int:
        with self._store.cursor() as cursor:
            row = cursor.execute(
                "SELECT COUNT(*) AS total FROM bookings WHERE slug = ?",
                (normalize_slug(slug),),
            ).fetchone()
        return row["total"] if row else 0


class DocumentStore:
    """Handle on the events/bookings database.

    The schema is applied on the first operation; later operations reuse
    it.  Use ``get_store`` to obtain the process-wide instance.
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self._initialised = False
        self._init_lock = threading.Lock()
        # ``:memory:`` databases vanish with their connection, so keep one.
        self._memory_conn: Optional[sqlite3.Connection] = None
        self.events = EventCollection(self)
        self.bookings = BookingCollection(self)

    def _connect(self) -> sqlite3.Connection:
        path = resolve_database_path(self.database_url)
        if path == ":memory:":
            if self._memory_conn is None:
                self._memory_conn = sqlite3.connect(path, check_same_thread=False)
                self._memory_conn.row_factory = sqlite3.Row
            return self._memory_conn
        try:
            conn = sqlite3.connect(path)
        except sqlite3.OperationalError as exc:
            raise StoreConnectionError(f"Unable to connect to the database: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        if self._initialised:
            return
        with self._init_lock:
            if self._initialised:
                return
            conn = self._connect()
            try:
                conn.executescript(SCHEMA)
                conn.commit()
            except sqlite3.OperationalError as exc:
                raise StoreConnectionError(f"Unable to connect to the database: {exc}") from exc
            finally:
                if conn is not self._memory_conn:
                    conn.close()
            self._initialised = True
            logger.info("Document store ready at %s", self.database_url)

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, committing on success and closing the connection.

        ``sqlite3.OperationalError`` (locked or unreadable database) is
        reported as ``StoreConnectionError`` and any other non-integrity
        driver error as ``DocumentStoreError``.  ``IntegrityError`` is
        left to the collections, which know which index was violated.
        """
        self._ensure_schema()
        conn = self._connect()
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.OperationalError as exc:
            conn.rollback()
            raise StoreConnectionError(f"Unable to connect to the database: {exc}") from exc
        except sqlite3.Error as exc:
            conn.rollback()
            raise DocumentStoreError(str(exc)) from exc
        finally:
            if conn is not self._memory_conn:
                conn.close()


_store: Optional[DocumentStore] = None
_store_lock = threading.Lock()


def get_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide document store."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = DocumentStore(settings.database_url)
    return _store
