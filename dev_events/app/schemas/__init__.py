"""
Pydantic schema definitions for events and bookings.

The same models validate API payloads and the documents written to
the store.
"""
