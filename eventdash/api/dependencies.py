"""
FastAPI dependencies — DataStore access, event filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query, Request

from eventdash.data.store import DataStore
from eventdash.data.schemas import EventFilter


def get_store(request: Request) -> DataStore:
    """The DataStore built by create_app (loaded lazily on first query)."""
    store: DataStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(503, "Server not initialized yet")
    return store


def parse_event_filter(
    event_type: str = Query("all", description="all|technical|non-tech"),
    sort_by: Optional[str] = Query(None, description="registrations|name (default: source order)"),
) -> EventFilter:
    """Parse event-list query parameters into an EventFilter."""
    try:
        return EventFilter(event_type=event_type, sort_by=sort_by)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
