"""
Dashboard endpoints — events, stats, per-event registrations, overview.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from eventdash.data.store import DataStore
from eventdash.data.schemas import EventFilter
from eventdash.api.dependencies import get_store, parse_event_filter
from eventdash.api.response_models import StatsResponse
from eventdash.analytics.common import sanitize_for_json
from eventdash.analytics.dashboard import dashboard_overview, filter_and_sort_events

router = APIRouter(prefix="/api", tags=["dashboard"])


def _safe_json(data) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


@router.get("/events")
async def list_events(
    store: DataStore = Depends(get_store),
    flt: EventFilter = Depends(parse_event_filter),
):
    """Events with registration and participant counts."""
    events = await store.get_events()
    return _safe_json(filter_and_sort_events(events, flt.event_type, flt.sort_by))


@router.get("/events/{event_id}")
async def get_event(event_id: str, store: DataStore = Depends(get_store)):
    event = await store.get_event(event_id)
    if event is None:
        raise HTTPException(404, f"Event not found: {event_id}")
    return _safe_json(event.to_dict())


@router.get("/events/{event_id}/registrations")
async def event_registrations(event_id: str, store: DataStore = Depends(get_store)):
    """Registrations for one event, each with resolved userDetails."""
    details = await store.get_event_registrations(event_id)
    return _safe_json([d.to_dict() for d in details])


@router.get("/stats", response_model=StatsResponse)
async def stats(store: DataStore = Depends(get_store)):
    return StatsResponse(**(await store.get_stats()).to_dict())


@router.get("/overview")
async def overview(store: DataStore = Depends(get_store)):
    """Stats, breakdowns, top events, timeline, and insights in one payload."""
    events = await store.get_events()
    stats = await store.get_stats()
    registrations = await store.get_registrations()
    return _safe_json(dashboard_overview(events, stats, registrations))
