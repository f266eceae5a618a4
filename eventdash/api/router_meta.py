"""
Meta endpoints: health, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from eventdash.data.loader import LoadError
from eventdash.data.store import DataStore
from eventdash.api.dependencies import get_store
from eventdash.api.response_models import HealthResponse, ReloadResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store)):
    counts = store.counts()
    return HealthResponse(
        status="ok" if store.is_loaded else "not_loaded",
        loaded=store.is_loaded,
        events=counts["events"],
        users=counts["users"],
        registrations=counts["registrations"],
        loadedAt=store.loaded_at.isoformat() if store.loaded_at else None,
    )


@router.post("/reload", response_model=ReloadResponse)
async def reload_data(store: DataStore = Depends(get_store)):
    """Re-fetch all three exports. Previous data is kept if the fetch fails."""
    try:
        await store.reload()
    except LoadError as exc:
        raise HTTPException(503, f"Reload failed: {exc}")
    print(f"  Reload complete — {store.counts()}")
    return ReloadResponse(status="reloaded", **store.counts())
