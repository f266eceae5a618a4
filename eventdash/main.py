"""
Event Dashboard — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventdash.config import DATA_FOLDER, SOURCE_BASE_URL, LOAD_ERROR_MESSAGE
from eventdash.data.loader import LoadError
from eventdash.data.store import DataStore
from eventdash.api.router_meta import router as meta_router
from eventdash.api.router_dashboard import router as dashboard_router
from eventdash.api.router_reports import router as reports_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the DataStore (unless one was injected) and try a first load."""
    if app.state.store is None:
        print(f"  Source = {SOURCE_BASE_URL or DATA_FOLDER}")
        app.state.store = DataStore()
    store: DataStore = app.state.store

    try:
        await store.load()
        counts = store.counts()
        print(f"\nEvent Dashboard ready — {counts['events']:,} events, "
              f"{counts['registrations']:,} registrations\n")
    except LoadError as exc:
        # Queries retry the load on demand
        print(f"\nEvent Dashboard started without data — {exc}\n")

    yield

    close = getattr(store.fetcher, "close", None)
    if close is not None:
        await close()


async def load_error_handler(request: Request, exc: LoadError) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"detail": LOAD_ERROR_MESSAGE, "error": str(exc), "source": exc.source},
    )


def create_app(store: DataStore | None = None) -> FastAPI:
    app = FastAPI(
        title="Event Dashboard API",
        description="Event registration statistics — events, participants, rosters",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LoadError, load_error_handler)

    app.include_router(meta_router)
    app.include_router(dashboard_router)
    app.include_router(reports_router)
    return app


app = create_app()
