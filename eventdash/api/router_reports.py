"""
Report endpoints — dashboard report as JSON or Excel download.
"""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse

from eventdash.config import REPORTS_FOLDER
from eventdash.data.store import DataStore
from eventdash.data.schemas import EventFilter
from eventdash.api.dependencies import get_store, parse_event_filter
from eventdash.reports import dashboard_report

router = APIRouter(prefix="/api/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _output_path(name: str) -> Path:
    REPORTS_FOLDER.mkdir(parents=True, exist_ok=True)
    return REPORTS_FOLDER / name


@router.get("/dashboard")
async def dashboard_json(
    store: DataStore = Depends(get_store),
    flt: EventFilter = Depends(parse_event_filter),
):
    return JSONResponse(content=await dashboard_report.generate_json(store, flt))


@router.get("/dashboard/excel")
async def dashboard_excel(
    store: DataStore = Depends(get_store),
    flt: EventFilter = Depends(parse_event_filter),
):
    path = await dashboard_report.generate_excel(store, _output_path("Dashboard_Report.xlsx"), flt)
    return FileResponse(path=str(path), filename=path.name, media_type=XLSX_MEDIA_TYPE)
