"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    events: int
    users: int
    registrations: int
    loadedAt: Optional[str] = None


class StatsResponse(BaseModel):
    totalEvents: int
    totalRegistrations: int
    individualRegistrations: int
    groupRegistrations: int


class ReloadResponse(BaseModel):
    status: str
    events: int
    users: int
    registrations: int
