"""
Dashboard analytics — event list filtering, breakdowns, timeline, insights.

All functions take already-loaded records (from DataStore queries) and
return JSON-ready structures.
"""
from __future__ import annotations

from typing import Any, Optional

import pandas as pd

from eventdash.data.schemas import Event, EventFilter, Registration, Stats
from eventdash.analytics.common import safe_divide, pct_of_total, sanitize_for_json


EVENT_COLUMNS = [
    "id", "title", "eventType", "playerMode", "teamsize", "subCategory",
    "registrationCount", "totalParticipants",
]

UNSPECIFIED = "unspecified"


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

def events_frame(events: list[Event]) -> pd.DataFrame:
    """One row per event, index = position in source order."""
    rows = [{col: e.to_dict().get(col) for col in EVENT_COLUMNS} for e in events]
    df = pd.DataFrame(rows, columns=EVENT_COLUMNS)
    df["registrationCount"] = df["registrationCount"].fillna(0).astype(int)
    df["totalParticipants"] = df["totalParticipants"].fillna(0).astype(int)
    return df


def _parse_registration_date(value: Any) -> pd.Timestamp:
    """Registration dates arrive as ISO strings or epoch milliseconds."""
    if value is None or isinstance(value, bool):
        return pd.NaT
    try:
        if isinstance(value, (int, float)) or (isinstance(value, str) and value.strip().isdigit()):
            return pd.to_datetime(int(value), unit="ms", utc=True, errors="coerce")
        return pd.to_datetime(str(value), utc=True, errors="coerce")
    except (ValueError, OverflowError):
        return pd.NaT


def registrations_frame(registrations: list[Registration]) -> pd.DataFrame:
    df = pd.DataFrame({
        "eventId": [r.event_id for r in registrations],
        "type": [r.type.value for r in registrations],
        "participants": [r.participant_count for r in registrations],
        "registeredAt": [_parse_registration_date(r.registration_date) for r in registrations],
    })
    df["registeredAt"] = pd.to_datetime(df["registeredAt"], utc=True)
    return df


# ---------------------------------------------------------------------------
# Event list
# ---------------------------------------------------------------------------

def filter_and_sort_events(
    events: list[Event],
    event_type: str = "all",
    sort_by: Optional[str] = None,
) -> list[dict]:
    """Filter by eventType ("all" keeps everything) and optionally sort.

    sort_by="registrations" orders by registrationCount descending,
    sort_by="name" by title ascending (case-insensitive). Ties keep
    source order. Raises ValueError on unknown filter values.
    """
    flt = EventFilter(event_type=event_type, sort_by=sort_by)
    df = events_frame(events)

    if flt.event_type != "all":
        df = df[df["eventType"] == flt.event_type]

    if flt.sort_by == "registrations":
        df = df.sort_values("registrationCount", ascending=False, kind="mergesort")
    elif flt.sort_by == "name":
        df = df.sort_values(
            "title", kind="mergesort",
            key=lambda s: s.fillna("").astype(str).str.lower(),
        )

    return [events[i].to_dict() for i in df.index]


def top_events(events: list[Event], n: int = 5) -> list[dict]:
    """Top-n events by registration count (events with none are left out)."""
    ranked = filter_and_sort_events(events, sort_by="registrations")
    return [e for e in ranked if e["registrationCount"] > 0][:n]


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------

def _breakdown(df: pd.DataFrame, column: str) -> list[dict]:
    if df.empty:
        return []

    grouped = df.assign(**{column: df[column].fillna(UNSPECIFIED)}).groupby(column).agg(
        events=("id", "count"),
        registrations=("registrationCount", "sum"),
        participants=("totalParticipants", "sum"),
    ).reset_index()

    total_regs = int(grouped["registrations"].sum())
    rows = []
    for _, r in grouped.iterrows():
        regs = int(r["registrations"])
        participants = int(r["participants"])
        rows.append({
            column: str(r[column]),
            "events": int(r["events"]),
            "registrations": regs,
            "participants": participants,
            "avg_participants": round(safe_divide(participants, regs), 2),
            "registration_share": round(pct_of_total(regs, total_regs), 1),
        })
    return sorted(rows, key=lambda x: x["registrations"], reverse=True)


def event_type_breakdown(events: list[Event]) -> list[dict]:
    """Events, registrations, and participants per eventType."""
    return _breakdown(events_frame(events), "eventType")


def player_mode_breakdown(events: list[Event]) -> list[dict]:
    """Events, registrations, and participants per playerMode."""
    return _breakdown(events_frame(events), "playerMode")


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

def registration_timeline(registrations: list[Registration]) -> list[dict]:
    """Registrations per calendar day (UTC) with a running total.

    Registrations with a missing or unparsable date are left out.
    """
    df = registrations_frame(registrations).dropna(subset=["registeredAt"])
    if df.empty:
        return []

    df["day"] = df["registeredAt"].dt.strftime("%Y-%m-%d")
    daily = df.groupby("day").agg(
        registrations=("type", "count"),
        participants=("participants", "sum"),
    ).reset_index().sort_values("day")
    daily["cumulative"] = daily["registrations"].cumsum()

    return [
        {
            "date": r["day"],
            "registrations": int(r["registrations"]),
            "participants": int(r["participants"]),
            "cumulative": int(r["cumulative"]),
        }
        for _, r in daily.iterrows()
    ]


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

def _event_label(title: Any, event_id: str) -> str:
    """Title for display, falling back to the id for untitled events."""
    return str(title) if title not in (None, "") else str(event_id)


def _generate_insights(events: list[Event], stats: Stats) -> list[dict]:
    """Auto-generate dashboard insights from the loaded data."""
    insights = []
    counted = sum(e.registration_count for e in events)
    orphans = stats.total_registrations - counted

    top = top_events(events, n=1)
    if top:
        best = top[0]
        label = _event_label(best["title"], best["id"])
        insights.append({
            "type": "success",
            "title": "Most Popular Event",
            "detail": f"{label} leads with {best['registrationCount']} registrations "
                      f"({best['totalParticipants']} participants).",
        })

    empty = [_event_label(e.title, e.id) for e in events if e.registration_count == 0]
    if empty:
        insights.append({
            "type": "warning",
            "title": "Events Without Registrations",
            "detail": f"{len(empty)} event(s) have no registrations yet: {', '.join(empty[:5])}"
                      + (" ..." if len(empty) > 5 else ""),
        })

    if orphans > 0:
        insights.append({
            "type": "info",
            "title": "Unmatched Registrations",
            "detail": f"{orphans} registration(s) reference events missing from the export "
                      "and are not counted against any event.",
        })

    group_share = pct_of_total(stats.group_registrations, stats.total_registrations)
    if stats.total_registrations and group_share >= 50:
        insights.append({
            "type": "info",
            "title": "Team-Heavy Turnout",
            "detail": f"{group_share:.1f}% of registrations are group entries.",
        })

    return insights


def dashboard_overview(
    events: list[Event],
    stats: Stats,
    registrations: list[Registration],
) -> dict:
    """Everything the dashboard landing page shows, in one payload."""
    participants = sum(e.total_participants for e in events)
    return sanitize_for_json({
        "stats": stats.to_dict(),
        "total_participants": participants,
        "avg_registrations_per_event": round(safe_divide(stats.total_registrations, stats.total_events), 2),
        "by_event_type": event_type_breakdown(events),
        "by_player_mode": player_mode_breakdown(events),
        "top_events": top_events(events),
        "timeline": registration_timeline(registrations),
        "insights": _generate_insights(events, stats),
    })
