"""
Dashboard Report — KPI summary, per-type breakdown, event table, registration roster.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path

from eventdash.config import UNKNOWN_USER_NAME
from eventdash.data.store import DataStore
from eventdash.data.schemas import EventFilter, RegistrationDetails, RegistrationType
from eventdash.analytics.common import sanitize_for_json
from eventdash.analytics.dashboard import dashboard_overview, filter_and_sort_events
from eventdash.excel.writer import ExcelWriter


METRIC_LEGEND = [
    ("Registrations", "One per registration record, individual or group."),
    ("Participants", "1 per individual registration; number of members per group registration."),
    ("Unknown User", "A registration references a user id missing from the users export."),
    ("Unmatched", "Registrations whose event is missing from the events export count toward "
                  "total registrations but not toward any event."),
]

EVENT_COLS = [
    ("title", "text", "Event"),
    ("eventType", "text", "Type"),
    ("playerMode", "text", "Mode"),
    ("teamsize", "text", "Team Size"),
    ("subCategory", "text", "Category"),
    ("registrationCount", "number", "Registrations"),
    ("totalParticipants", "number", "Participants"),
]

BREAKDOWN_COLS = [
    ("eventType", "text", "Event Type"),
    ("events", "number", "Events"),
    ("registrations", "number", "Registrations"),
    ("participants", "number", "Participants"),
    ("avg_participants", "decimal", "Avg per Registration"),
    ("registration_share", "percent", "Share"),
]

ROSTER_COLS = [
    ("event", "text", "Event"),
    ("type", "text", "Registration"),
    ("group_name", "text", "Group"),
    ("role", "text", "Role"),
    ("name", "text", "Name"),
    ("username", "text", "Username"),
    ("email", "text", "Email"),
    ("phone", "text", "Phone"),
    ("registration_date", "text", "Registered"),
]


def _roster_rows(event_title: str, details: list[RegistrationDetails]) -> list[dict]:
    """One row per participant; the first member of a group is its leader."""
    rows = []
    for item in details:
        reg = item.registration
        is_group = reg.type is RegistrationType.GROUP
        for i, user in enumerate(item.user_details):
            if is_group:
                role = "Leader" if i == 0 else "Member"
            else:
                role = "Individual"
            rows.append({
                "event": event_title,
                "type": reg.type.value,
                "group_name": getattr(reg, "group_name", None) or "",
                "role": role,
                "name": user.name,
                "username": user.username or "",
                "email": user.email or "",
                "phone": user.phone or "",
                "registration_date": str(reg.registration_date or ""),
            })
    return rows


async def generate_json(store: DataStore, event_filter: EventFilter | None = None) -> dict:
    flt = event_filter or EventFilter(sort_by="registrations")
    events = await store.get_events()
    stats = await store.get_stats()
    registrations = await store.get_registrations()

    listed = filter_and_sort_events(events, flt.event_type, flt.sort_by)
    roster: list[dict] = []
    for event in listed:
        details = await store.get_event_registrations(event["id"])
        roster.extend(_roster_rows(event["title"] or event["id"], details))

    return sanitize_for_json({
        "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds"),
        "filter": flt.label,
        "overview": dashboard_overview(events, stats, registrations),
        "events": listed,
        "roster": roster,
    })


async def generate_excel(
    store: DataStore,
    output_path: str | Path,
    event_filter: EventFilter | None = None,
) -> Path:
    data = await generate_json(store, event_filter)
    overview = data["overview"]
    stats = overview["stats"]
    ew = ExcelWriter()

    # Summary
    ws = ew.add_sheet("Summary")
    row = ew.write_title(ws, "EVENT REGISTRATIONS", f"Dashboard Report  |  {data['filter']}  |  {data['generated_at']}")
    row = ew.write_kpi_row(ws, row, [
        (stats["totalEvents"], "Total Events", "number"),
        (stats["totalRegistrations"], "Total Registrations", "number"),
        (stats["individualRegistrations"], "Individual", "number"),
        (stats["groupRegistrations"], "Group", "number"),
        (overview["total_participants"], "Participants", "number"),
    ])

    row = ew.write_section(ws, row, "BY EVENT TYPE")
    row = ew.write_table(ws, row, BREAKDOWN_COLS, overview["by_event_type"], show_total=True, freeze=False)

    if overview["insights"]:
        row = ew.write_section(ws, row + 1, "KEY INSIGHTS")
        row = ew.write_insights(ws, row, overview["insights"])

    row = ew.write_section(ws, row + 1, "DEFINITIONS")
    ew.write_legend(ws, row, METRIC_LEGEND)

    # Events
    ws_events = ew.add_sheet("Events")
    ew.write_table(ws_events, 1, EVENT_COLS, data["events"], show_total=True,
                   highlight_fn=lambda i, r: "warning" if r.get("registrationCount", 0) == 0 else None)

    # Roster
    ws_roster = ew.add_sheet("Registrations")
    ew.write_table(ws_roster, 1, ROSTER_COLS, data["roster"],
                   highlight_fn=lambda i, r: "leader" if r["role"] == "Leader"
                   else ("warning" if r["name"] == UNKNOWN_USER_NAME else None))

    # Timeline
    if overview["timeline"]:
        ws_tl = ew.add_sheet("Timeline")
        ew.write_table(ws_tl, 1, [
            ("date", "text", "Date"),
            ("registrations", "number", "Registrations"),
            ("participants", "number", "Participants"),
            ("cumulative", "number", "Cumulative"),
        ], overview["timeline"])

    return ew.save(output_path)
