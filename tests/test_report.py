import asyncio

from openpyxl import load_workbook

from eventdash.data.schemas import EventFilter
from eventdash.excel.writer import ExcelWriter
from eventdash.reports import dashboard_report


def test_json_report_roster_roles(store):
    data = asyncio.run(dashboard_report.generate_json(store))

    assert data["filter"] == EventFilter(sort_by="registrations").label
    assert [e["id"] for e in data["events"]] == ["e1", "e3", "e2"]

    roster = [(r["event"], r["role"], r["name"]) for r in data["roster"]]
    assert roster == [
        ("Hackathon", "Leader", "alice"),
        ("Hackathon", "Member", "Bob B"),
        ("Hackathon", "Member", "Unknown User"),
        ("Hackathon", "Individual", "Cara"),
        ("Code Sprint", "Individual", "alice"),
    ]
    assert data["roster"][0]["group_name"] == "Team A"
    assert data["roster"][0]["phone"] == "555-0101"


def test_json_report_respects_filter(store):
    flt = EventFilter(event_type="non-tech")
    data = asyncio.run(dashboard_report.generate_json(store, flt))
    assert [e["id"] for e in data["events"]] == ["e2"]
    assert data["roster"] == []
    # overview always covers the full dataset
    assert data["overview"]["stats"]["totalEvents"] == 3


def test_excel_report_sheets(store, tmp_path):
    path = asyncio.run(dashboard_report.generate_excel(store, tmp_path / "out" / "dash.xlsx"))
    assert path.exists()

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Events", "Registrations", "Timeline"]
    assert wb["Summary"]["A1"].value == "EVENT REGISTRATIONS"

    events = wb["Events"]
    headers = [c.value for c in events[1]]
    assert headers[:2] == ["Event", "Type"]
    assert events.cell(row=2, column=1).value == "Hackathon"

    roster = wb["Registrations"]
    names = [roster.cell(row=r, column=5).value for r in range(2, 7)]
    assert names == ["alice", "Bob B", "Unknown User", "Cara", "alice"]


def test_sheet_titles_are_sanitized():
    ew = ExcelWriter()
    ws = ew.add_sheet("Events: technical/non-tech [all] and a very long suffix")
    assert len(ws.title) <= 31
    assert not any(ch in ws.title for ch in "[]:*?/\\")
