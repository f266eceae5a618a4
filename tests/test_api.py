import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from eventdash.api import router_reports
from eventdash.data.store import DataStore
from eventdash.main import create_app

from conftest import SOURCES, FakeFetcher


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as c:
        yield c


@pytest.fixture
def broken_client(sample_sources):
    sample_sources["events.json"] = OSError("upstream down")
    store = DataStore(FakeFetcher(sample_sources), SOURCES)
    with TestClient(create_app(store=store)) as c:
        yield c


def test_health(client):
    data = client.get("/api/health").json()
    assert data["status"] == "ok"
    assert data["loaded"] is True
    assert (data["events"], data["users"], data["registrations"]) == (3, 3, 4)
    assert data["loadedAt"]


def test_events_default_order(client):
    resp = client.get("/api/events")
    assert resp.status_code == 200
    events = resp.json()
    assert [e["id"] for e in events] == ["e1", "e2", "e3"]
    assert events[0]["registrationCount"] == 2
    assert events[0]["totalParticipants"] == 4
    assert events[0]["teamsize"] == "2-4"


def test_events_filtered_and_sorted(client):
    resp = client.get("/api/events", params={"event_type": "technical", "sort_by": "registrations"})
    assert [e["id"] for e in resp.json()] == ["e1", "e3"]


@pytest.mark.parametrize("params", [{"event_type": "sports"}, {"sort_by": "date"}])
def test_bad_filter_is_400(client, params):
    assert client.get("/api/events", params=params).status_code == 400


def test_event_detail(client):
    assert client.get("/api/events/e2").json()["title"] == "Quiz"
    assert client.get("/api/events/nope").status_code == 404


def test_event_registrations(client):
    regs = client.get("/api/events/e1/registrations").json()
    assert [r["_id"] for r in regs] == ["r1", "r2"]
    group = regs[0]
    assert group["type"] == "group"
    assert group["userIds"] == ["u1", "u2", "u9"]
    assert group["userDetails"][0] == {
        "_id": "u1", "name": "alice", "username": "alice",
        "email": "alice@example.com", "phone": "555-0101",
    }
    assert group["userDetails"][2] == {"_id": "u9", "name": "Unknown User"}


def test_registrations_for_unknown_event_is_empty(client):
    resp = client.get("/api/events/nope/registrations")
    assert resp.status_code == 200
    assert resp.json() == []


def test_stats(client):
    assert client.get("/api/stats").json() == {
        "totalEvents": 3,
        "totalRegistrations": 4,
        "individualRegistrations": 3,
        "groupRegistrations": 1,
    }


def test_overview(client):
    data = client.get("/api/overview").json()
    assert data["stats"]["totalEvents"] == 3
    assert data["top_events"][0]["id"] == "e1"


def test_reload(client, fetcher):
    fetcher.sources["registrations.json"] = []
    resp = client.post("/api/reload")
    assert resp.status_code == 200
    assert resp.json() == {"status": "reloaded", "events": 3, "users": 3, "registrations": 0}
    assert client.get("/api/stats").json()["totalRegistrations"] == 0


def test_failed_reload_keeps_data(client, fetcher):
    fetcher.sources["users.json"] = OSError("gone")
    resp = client.post("/api/reload")
    assert resp.status_code == 503
    assert resp.json()["detail"].startswith("Reload failed")
    assert client.get("/api/stats").json()["totalRegistrations"] == 4


def test_load_failure_is_503(broken_client):
    assert broken_client.get("/api/health").json()["status"] == "not_loaded"

    resp = broken_client.get("/api/events")
    assert resp.status_code == 503
    body = resp.json()
    assert body["source"] == "events.json"
    assert "Failed to load data" in body["detail"]


def test_report_json(client):
    data = client.get("/api/reports/dashboard", params={"event_type": "technical"}).json()
    assert [e["id"] for e in data["events"]] == ["e1", "e3"]
    assert len(data["roster"]) == 5


def test_report_excel(client, monkeypatch, tmp_path):
    monkeypatch.setattr(router_reports, "REPORTS_FOLDER", tmp_path)
    resp = client.get("/api/reports/dashboard/excel")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == router_reports.XLSX_MEDIA_TYPE

    saved = tmp_path / "Dashboard_Report.xlsx"
    assert saved.exists()
    assert "Summary" in load_workbook(saved).sheetnames
