import asyncio
import json
import runpy
from pathlib import Path

import pytest
from aiohttp import web

from eventdash.data import loader
from eventdash.data.loader import FileFetcher, HttpFetcher, LoadError, fetch_collections
from eventdash.data.store import DataStore

from conftest import SOURCES

SCRIPTS = Path(__file__).resolve().parent.parent / "scripts"


def _write(dir_: Path, name: str, payload) -> None:
    (dir_ / name).write_text(json.dumps(payload), encoding="utf-8")


def test_file_fetcher_reads_collections(tmp_path):
    _write(tmp_path, "events.json", [{"id": "e1"}])
    _write(tmp_path, "users.json", [])
    _write(tmp_path, "registrations.json", [{"eventId": "e1", "userId": "u1"}])

    raw = asyncio.run(fetch_collections(FileFetcher(tmp_path), SOURCES))
    assert raw.events == [{"id": "e1"}]
    assert raw.users == []
    assert raw.registrations == [{"eventId": "e1", "userId": "u1"}]


def test_missing_file_is_load_error(tmp_path):
    _write(tmp_path, "events.json", [])
    _write(tmp_path, "users.json", [])

    with pytest.raises(LoadError) as excinfo:
        asyncio.run(fetch_collections(FileFetcher(tmp_path), SOURCES))
    assert excinfo.value.source == "registrations.json"


def test_unparsable_file_is_load_error(tmp_path):
    _write(tmp_path, "events.json", [])
    _write(tmp_path, "users.json", [])
    (tmp_path / "registrations.json").write_text("[{not json", encoding="utf-8")

    with pytest.raises(LoadError):
        asyncio.run(fetch_collections(FileFetcher(tmp_path), SOURCES))


def test_make_fetcher_follows_config(monkeypatch, tmp_path):
    monkeypatch.setattr(loader, "SOURCE_BASE_URL", "")
    monkeypatch.setattr(loader, "DATA_FOLDER", tmp_path)
    fetcher = loader.make_fetcher()
    assert isinstance(fetcher, FileFetcher)
    assert fetcher.base_dir == tmp_path

    monkeypatch.setattr(loader, "SOURCE_BASE_URL", "https://static.example.com/data")
    assert isinstance(loader.make_fetcher(), HttpFetcher)


def test_http_fetcher_against_local_server():
    payloads = {
        "events.json": [{"id": "e1", "title": "Hack"}],
        "users.json": [{"_id": {"$oid": "u1"}, "username": "alice"}],
        "registrations.json": [{"eventId": "e1", "type": "individual", "userId": {"$oid": "u1"}}],
    }

    async def handler(request):
        name = request.match_info["name"]
        if name not in payloads:
            raise web.HTTPNotFound()
        # served as text/plain, like many static hosts
        return web.Response(text=json.dumps(payloads[name]), content_type="text/plain")

    async def scenario():
        app = web.Application()
        app.router.add_get("/data/{name}", handler)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", 0)
        await site.start()
        port = runner.addresses[0][1]

        fetcher = HttpFetcher(f"http://127.0.0.1:{port}/data/")
        try:
            store = DataStore(fetcher, SOURCES)
            (event,) = await store.get_events()
            (entry,) = await store.get_event_registrations("e1")

            with pytest.raises(LoadError):
                await fetch_collections(fetcher, loader.SourceNames(events="missing.json"))
            return event, entry
        finally:
            await fetcher.close()
            await runner.cleanup()

    event, entry = asyncio.run(scenario())
    assert event.registration_count == 1
    assert entry.user_details[0].name == "alice"


def test_sample_data_script_output_loads(tmp_path):
    script = runpy.run_path(str(SCRIPTS / "make_sample_data.py"))
    script["write_sample"](tmp_path, n_users=20, seed=3)

    store = DataStore(FileFetcher(tmp_path), SOURCES)
    stats = asyncio.run(store.get_stats())
    assert stats.total_events == 6
    assert stats.total_registrations == 20
    assert stats.individual_registrations + stats.group_registrations == 20
