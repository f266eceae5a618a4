"""
Source fetching — local JSON files or HTTP, three collections fetched concurrently.
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import aiohttp

from eventdash.config import (
    DATA_FOLDER, SOURCE_BASE_URL, FETCH_TIMEOUT,
    EVENTS_SOURCE, USERS_SOURCE, REGISTRATIONS_SOURCE,
)


class LoadError(Exception):
    """A source could not be fetched, parsed, or normalized."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


# A fetcher takes a source name (e.g. "events.json") and returns parsed JSON.
Fetcher = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class SourceNames:
    events: str = EVENTS_SOURCE
    users: str = USERS_SOURCE
    registrations: str = REGISTRATIONS_SOURCE


@dataclass(frozen=True)
class RawCollections:
    events: list[dict]
    users: list[dict]
    registrations: list[dict]


# ---------------------------------------------------------------------------
# Fetchers
# ---------------------------------------------------------------------------

class FileFetcher:
    """Reads JSON exports from a local directory."""

    def __init__(self, base_dir: Path = DATA_FOLDER) -> None:
        self.base_dir = Path(base_dir)

    def _read(self, name: str) -> Any:
        path = self.base_dir / name
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    async def __call__(self, name: str) -> Any:
        return await asyncio.to_thread(self._read, name)

    def __repr__(self) -> str:
        return f"FileFetcher({str(self.base_dir)!r})"


class HttpFetcher:
    """Fetches JSON exports from a static file host."""

    def __init__(self, base_url: str, timeout: float = FETCH_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def __call__(self, name: str) -> Any:
        session = await self._ensure_session()
        async with session.get(f"{self.base_url}/{name}") as resp:
            resp.raise_for_status()
            # Static hosts often serve .json as text/plain
            return await resp.json(content_type=None)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def __repr__(self) -> str:
        return f"HttpFetcher({self.base_url!r})"


def make_fetcher() -> Fetcher:
    """HTTP when EVENTDASH_SOURCE_URL is set, local files otherwise."""
    if SOURCE_BASE_URL:
        return HttpFetcher(SOURCE_BASE_URL)
    return FileFetcher(DATA_FOLDER)


# ---------------------------------------------------------------------------
# Collection loading
# ---------------------------------------------------------------------------

async def fetch_collection(fetcher: Fetcher, name: str) -> list[dict]:
    """Fetch one source and check it is a JSON array of objects."""
    try:
        data = await fetcher(name)
    except Exception as exc:
        raise LoadError(f"Failed to fetch {name}: {exc}", source=name) from exc

    if not isinstance(data, list):
        raise LoadError(
            f"{name}: expected a JSON array, got {type(data).__name__}", source=name,
        )
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise LoadError(
                f"{name}: record {i} is {type(record).__name__}, expected an object", source=name,
            )
    return data


async def fetch_collections(fetcher: Fetcher, sources: SourceNames | None = None) -> RawCollections:
    """Fetch all three sources concurrently; the first failure aborts the lot."""
    sources = sources or SourceNames()
    events, users, registrations = await asyncio.gather(
        fetch_collection(fetcher, sources.events),
        fetch_collection(fetcher, sources.users),
        fetch_collection(fetcher, sources.registrations),
    )
    return RawCollections(events=events, users=users, registrations=registrations)
