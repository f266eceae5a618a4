"""
DataStore — In-memory join of events, users, and registrations.

Loaded once per session, queried on every request. The composition root
(main.create_app or the CLI) builds one instance and hands it to consumers.
"""
from __future__ import annotations

import asyncio
import datetime as dt
from dataclasses import dataclass, field, replace
from typing import Optional

from eventdash.data.loader import (
    Fetcher,
    SourceNames,
    fetch_collections,
    make_fetcher,
)
from eventdash.data.normalize import (
    normalize_events,
    normalize_registrations,
    normalize_users,
)
from eventdash.data.schemas import (
    Event,
    Registration,
    RegistrationDetails,
    RegistrationType,
    Stats,
    User,
)


@dataclass(frozen=True)
class _Snapshot:
    """Everything one successful load produced; swapped in as a unit."""
    events: list[Event] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    registrations: list[Registration] = field(default_factory=list)
    users_by_id: dict[str, User] = field(default_factory=dict)
    events_by_id: dict[str, Event] = field(default_factory=dict)


def aggregate_counts(events: list[Event], registrations: list[Registration]) -> list[Event]:
    """Return copies of events with registration_count / total_participants filled in.

    Registrations whose event_id matches no event are skipped.
    """
    # index of the first event carrying each id
    first_index: dict[str, int] = {}
    for i, event in enumerate(events):
        first_index.setdefault(event.id, i)

    regs = [0] * len(events)
    participants = [0] * len(events)
    for reg in registrations:
        i = first_index.get(reg.event_id) if reg.event_id is not None else None
        if i is None:
            continue
        regs[i] += 1
        participants[i] += reg.participant_count

    return [
        replace(e, registration_count=regs[i], total_participants=participants[i])
        for i, e in enumerate(events)
    ]


class DataStore:
    """Event registration data with join/aggregate accessors."""

    def __init__(self, fetcher: Fetcher | None = None, sources: SourceNames | None = None) -> None:
        self.fetcher: Fetcher = fetcher or make_fetcher()
        self.sources = sources or SourceNames()
        self._snapshot = _Snapshot()
        self._loaded = False
        self._loaded_at: Optional[dt.datetime] = None
        self._inflight: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> "DataStore":
        """Fetch, normalize, and aggregate all three sources (no-op once loaded)."""
        if not self._loaded:
            await self._run_load()
        return self

    async def reload(self) -> "DataStore":
        """Force a fresh load. On failure the previous data stays in place."""
        await self._run_load()
        return self

    async def _run_load(self) -> None:
        # Concurrent callers share one in-flight load
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._load_once())
            self._inflight.add_done_callback(self._clear_inflight)
        await asyncio.shield(self._inflight)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the exception retrieved when every awaiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _load_once(self) -> None:
        print("Loading registration data...")
        raw = await fetch_collections(self.fetcher, self.sources)

        # Malformed records are skipped with a warning
        events = normalize_events(raw.events)
        users = normalize_users(raw.users)
        registrations = normalize_registrations(raw.registrations)

        events = aggregate_counts(events, registrations)

        users_by_id: dict[str, User] = {}
        for user in users:
            users_by_id.setdefault(user.id, user)
        events_by_id: dict[str, Event] = {}
        for event in events:
            events_by_id.setdefault(event.id, event)

        self._snapshot = _Snapshot(
            events=events,
            users=users,
            registrations=registrations,
            users_by_id=users_by_id,
            events_by_id=events_by_id,
        )
        self._loaded = True
        self._loaded_at = dt.datetime.now(dt.timezone.utc)

        orphans = sum(1 for r in registrations if r.event_id not in events_by_id)
        print(f"  {len(events):,} events, {len(users):,} users, {len(registrations):,} registrations")
        if orphans:
            print(f"  {orphans:,} registrations reference unknown events (excluded from counts)")

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def loaded_at(self) -> Optional[dt.datetime]:
        return self._loaded_at

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_user(self, user_id: str) -> Optional[User]:
        return self._snapshot.users_by_id.get(user_id)

    def _resolve_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        return user if user is not None else User.placeholder(user_id)

    def _user_details(self, reg: Registration) -> tuple[User, ...]:
        return tuple(self._resolve_user(uid) for uid in reg.user_ids)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_events(self) -> list[Event]:
        """All events in source order with derived counts populated."""
        await self.load()
        return list(self._snapshot.events)

    async def get_event(self, event_id: str) -> Optional[Event]:
        await self.load()
        return self._snapshot.events_by_id.get(event_id)

    async def get_stats(self) -> Stats:
        """Counts computed fresh from the current snapshot."""
        await self.load()
        registrations = self._snapshot.registrations
        return Stats(
            total_events=len(self._snapshot.events),
            total_registrations=len(registrations),
            individual_registrations=sum(1 for r in registrations if r.type is RegistrationType.INDIVIDUAL),
            group_registrations=sum(1 for r in registrations if r.type is RegistrationType.GROUP),
        )

    async def get_registrations(self) -> list[Registration]:
        await self.load()
        return list(self._snapshot.registrations)

    async def get_event_registrations(self, event_id: str) -> list[RegistrationDetails]:
        """Registrations for one event, in source order, each joined with its users.

        Unknown event ids give an empty list; unknown user ids resolve to a
        placeholder user.
        """
        await self.load()
        return [
            RegistrationDetails(registration=reg, user_details=self._user_details(reg))
            for reg in self._snapshot.registrations
            if reg.event_id == event_id
        ]

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def counts(self) -> dict[str, int]:
        return {
            "events": len(self._snapshot.events),
            "users": len(self._snapshot.users),
            "registrations": len(self._snapshot.registrations),
        }
