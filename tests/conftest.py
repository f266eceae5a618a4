import asyncio
from collections import Counter

import pytest

from eventdash.data.loader import SourceNames
from eventdash.data.store import DataStore


class FakeFetcher:
    """In-memory fetcher: source name → parsed JSON, or an exception to raise."""

    def __init__(self, sources: dict, delay: float = 0.0) -> None:
        self.sources = dict(sources)
        self.delay = delay
        self.calls = Counter()

    async def __call__(self, name: str):
        self.calls[name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.sources[name]
        if isinstance(value, Exception):
            raise value
        return value


SOURCES = SourceNames(events="events.json", users="users.json", registrations="registrations.json")


def make_sources(events=None, users=None, registrations=None) -> dict:
    return {
        "events.json": events if events is not None else [],
        "users.json": users if users is not None else [],
        "registrations.json": registrations if registrations is not None else [],
    }


@pytest.fixture
def sample_sources():
    return make_sources(
        events=[
            {"id": "e1", "title": "Hackathon", "eventType": "technical", "playerMode": "team", "teamsize": "2-4"},
            {"id": "e2", "title": "Quiz", "eventType": "non-tech", "playerMode": "team"},
            {"id": "e3", "title": "Code Sprint", "eventType": "technical", "playerMode": "single player"},
        ],
        users=[
            {"_id": {"$oid": "u1"}, "username": "alice", "email": "alice@example.com", "mobno": "555-0101"},
            {"_id": "u2", "name": "Bob B", "username": "bob"},
            {"_id": "u3", "firstName": "Cara"},
        ],
        registrations=[
            {"_id": {"$oid": "r1"}, "eventId": {"$oid": "e1"}, "type": "group",
             "members": [{"$oid": "u1"}, {"$oid": "u2"}, {"$oid": "u9"}], "groupName": "Team A",
             "registrationDate": {"$date": "2024-01-01T10:00:00Z"}},
            {"_id": "r2", "eventId": "e1", "type": "individual", "userId": "u3",
             "registrationDate": "2024-01-02T09:30:00Z"},
            {"_id": "r3", "eventId": "e3", "type": "individual", "userId": "u1",
             "registrationDate": "2024-01-02T12:00:00Z"},
            {"_id": "r4", "eventId": "e404", "type": "individual", "userId": "u2",
             "registrationDate": "2024-01-03T08:00:00Z"},
        ],
    )


@pytest.fixture
def fetcher(sample_sources):
    return FakeFetcher(sample_sources)


@pytest.fixture
def store(fetcher):
    return DataStore(fetcher=fetcher, sources=SOURCES)
