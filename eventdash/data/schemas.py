"""
Canonical record types for events, users, and registrations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from eventdash.config import EVENT_TYPE_FILTERS, SORT_KEYS, UNKNOWN_USER_NAME


class RegistrationType(str, Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"


@dataclass(frozen=True)
class Event:
    """An event from the events export.

    registration_count and total_participants are derived: each load pass
    builds counted copies with dataclasses.replace(). Source fields the
    dashboard does not model are kept in ``extra`` and written back
    unchanged by to_dict().
    """
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[str] = None       # "technical" | "non-tech"
    player_mode: Optional[str] = None      # "single player" | team modes
    teamsize: Any = None
    sub_category: Optional[str] = None
    registration_count: int = 0
    total_participants: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "eventType": self.event_type,
            "playerMode": self.player_mode,
            "teamsize": self.teamsize,
            "subCategory": self.sub_category,
            "registrationCount": self.registration_count,
            "totalParticipants": self.total_participants,
        })
        return data


@dataclass(frozen=True)
class User:
    id: str
    name: str
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def placeholder(cls, user_id: str) -> "User":
        """Stand-in for an identifier that matches no known user."""
        return cls(id=user_id, name=UNKNOWN_USER_NAME)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"_id": self.id, "name": self.name}
        for key in ("username", "email", "phone"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class IndividualRegistration:
    id: Optional[str]
    event_id: Optional[str]
    user_id: Optional[str]
    registration_date: Any = None

    type = RegistrationType.INDIVIDUAL

    @property
    def user_ids(self) -> tuple[str, ...]:
        return (self.user_id,) if self.user_id is not None else ()

    @property
    def participant_count(self) -> int:
        # counted even when the export lost the userId
        return 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "type": self.type.value,
            "eventId": self.event_id,
            "userId": self.user_id,
            "registrationDate": self.registration_date,
        }


@dataclass(frozen=True)
class GroupRegistration:
    """A team registration. user_ids is never empty; the first entry is the leader."""
    id: Optional[str]
    event_id: Optional[str]
    user_ids: tuple[str, ...]
    group_name: Optional[str] = None
    registration_date: Any = None

    type = RegistrationType.GROUP

    def __post_init__(self) -> None:
        if not self.user_ids:
            raise ValueError("group registration needs at least one member")

    @property
    def leader_id(self) -> str:
        return self.user_ids[0]

    @property
    def participant_count(self) -> int:
        return len(self.user_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "type": self.type.value,
            "eventId": self.event_id,
            "userIds": list(self.user_ids),
            "groupName": self.group_name,
            "registrationDate": self.registration_date,
        }


Registration = Union[IndividualRegistration, GroupRegistration]


@dataclass(frozen=True)
class RegistrationDetails:
    """A registration joined with the users it references (same order as user_ids)."""
    registration: Registration
    user_details: tuple[User, ...]

    def to_dict(self) -> dict[str, Any]:
        data = self.registration.to_dict()
        data["userDetails"] = [u.to_dict() for u in self.user_details]
        return data


@dataclass(frozen=True)
class Stats:
    total_events: int = 0
    total_registrations: int = 0
    individual_registrations: int = 0
    group_registrations: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalEvents": self.total_events,
            "totalRegistrations": self.total_registrations,
            "individualRegistrations": self.individual_registrations,
            "groupRegistrations": self.group_registrations,
        }


@dataclass
class EventFilter:
    """Dashboard event-list filter: event type + sort order."""
    event_type: str = EVENT_TYPE_FILTERS[0]
    sort_by: Optional[str] = None          # None keeps source order

    def __post_init__(self) -> None:
        if self.event_type not in EVENT_TYPE_FILTERS:
            raise ValueError(f"Invalid event type filter: {self.event_type}")
        if self.sort_by is not None and self.sort_by not in SORT_KEYS:
            raise ValueError(f"Invalid sort key: {self.sort_by}")

    @property
    def label(self) -> str:
        """Human-readable label for report subtitles."""
        kind = "All Events" if self.event_type == "all" else f"{self.event_type.title()} Events"
        if self.sort_by is None:
            return kind
        order = "by Registrations" if self.sort_by == "registrations" else "by Name"
        return f"{kind} {order}"
