"""
Record normalization: export-wrapper unwrapping, field aliasing, name resolution.

The per-record functions are pure and idempotent: feeding the to_dict() form of a
normalized record back in yields an equal record.
"""
from __future__ import annotations

from typing import Any, Optional

from eventdash.config import EXPORT_WRAPPER_KEYS, SYNTHETIC_NAME_SUFFIX_LEN
from eventdash.data.schemas import (
    Event,
    GroupRegistration,
    IndividualRegistration,
    Registration,
    RegistrationType,
    User,
)


# ---------------------------------------------------------------------------
# Export wrappers
# ---------------------------------------------------------------------------

def unwrap(value: Any) -> Any:
    """Strip single-key export wrappers: {"$oid": x} → x, {"$date": x} → x.

    Nested wrappers ({"$date": {"$numberLong": "..."}}) are unwrapped fully.
    """
    while isinstance(value, dict) and len(value) == 1:
        key = next(iter(value))
        if key not in EXPORT_WRAPPER_KEYS:
            break
        value = value[key]
    return value


def unwrap_id(value: Any) -> Optional[str]:
    value = unwrap(value)
    if value is None or value == "":
        return None
    if isinstance(value, (dict, list)):
        raise ValueError(f"Unsupported identifier shape: {value!r}")
    return str(value)


def _first_present(raw: dict, *keys: str) -> Any:
    """First value under keys that is neither missing, None, nor a blank string."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

# Display-name precedence, highest first
NAME_FIELDS = (
    ("name", "displayName"),          # explicit display name
    ("username",),
    ("fullName", "full_name"),
    ("firstName", "first_name"),
)


def resolve_display_name(raw: dict, user_id: Optional[str]) -> str:
    """Pick the user's display name by NAME_FIELDS precedence.

    Falls back to "User <last 6 chars of id>" when no name field is set.
    """
    for keys in NAME_FIELDS:
        value = _first_present(raw, *keys)
        if value is not None:
            return str(value).strip()
    suffix = (user_id or "")[-SYNTHETIC_NAME_SUFFIX_LEN:]
    return f"User {suffix}".strip()


def normalize_user(raw: dict) -> User:
    user_id = unwrap_id(raw.get("_id", raw.get("id")))
    if user_id is None:
        raise ValueError("user record has no _id")

    phone = _first_present(raw, "phone", "mobno")
    phone = unwrap(phone)
    return User(
        id=user_id,
        name=resolve_display_name(raw, user_id),
        username=raw.get("username"),
        email=raw.get("email"),
        phone=str(phone) if phone is not None else None,
    )


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------

def _member_ids(raw: dict) -> list[str]:
    """userIds, falling back to members when userIds is absent."""
    members = raw.get("userIds")
    if members is None:
        members = raw.get("members")
    if members is None:
        return []
    if not isinstance(members, list):
        raise ValueError(f"userIds must be a list, got {type(members).__name__}")
    ids = [unwrap_id(m) for m in members]
    return [i for i in ids if i is not None]


def _registration_type(raw: dict, member_ids: list[str]) -> RegistrationType:
    kind = raw.get("type")
    if kind is None or kind == "":
        has_members = raw.get("userIds") is not None or raw.get("members") is not None
        return RegistrationType.GROUP if has_members and member_ids else RegistrationType.INDIVIDUAL
    try:
        return RegistrationType(str(kind).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown registration type: {kind!r}")


def normalize_registration(raw: dict) -> Registration:
    """Build the typed registration for one raw export record.

    Lenient repairs: a group with no members but a userId becomes a
    one-member group; an individual with no userId but exactly one
    userIds entry uses that entry. An individual with no user at all is
    kept (it still counts) with empty user details.

    Raises ValueError for an unknown type or a group with no members.
    """
    reg_id = unwrap_id(raw.get("_id", raw.get("id")))
    event_id = unwrap_id(raw.get("eventId"))
    user_id = unwrap_id(raw.get("userId"))
    member_ids = _member_ids(raw)
    registration_date = unwrap(raw.get("registrationDate"))
    kind = _registration_type(raw, member_ids)

    if kind is RegistrationType.GROUP:
        if not member_ids and user_id is not None:
            member_ids = [user_id]
        if not member_ids:
            raise ValueError(f"group registration {reg_id!r} has no members")
        return GroupRegistration(
            id=reg_id,
            event_id=event_id,
            user_ids=tuple(member_ids),
            group_name=raw.get("groupName"),
            registration_date=registration_date,
        )

    if user_id is None and len(member_ids) == 1:
        user_id = member_ids[0]
    return IndividualRegistration(
        id=reg_id,
        event_id=event_id,
        user_id=user_id,
        registration_date=registration_date,
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

_EVENT_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "eventType": "event_type",
    "playerMode": "player_mode",
    "teamsize": "teamsize",
    "subCategory": "sub_category",
}
_DERIVED_FIELDS = ("registrationCount", "totalParticipants")


def normalize_event(raw: dict) -> Event:
    """Events pass through as-is; derived counts start at zero."""
    event_id = unwrap_id(raw["id"] if raw.get("id") is not None else raw.get("_id"))
    if event_id is None:
        raise ValueError("event record has no id")

    kwargs = {attr: raw.get(key) for key, attr in _EVENT_FIELDS.items() if key != "id"}
    extra = {
        k: v for k, v in raw.items()
        if k not in _EVENT_FIELDS and k not in _DERIVED_FIELDS
    }
    return Event(id=event_id, extra=extra, **kwargs)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

def _normalize_all(records: list[dict], normalize_fn, label: str) -> list:
    """Normalize every record, skipping the ones that cannot be represented."""
    out = []
    skipped = []
    for raw in records:
        try:
            out.append(normalize_fn(raw))
        except (KeyError, TypeError, ValueError) as exc:
            skipped.append(exc)
    if skipped:
        print(f"  Warning: skipping {len(skipped):,} malformed {label} (first: {skipped[0]})")
    return out


def normalize_events(records: list[dict]) -> list[Event]:
    return _normalize_all(records, normalize_event, "events")


def normalize_users(records: list[dict]) -> list[User]:
    return _normalize_all(records, normalize_user, "users")


def normalize_registrations(records: list[dict]) -> list[Registration]:
    return _normalize_all(records, normalize_registration, "registrations")
