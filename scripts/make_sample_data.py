#!/usr/bin/env python3
"""
Sample data generator for the Event Dashboard.

Writes events.json, users.json and registrations.json in the registration
platform's export shape ({"$oid": ...} ids, {"$date": ...} dates, "members"
and "mobno" aliases) so the dashboard can be tried without real exports.

Usage:
    python3 scripts/make_sample_data.py [--output ./data] [--users 60] [--seed 7]
"""

import argparse
import datetime as dt
import json
import random
from pathlib import Path

EVENTS = [
    ("Hackathon", "technical", "team", "2-4", "Coding"),
    ("Code Sprint", "technical", "single player", None, "Coding"),
    ("Robo Race", "technical", "team", "2-3", "Robotics"),
    ("Quiz Bowl", "non-tech", "team", "2", "Quiz"),
    ("Treasure Hunt", "non-tech", "team", "3-5", "Fun"),
    ("Debate", "non-tech", "single player", None, "Speaking"),
]

FIRST_NAMES = ["Asha", "Ben", "Chen", "Dina", "Eli", "Farah", "Gus", "Hana", "Ivan", "Jo"]


def _oid(n: int, prefix: str) -> dict:
    return {"$oid": f"{prefix}{n:022x}"[-24:]}


def build_sample(n_users: int = 60, seed: int = 7) -> dict[str, list[dict]]:
    """Return the three collections keyed by file name."""
    rng = random.Random(seed)
    start = dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)

    events = [
        {
            "id": f"evt-{i + 1}",
            "title": title,
            "description": f"{title} — open to all students.",
            "eventType": etype,
            "playerMode": mode,
            "teamsize": size,
            "subCategory": sub,
        }
        for i, (title, etype, mode, size, sub) in enumerate(EVENTS)
    ]

    users = []
    for i in range(n_users):
        user = {"_id": _oid(i, "a"), "email": f"user{i}@example.com"}
        if i % 3 == 0:
            user["username"] = f"{rng.choice(FIRST_NAMES).lower()}{i}"
        elif i % 3 == 1:
            user["firstName"] = rng.choice(FIRST_NAMES)
        if i % 2 == 0:
            user["mobno"] = str(9_000_000_000 + i)
        users.append(user)

    registrations = []
    for n in range(n_users):
        event = rng.choice(events)
        when = {"$date": (start + dt.timedelta(hours=7 * n)).isoformat().replace("+00:00", "Z")}
        if event["playerMode"] == "single player":
            registrations.append({
                "_id": _oid(n, "b"),
                "eventId": event["id"],
                "type": "individual",
                "userId": _oid(rng.randrange(n_users), "a"),
                "registrationDate": when,
            })
        else:
            size = rng.randint(2, 4)
            members = [_oid(rng.randrange(n_users + 5), "a") for _ in range(size)]
            registrations.append({
                "_id": _oid(n, "b"),
                "eventId": event["id"],
                "type": "group",
                "members": members,
                "groupName": f"Team {n}",
                "registrationDate": when,
            })

    return {"events.json": events, "users.json": users, "registrations.json": registrations}


def write_sample(output: Path, n_users: int = 60, seed: int = 7) -> list[Path]:
    output.mkdir(parents=True, exist_ok=True)
    written = []
    for name, records in build_sample(n_users, seed).items():
        path = output / name
        path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        written.append(path)
    return written


def main():
    parser = argparse.ArgumentParser(description="Write sample dashboard exports")
    parser.add_argument("--output", default="data", help="Output directory (default: data)")
    parser.add_argument("--users", type=int, default=60, help="Number of users")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    args = parser.parse_args()

    for path in write_sample(Path(args.output), args.users, args.seed):
        print(f"  Wrote {path}")


if __name__ == "__main__":
    main()
