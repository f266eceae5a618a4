#!/usr/bin/env python3
"""
Event Dashboard CLI — stats, event listings, rosters, Excel export, API server.

USAGE:
  python -m eventdash.cli stats                               # Headline counts
  python -m eventdash.cli events                              # All events, source order
  python -m eventdash.cli events --type technical --sort registrations
  python -m eventdash.cli registrations EVENT_ID              # Roster for one event
  python -m eventdash.cli export                              # Excel dashboard report
  python -m eventdash.cli export --output ./Dashboard.xlsx
  python -m eventdash.cli serve --port 8000                   # Start API server
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from eventdash.config import EVENT_TYPE_FILTERS, REPORTS_FOLDER, SORT_KEYS
from eventdash.data.loader import LoadError
from eventdash.data.schemas import EventFilter, RegistrationType
from eventdash.data.store import DataStore
from eventdash.analytics.dashboard import filter_and_sort_events


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  EVENT DASHBOARD — {title}")
    print("=" * 70)


async def _with_store(coro_fn, args) -> None:
    store = DataStore()
    try:
        await coro_fn(store, args)
    finally:
        close = getattr(store.fetcher, "close", None)
        if close is not None:
            await close()


async def _stats(store: DataStore, args) -> None:
    stats = await store.get_stats()
    _banner("STATS")
    print(f"  Total events:             {stats.total_events:>8,}")
    print(f"  Total registrations:      {stats.total_registrations:>8,}")
    print(f"  Individual registrations: {stats.individual_registrations:>8,}")
    print(f"  Group registrations:      {stats.group_registrations:>8,}")


async def _events(store: DataStore, args) -> None:
    events = await store.get_events()
    listed = filter_and_sort_events(events, args.type, args.sort)
    _banner(f"EVENTS ({len(listed)})")
    print(f"\n{'ID':<26}{'TITLE':<34}{'TYPE':<12}{'REGS':>6}{'PPL':>6}")
    for e in listed:
        title = str(e.get("title") or "")[:32]
        print(f"{str(e['id'])[:24]:<26}{title:<34}{str(e.get('eventType') or '-'):<12}"
              f"{e['registrationCount']:>6}{e['totalParticipants']:>6}")


async def _registrations(store: DataStore, args) -> None:
    event = await store.get_event(args.event_id)
    details = await store.get_event_registrations(args.event_id)
    title = (event.title or event.id) if event else f"{args.event_id} (unknown event)"
    _banner(f"REGISTRATIONS — {title}")
    if not details:
        print("\n  No registrations.")
        return

    for i, item in enumerate(details, 1):
        reg = item.registration
        if reg.type is RegistrationType.GROUP:
            header = f"Group: {reg.group_name or '(unnamed)'} — {reg.participant_count} members"
        else:
            header = "Individual"
        print(f"\n  [{i}] {header}  |  {reg.registration_date or 'no date'}")
        for j, user in enumerate(item.user_details):
            leader = "  (Leader)" if reg.type is RegistrationType.GROUP and j == 0 else ""
            contact = "  ".join(x for x in (user.email, user.phone) if x)
            print(f"      - {user.name}{leader}  {contact}".rstrip())


async def _export(store: DataStore, args) -> None:
    from eventdash.reports import dashboard_report

    _banner("EXCEL EXPORT")
    output = Path(args.output) if args.output else REPORTS_FOLDER / "Dashboard_Report.xlsx"
    flt = EventFilter(event_type=args.type, sort_by=args.sort or "registrations")
    path = await dashboard_report.generate_excel(store, output, flt)
    print(f"\n  Saved: {path}")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Event Dashboard API on port {args.port}...")
    uvicorn.run("eventdash.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _run(coro_fn):
    def runner(args):
        try:
            asyncio.run(_with_store(coro_fn, args))
        except LoadError as exc:
            print(f"\n  ERROR: {exc}", file=sys.stderr)
            sys.exit(1)
    return runner


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--type", choices=EVENT_TYPE_FILTERS, default="all", help="Event type filter")
    p.add_argument("--sort", choices=SORT_KEYS, help="Sort order (default: source order)")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Event Dashboard — event registration statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    stats_parser = subparsers.add_parser("stats", help="Print headline counts")
    stats_parser.set_defaults(func=_run(_stats))

    events_parser = subparsers.add_parser("events", help="List events with counts")
    _add_filter_args(events_parser)
    events_parser.set_defaults(func=_run(_events))

    regs_parser = subparsers.add_parser("registrations", help="List registrations for an event")
    regs_parser.add_argument("event_id", help="Event id")
    regs_parser.set_defaults(func=_run(_registrations))

    export_parser = subparsers.add_parser("export", help="Write the Excel dashboard report")
    export_parser.add_argument("--output", help="Output .xlsx path")
    _add_filter_args(export_parser)
    export_parser.set_defaults(func=_run(_export))

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
