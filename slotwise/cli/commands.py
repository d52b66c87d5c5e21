"""CLI command implementations.

Contains all cmd_* functions for CLI subcommands.
"""

import sys
from argparse import Namespace
from datetime import datetime

from slotwise.config import REFERENCE_TIMEZONE
from slotwise.errors import ConfigLoadError, SchedulingError
from slotwise.notifications import LoggingDispatcher
from slotwise.scheduling import AppointmentManager
from slotwise.storage import AppointmentDB, get_store
from slotwise.utils.loaders import load_working_hours


def _open_store(args: Namespace) -> AppointmentDB:
    """Open the store named by --db, or the configured default."""
    if getattr(args, "db", None):
        return get_store({"type": "sqlite", "path": args.db})
    return get_store()


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        print(f"❌ Not an ISO date: {value}")
        sys.exit(1)


def cmd_init_db(args: Namespace) -> None:
    """Create the database schema."""
    store = _open_store(args)
    print(f"✅ Database ready: {store.db_path}")
    store.close()


def cmd_add_party(args: Namespace) -> None:
    """Register a requester or provider."""
    store = _open_store(args)
    try:
        party = store.create_party(name=args.name, role=args.role, email=args.email)
    finally:
        store.close()
    print(f"✅ {party.role.value} {party.name}: {party.id}")


def cmd_slots(args: Namespace) -> None:
    """Print free slots for a provider."""
    working_hours = None
    if args.hours:
        try:
            working_hours = load_working_hours(args.hours)
        except ConfigLoadError as e:
            print(f"❌ {e}")
            sys.exit(1)

    store = _open_store(args)
    manager = AppointmentManager(store)
    try:
        windows = manager.availability_windows(
            args.provider_id,
            _parse_date(args.from_date).date(),
            _parse_date(args.to_date).date(),
            working_hours,
        )
    except SchedulingError as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        store.close()

    if not windows:
        print("No free slots.")
        return

    print(f"\n📅 Free slots for {args.provider_id} ({REFERENCE_TIMEZONE}):")
    current_day = None
    for window in windows:
        if window.start.date() != current_day:
            current_day = window.start.date()
            print(f"\n   {current_day.strftime('%A %Y-%m-%d')}")
        print(f"      {window.start.strftime('%H:%M')}-{window.end.strftime('%H:%M')}")


def cmd_parties(args: Namespace) -> None:
    """List registered parties."""
    store = _open_store(args)
    try:
        parties = store.list_parties(role=args.role)
    finally:
        store.close()

    if not parties:
        print("No parties found.")
        return

    print(f"\n👥 Parties ({len(parties)}):\n")
    print(f"{'ID':<18} {'Role':<10} Name")
    print("-" * 50)
    for party in parties:
        print(f"{party.id:<18} {party.role.value:<10} {party.name}")


def cmd_list(args: Namespace) -> None:
    """List a party's appointments."""
    store = _open_store(args)
    manager = AppointmentManager(store)
    try:
        page = manager.list_appointments(
            args.party_id,
            role=args.role,
            status=args.status,
            page=args.page,
            page_size=args.page_size,
        )
    except (SchedulingError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        store.close()

    if not page.items:
        print("No appointments found.")
        return

    print(f"\n📋 Appointments ({page.total} total, page {page.page}):\n")
    print(f"{'ID':<18} {'Start':<17} {'End':<6} {'Status':<10} {'Requester':<18} Provider")
    print("-" * 90)
    for appt in page.items:
        print(
            f"{appt.id:<18} {appt.start_time.strftime('%Y-%m-%d %H:%M'):<17} "
            f"{appt.end_time.strftime('%H:%M'):<6} {appt.status.value:<10} "
            f"{appt.requester_id:<18} {appt.provider_id}"
        )


def cmd_reminders(args: Namespace) -> None:
    """Fan out reminders for appointments starting soon."""
    store = _open_store(args)
    manager = AppointmentManager(store, dispatcher=LoggingDispatcher())
    try:
        intents = manager.send_reminders(lead_hours=args.lead_hours)
    except SchedulingError as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        store.close()
    print(f"🔔 {len(intents)} reminder(s) sent")


def cmd_serve(args: Namespace) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("slotwise.main:app", host=args.host, port=args.port)
