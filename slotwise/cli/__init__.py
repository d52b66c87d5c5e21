"""Slotwise CLI - command-line interface for the scheduling engine.

Usage:
    slotwise init-db
    slotwise add-party "Dr. Smith" --role provider
    slotwise parties --role provider
    slotwise slots party_abc123 --from 2026-01-05 --to 2026-01-09
    slotwise list party_abc123 --status scheduled
    slotwise reminders --lead-hours 24
    slotwise serve --port 8000
"""

import argparse

from slotwise.cli import commands
from slotwise.cli.commands import (
    cmd_add_party,
    cmd_init_db,
    cmd_list,
    cmd_parties,
    cmd_reminders,
    cmd_serve,
    cmd_slots,
)
from slotwise.config import DEFAULT_PAGE_SIZE, REMINDER_LEAD_HOURS
from slotwise.constants import AppointmentStatus, PartyRole
from slotwise.utils.logging import setup_logging

__all__ = [
    # Submodules
    "commands",
    # Entry points
    "main",
    "create_parser",
]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser.

    Returns:
        Configured ArgumentParser for testing and main().
    """
    parser = argparse.ArgumentParser(
        description="Slotwise - appointment scheduling and availability engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Shared --db option
    db_parent = argparse.ArgumentParser(add_help=False)
    db_parent.add_argument("--db", type=str, default=None, help="SQLite database path")

    # init-db
    init_parser = subparsers.add_parser(
        "init-db", parents=[db_parent], help="Create the database schema"
    )
    init_parser.set_defaults(func=cmd_init_db)

    # add-party
    party_parser = subparsers.add_parser(
        "add-party", parents=[db_parent], help="Register a requester or provider"
    )
    party_parser.add_argument("name", help="Display name")
    party_parser.add_argument(
        "--role", "-r", required=True, choices=[r.value for r in PartyRole]
    )
    party_parser.add_argument("--email", "-e", default=None)
    party_parser.set_defaults(func=cmd_add_party)

    # parties
    parties_parser = subparsers.add_parser(
        "parties", parents=[db_parent], help="List registered parties"
    )
    parties_parser.add_argument("--role", "-r", choices=[r.value for r in PartyRole], default=None)
    parties_parser.set_defaults(func=cmd_parties)

    # slots
    slots_parser = subparsers.add_parser(
        "slots", parents=[db_parent], help="Show free slots for a provider"
    )
    slots_parser.add_argument("provider_id", help="Provider party ID")
    slots_parser.add_argument("--from", dest="from_date", required=True, help="First day (ISO)")
    slots_parser.add_argument("--to", dest="to_date", required=True, help="Last day (ISO)")
    slots_parser.add_argument(
        "--hours", type=str, default=None, help="YAML file with a working_hours profile"
    )
    slots_parser.set_defaults(func=cmd_slots)

    # list
    list_parser = subparsers.add_parser(
        "list", parents=[db_parent], help="List a party's appointments"
    )
    list_parser.add_argument("party_id", help="Requester or provider ID")
    list_parser.add_argument("--role", choices=[r.value for r in PartyRole], default=None)
    list_parser.add_argument(
        "--status", choices=[s.value for s in AppointmentStatus], default=None
    )
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE)
    list_parser.set_defaults(func=cmd_list)

    # reminders
    reminders_parser = subparsers.add_parser(
        "reminders", parents=[db_parent], help="Send reminders for upcoming appointments"
    )
    reminders_parser.add_argument(
        "--lead-hours", type=float, default=REMINDER_LEAD_HOURS, help="Look-ahead window"
    )
    reminders_parser.set_defaults(func=cmd_reminders)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", "-p", type=int, default=8000)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main():
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
