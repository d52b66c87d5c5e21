"""Tests for the slotwise CLI."""

import argparse
from unittest.mock import patch

import pytest

from slotwise.cli import create_parser, main
from slotwise.cli.commands import (
    cmd_add_party,
    cmd_init_db,
    cmd_list,
    cmd_parties,
    cmd_reminders,
    cmd_slots,
)
from slotwise.scheduling import AppointmentManager
from slotwise.storage import get_store
from tests.conftest import at


@pytest.fixture
def db_path(tmp_path) -> str:
    """File database seeded with one provider and one requester."""
    path = str(tmp_path / "cli.db")
    store = get_store({"type": "sqlite", "path": path})
    store.create_party(name="Dr. Smith", role="provider", party_id="prov_1")
    store.create_party(name="Alice", role="requester", party_id="req_1")
    store.close()
    return path


def run(argv: list[str]) -> None:
    args = create_parser().parse_args(argv)
    args.func(args)


class TestParser:
    """Tests for create_parser."""

    def test_subcommands_registered(self):
        parser = create_parser()
        args = parser.parse_args(["slots", "prov_1", "--from", "2026-01-05", "--to", "2026-01-09"])

        assert args.func is cmd_slots
        assert args.from_date == "2026-01-05"
        assert args.hours is None

    def test_add_party_requires_role(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["add-party", "Bob"])

    def test_list_rejects_unknown_status(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["list", "req_1", "--status", "postponed"])

    def test_defaults(self):
        args = create_parser().parse_args(["reminders"])
        assert args.func is cmd_reminders
        assert args.lead_hours == 24.0
        assert args.db is None

    def test_no_command_prints_help(self, capsys):
        with patch("sys.argv", ["slotwise"]):
            main()
        assert "init-db" in capsys.readouterr().out


class TestCommands:
    """Tests for cmd_* functions against a file database."""

    def test_init_db(self, tmp_path, capsys):
        path = tmp_path / "new.db"
        cmd_init_db(argparse.Namespace(db=str(path)))

        assert path.exists()
        assert "Database ready" in capsys.readouterr().out

    def test_add_party(self, db_path, capsys):
        cmd_add_party(argparse.Namespace(db=db_path, name="Bob", role="requester", email=None))

        assert "requester Bob: party_" in capsys.readouterr().out

    def test_parties(self, db_path, capsys):
        cmd_parties(argparse.Namespace(db=db_path, role=None))

        out = capsys.readouterr().out
        assert "Parties (2)" in out
        assert "prov_1" in out
        assert "req_1" in out

    def test_parties_by_role(self, db_path, capsys):
        run(["parties", "--role", "provider", "--db", db_path])

        out = capsys.readouterr().out
        assert "prov_1" in out
        assert "req_1" not in out

    def test_slots(self, db_path, capsys):
        run(["slots", "prov_1", "--from", "2026-01-05", "--to", "2026-01-05", "--db", db_path])

        out = capsys.readouterr().out
        assert "Monday 2026-01-05" in out
        assert "09:00-09:30" in out
        assert "16:30-17:00" in out

    def test_slots_with_hours_file(self, db_path, tmp_path, capsys):
        hours = tmp_path / "hours.yaml"
        hours.write_text("working_hours:\n  start_hour: 9\n  end_hour: 10\n  slot_duration_minutes: 20\n")

        run(["slots", "prov_1", "--from", "2026-01-05", "--to", "2026-01-05",
             "--hours", str(hours), "--db", db_path])

        out = capsys.readouterr().out
        assert "09:40-10:00" in out
        assert "10:00-" not in out

    def test_slots_unknown_provider_exits(self, db_path, capsys):
        with pytest.raises(SystemExit):
            run(["slots", "ghost", "--from", "2026-01-05", "--to", "2026-01-05", "--db", db_path])
        assert "Provider not found" in capsys.readouterr().out

    def test_slots_bad_date_exits(self, db_path):
        with pytest.raises(SystemExit):
            run(["slots", "prov_1", "--from", "monday", "--to", "2026-01-05", "--db", db_path])

    def test_list(self, db_path, capsys):
        store = get_store({"type": "sqlite", "path": db_path})
        appt = AppointmentManager(store).create("req_1", "prov_1", at(9), 30)
        store.close()

        cmd_list(argparse.Namespace(
            db=db_path, party_id="req_1", role=None, status=None, page=1, page_size=20
        ))

        out = capsys.readouterr().out
        assert appt.id in out
        assert "1 total" in out

    def test_list_empty(self, db_path, capsys):
        run(["list", "prov_1", "--db", db_path])
        assert "No appointments found." in capsys.readouterr().out

    def test_list_bad_page_exits(self, db_path):
        with pytest.raises(SystemExit):
            run(["list", "prov_1", "--page", "0", "--db", db_path])

    def test_reminders(self, db_path, capsys):
        run(["reminders", "--db", db_path])
        assert "0 reminder(s) sent" in capsys.readouterr().out
