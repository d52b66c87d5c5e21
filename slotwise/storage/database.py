"""SQLite persistence for parties and appointments.

AppointmentDB is the engine's transactional store. A single connection
is shared by all threads; every statement runs under one re-entrant lock,
and transaction() additionally opens BEGIN IMMEDIATE so that a
read-decide-write sequence is serialized against other writers, including
other processes using the same database file.
"""

import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime

from slotwise.config import DATABASE_PATH
from slotwise.constants import AppointmentStatus, PartyRole
from slotwise.models import Appointment, Party

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    """Generate a prefixed UUID."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _to_db(value: datetime) -> str:
    # Fixed-width ISO text keeps lexical order equal to chronological order
    return value.isoformat(timespec="microseconds")


def _from_db(value: str) -> datetime:
    return datetime.fromisoformat(value)


class AppointmentDB:
    """SQLite store for appointment scheduling resources."""

    def __init__(self, db_path: str | None = None, timeout: float = 5.0):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite file, or ":memory:" for in-memory.
                     Defaults to SLOTWISE_DB_PATH env var or "./slotwise.db"
            timeout: Seconds to wait for a competing writer's lock
        """
        self.db_path = db_path or DATABASE_PATH
        self.conn = sqlite3.connect(
            self.db_path,
            timeout=timeout,
            check_same_thread=False,
            isolation_level=None,
        )
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._in_transaction = False

    def init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._lock:
            self.conn.executescript("""
                -- Parties (directory records)
                CREATE TABLE IF NOT EXISTS parties (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    role TEXT NOT NULL CHECK(role IN ('requester', 'provider')),
                    email TEXT,
                    created_at TEXT NOT NULL
                );

                -- Appointments
                CREATE TABLE IF NOT EXISTS appointments (
                    id TEXT PRIMARY KEY,
                    requester_id TEXT NOT NULL,
                    provider_id TEXT NOT NULL,
                    start_time TEXT NOT NULL,
                    end_time TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'scheduled'
                        CHECK(status IN ('scheduled', 'completed', 'cancelled', 'no_show')),
                    notes TEXT,
                    linked_resource_id TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    CHECK(start_time < end_time)
                );
                CREATE INDEX IF NOT EXISTS idx_appointments_provider_time
                    ON appointments(provider_id, start_time);
                CREATE INDEX IF NOT EXISTS idx_appointments_requester_time
                    ON appointments(requester_id, start_time);

                -- At most one active booking per provider start instant
                CREATE UNIQUE INDEX IF NOT EXISTS idx_appointments_active_slot
                    ON appointments(provider_id, start_time)
                    WHERE status = 'scheduled';
            """)

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator["AppointmentDB"]:
        """Run a block atomically; roll back on any exception.

        Nested use joins the outer transaction.
        """
        with self._lock:
            if self._in_transaction:
                yield self
                return

            self.conn.execute("BEGIN IMMEDIATE")
            self._in_transaction = True
            try:
                yield self
            except BaseException:
                self.conn.rollback()
                raise
            else:
                self.conn.commit()
            finally:
                self._in_transaction = False

    # =========================================================================
    # Party operations
    # =========================================================================

    def create_party(
        self,
        name: str,
        role: PartyRole | str,
        email: str | None = None,
        party_id: str | None = None,
    ) -> Party:
        """Create a new party."""
        party = Party(
            id=party_id or generate_id("party"),
            name=name,
            role=PartyRole(role),
            email=email,
        )
        with self._lock:
            self.conn.execute(
                """INSERT INTO parties (id, name, role, email, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (party.id, party.name, party.role.value, party.email, _to_db(party.created_at)),
            )
        return party

    def get_party(self, party_id: str) -> Party | None:
        """Get party by ID."""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM parties WHERE id = ?", (party_id,)
            ).fetchone()

        if row is None:
            return None

        return self._row_to_party(row)

    # Party directory protocol
    resolve_party = get_party

    def list_parties(self, role: PartyRole | str | None = None) -> list[Party]:
        """List parties, optionally filtered by role."""
        query = "SELECT * FROM parties"
        params: list = []
        if role is not None:
            query += " WHERE role = ?"
            params.append(PartyRole(role).value)
        query += " ORDER BY name"

        with self._lock:
            rows = self.conn.execute(query, params).fetchall()

        return [self._row_to_party(row) for row in rows]

    # =========================================================================
    # Appointment operations
    # =========================================================================

    def insert_appointment(self, appointment: Appointment) -> Appointment:
        """Insert a fully built appointment record."""
        with self._lock:
            self.conn.execute(
                """INSERT INTO appointments
                   (id, requester_id, provider_id, start_time, end_time, status,
                    notes, linked_resource_id, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    appointment.id,
                    appointment.requester_id,
                    appointment.provider_id,
                    _to_db(appointment.start_time),
                    _to_db(appointment.end_time),
                    appointment.status.value,
                    appointment.notes,
                    appointment.linked_resource_id,
                    _to_db(appointment.created_at),
                    _to_db(appointment.updated_at),
                ),
            )
        return appointment

    def update_appointment(self, appointment: Appointment) -> Appointment:
        """Persist the mutable fields of an existing appointment."""
        with self._lock:
            cursor = self.conn.execute(
                """UPDATE appointments
                   SET start_time = ?, end_time = ?, status = ?, notes = ?,
                       linked_resource_id = ?, updated_at = ?
                   WHERE id = ?""",
                (
                    _to_db(appointment.start_time),
                    _to_db(appointment.end_time),
                    appointment.status.value,
                    appointment.notes,
                    appointment.linked_resource_id,
                    _to_db(appointment.updated_at),
                    appointment.id,
                ),
            )
        if cursor.rowcount == 0:
            raise LookupError(f"Appointment {appointment.id} does not exist")
        return appointment

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        """Get appointment by ID."""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM appointments WHERE id = ?", (appointment_id,)
            ).fetchone()

        if row is None:
            return None

        return self._row_to_appointment(row)

    def query_appointments(
        self,
        provider_id: str,
        statuses: Iterable[AppointmentStatus],
        range_start: datetime | None = None,
        range_end: datetime | None = None,
        exclude_id: str | None = None,
    ) -> list[Appointment]:
        """Appointments for a provider in the given statuses.

        When a range is given, only appointments intersecting
        [range_start, range_end) are returned.
        """
        status_values = [AppointmentStatus(s).value for s in statuses]
        if not status_values:
            return []

        placeholders = ", ".join("?" for _ in status_values)
        query = f"SELECT * FROM appointments WHERE provider_id = ? AND status IN ({placeholders})"
        params: list = [provider_id, *status_values]

        if range_end is not None:
            query += " AND start_time < ?"
            params.append(_to_db(range_end))
        if range_start is not None:
            query += " AND end_time > ?"
            params.append(_to_db(range_start))
        if exclude_id:
            query += " AND id != ?"
            params.append(exclude_id)

        query += " ORDER BY start_time"

        with self._lock:
            rows = self.conn.execute(query, params).fetchall()

        return [self._row_to_appointment(row) for row in rows]

    def list_for_party(
        self,
        party_id: str,
        role: PartyRole | str | None = None,
        status: AppointmentStatus | str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Appointment], int]:
        """Appointments where the party takes part, ordered by start time.

        Returns:
            (page of appointments, total matching count)
        """
        if role is None:
            where = "(requester_id = ? OR provider_id = ?)"
            params: list = [party_id, party_id]
        elif PartyRole(role) is PartyRole.REQUESTER:
            where = "requester_id = ?"
            params = [party_id]
        else:
            where = "provider_id = ?"
            params = [party_id]

        if status is not None:
            where += " AND status = ?"
            params.append(AppointmentStatus(status).value)
        if date_from is not None:
            where += " AND start_time >= ?"
            params.append(_to_db(date_from))
        if date_to is not None:
            where += " AND start_time <= ?"
            params.append(_to_db(date_to))

        with self._lock:
            total = self.conn.execute(
                f"SELECT COUNT(*) FROM appointments WHERE {where}", params
            ).fetchone()[0]
            rows = self.conn.execute(
                f"SELECT * FROM appointments WHERE {where} "
                "ORDER BY start_time, id LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()

        return [self._row_to_appointment(row) for row in rows], total

    def list_starting_between(
        self,
        after: datetime,
        until: datetime,
        statuses: Iterable[AppointmentStatus],
    ) -> list[Appointment]:
        """Appointments with after < start_time <= until, across providers."""
        status_values = [AppointmentStatus(s).value for s in statuses]
        if not status_values:
            return []

        placeholders = ", ".join("?" for _ in status_values)
        with self._lock:
            rows = self.conn.execute(
                f"""SELECT * FROM appointments
                    WHERE status IN ({placeholders})
                      AND start_time > ? AND start_time <= ?
                    ORDER BY start_time""",
                [*status_values, _to_db(after), _to_db(until)],
            ).fetchall()

        return [self._row_to_appointment(row) for row in rows]

    # =========================================================================
    # Row mapping
    # =========================================================================

    @staticmethod
    def _row_to_party(row: sqlite3.Row) -> Party:
        return Party(
            id=row["id"],
            name=row["name"],
            role=row["role"],
            email=row["email"],
            created_at=_from_db(row["created_at"]),
        )

    @staticmethod
    def _row_to_appointment(row: sqlite3.Row) -> Appointment:
        return Appointment(
            id=row["id"],
            requester_id=row["requester_id"],
            provider_id=row["provider_id"],
            start_time=_from_db(row["start_time"]),
            end_time=_from_db(row["end_time"]),
            status=row["status"],
            notes=row["notes"],
            linked_resource_id=row["linked_resource_id"],
            created_at=_from_db(row["created_at"]),
            updated_at=_from_db(row["updated_at"]),
        )
