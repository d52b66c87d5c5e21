"""FastAPI application factory for the scheduling API."""

from datetime import date, datetime, time

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from slotwise.api.models import ChangeStatus, CreateAppointment, CreateParty, UpdateAppointment
from slotwise.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from slotwise.constants import AppointmentStatus, PartyRole
from slotwise.errors import (
    AppointmentNotFoundError,
    InvalidIntervalError,
    InvalidTransitionError,
    OperationFailedError,
    PartyNotFoundError,
    SchedulingError,
    SlotUnavailableError,
    UnauthorizedError,
)
from slotwise.models import Appointment, AppointmentPage, Party, ProviderAvailability, WorkingHours
from slotwise.notifications import LoggingDispatcher
from slotwise.scheduling import AppointmentManager
from slotwise.storage import AppointmentDB, get_store

ERROR_STATUS_CODES: dict[type[SchedulingError], int] = {
    PartyNotFoundError: 404,
    AppointmentNotFoundError: 404,
    InvalidIntervalError: 400,
    UnauthorizedError: 403,
    SlotUnavailableError: 409,
    InvalidTransitionError: 409,
    OperationFailedError: 503,
}


def create_app(
    db: AppointmentDB | None = None,
    manager: AppointmentManager | None = None,
) -> FastAPI:
    """Create FastAPI app with optional database or manager injection.

    Args:
        db: Database instance. If None, opens the default SQLite store.
        manager: Fully wired manager. Takes precedence over db.

    Returns:
        Configured FastAPI application.
    """
    if manager is None:
        if db is None:
            db = get_store()
        manager = AppointmentManager(db, dispatcher=LoggingDispatcher())

    app = FastAPI(title="Slotwise Scheduling API", version="0.1.0")

    # Store manager in app state for access in routes
    app.state.manager = manager

    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
        status_code = ERROR_STATUS_CODES.get(type(exc), 400)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    # --- Party Routes ---

    @app.post("/parties", response_model=Party, status_code=201)
    def create_party(data: CreateParty) -> Party:
        """Register a requester or provider."""
        return app.state.manager.store.create_party(
            name=data.name, role=data.role, email=data.email
        )

    @app.get("/parties", response_model=list[Party])
    def list_parties(role: PartyRole | None = None) -> list[Party]:
        """List parties, optionally only providers or requesters."""
        return app.state.manager.store.list_parties(role=role)

    @app.get("/parties/{party_id}", response_model=Party)
    def get_party(party_id: str) -> Party:
        """Get a party by ID."""
        party = app.state.manager.store.get_party(party_id)
        if party is None:
            raise HTTPException(status_code=404, detail="Party not found")
        return party

    # --- Appointment Routes ---

    @app.post("/appointments", response_model=Appointment, status_code=201)
    def create_appointment(data: CreateAppointment) -> Appointment:
        """Book an appointment (409 if the provider is busy)."""
        return app.state.manager.create(
            requester_id=data.requester_id,
            provider_id=data.provider_id,
            start_time=data.start_time,
            end_or_duration=data.end_or_duration(),
            notes=data.notes,
            linked_resource_id=data.linked_resource_id,
        )

    @app.get("/appointments", response_model=AppointmentPage)
    def list_appointments(
        party_id: str,
        role: PartyRole | None = None,
        status: AppointmentStatus | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    ) -> AppointmentPage:
        """List a party's appointments, ordered by start time."""
        return app.state.manager.list_appointments(
            party_id,
            role=role,
            status=status,
            date_from=datetime.combine(date_from, time.min) if date_from else None,
            date_to=datetime.combine(date_to, time.max) if date_to else None,
            page=page,
            page_size=page_size,
        )

    @app.get("/appointments/{appointment_id}", response_model=Appointment)
    def get_appointment(appointment_id: str, requested_by: str) -> Appointment:
        """Get an appointment (parties only)."""
        return app.state.manager.get(appointment_id, requested_by)

    @app.patch("/appointments/{appointment_id}", response_model=Appointment)
    def update_appointment(appointment_id: str, data: UpdateAppointment) -> Appointment:
        """Reschedule and/or update notes and linked resource in one write."""
        details = {
            field: getattr(data, field)
            for field in ("notes", "linked_resource_id")
            if field in data.model_fields_set
        }
        return app.state.manager.modify(
            appointment_id,
            data.requested_by,
            new_start=data.start_time,
            new_end_or_duration=data.end_or_duration(),
            **details,
        )

    @app.post("/appointments/{appointment_id}/status", response_model=Appointment)
    def change_status(appointment_id: str, data: ChangeStatus) -> Appointment:
        """Complete, cancel or mark an appointment as no-show."""
        return app.state.manager.change_status(appointment_id, data.status, data.requested_by)

    @app.delete("/appointments/{appointment_id}", response_model=Appointment)
    def cancel_appointment(appointment_id: str, requested_by: str) -> Appointment:
        """Cancel an appointment (kept for history, frees the slot)."""
        return app.state.manager.cancel(appointment_id, requested_by)

    # --- Availability Routes ---

    @app.get("/providers/{provider_id}/availability", response_model=ProviderAvailability)
    def get_availability(
        provider_id: str,
        from_date: date,
        to_date: date,
        start_hour: int | None = None,
        end_hour: int | None = None,
        slot_minutes: int | None = None,
    ) -> ProviderAvailability:
        """Free slots for a provider between two dates (inclusive)."""
        overrides = {
            key: value
            for key, value in (
                ("start_hour", start_hour),
                ("end_hour", end_hour),
                ("slot_duration_minutes", slot_minutes),
            )
            if value is not None
        }
        working_hours = None
        if overrides:
            base = app.state.manager.working_hours.model_dump()
            try:
                working_hours = WorkingHours.model_validate({**base, **overrides})
            except ValidationError as e:
                raise HTTPException(status_code=422, detail=str(e)) from e

        return app.state.manager.availability(provider_id, from_date, to_date, working_hours)

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    return app
