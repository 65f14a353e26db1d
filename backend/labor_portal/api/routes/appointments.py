"""Labor office appointment endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.appointment_service import AppointmentService
from labor_portal.services.utils import is_missing, validate_user_id

router = APIRouter()


@router.get("/api/appointments")
def list_appointments(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(AppointmentService(session).get_appointments(user_id))


@router.post("/api/appointments")
def appointment_action(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    """Book by default; ``action=cancel`` / ``action=complete`` take ``appointment_id``."""
    payload = dict(body)
    action = payload.pop("action", None) or "book"
    service = AppointmentService(session)

    if action == "book":
        user_id = validate_user_id(payload.get("user_id"))
        appointment = service.book_appointment(
            user_id=user_id,
            appointment_type=payload.get("appointment_type"),
            appointment_date=payload.get("appointment_date"),
            notes=payload.get("notes"),
            office_location=payload.get("office_location"),
        )
        return ok(appointment, message="Appointment booked")

    if action not in ("cancel", "complete"):
        raise InputValidationError(f"Unsupported appointment action: {action}")
    appointment_id = payload.get("appointment_id")
    if is_missing(appointment_id):
        raise InputValidationError("appointment_id is required")

    if action == "cancel":
        return ok(service.cancel_appointment(appointment_id), message="Appointment cancelled")
    return ok(service.complete_appointment(appointment_id), message="Appointment completed")
