"""Support ticket endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.ticket_service import TicketService
from labor_portal.services.utils import is_missing, validate_user_id

router = APIRouter()


@router.get("/api/tickets")
def list_tickets(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(TicketService(session).get_tickets(user_id))


@router.post("/api/tickets")
def open_ticket(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    user_id = validate_user_id(body.get("user_id"))
    ticket = TicketService(session).open_ticket(user_id, body.get("title"), body.get("category"))
    return ok(ticket, message=f"Ticket {ticket.ticket_number} opened")


@router.put("/api/tickets")
def close_ticket(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    user_id = validate_user_id(body.get("user_id"))
    if is_missing(body.get("ticket_id")):
        raise InputValidationError("ticket_id is required")
    ticket = TicketService(session).close_ticket(user_id, body["ticket_id"])
    return ok(ticket, message=f"Ticket {ticket.ticket_number} closed")
