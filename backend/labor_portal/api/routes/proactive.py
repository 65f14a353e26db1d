"""Proactive event endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.config import PENDING_EVENTS_LIMIT
from labor_portal.proactive.engine import ProactiveEngine
from labor_portal.services.utils import validate_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/proactive/events")
def pending_events(
    user_id: str = Depends(require_user_id),
    limit: int = Query(default=PENDING_EVENTS_LIMIT, ge=1, le=PENDING_EVENTS_LIMIT),
    session: Session = Depends(get_session),
):
    """Unacted events, newest first."""
    return ok(ProactiveEngine(session).get_pending_events(user_id, limit))


@router.patch("/api/proactive/events/{event_id}")
def mark_event_acted(
    event_id: str,
    body: Optional[Dict[str, Any]] = Body(default=None),
    session: Session = Depends(get_session),
):
    """Mark an event acted; ``action_taken`` defaults to ``user_action``."""
    event = ProactiveEngine(session).mark_event_acted(event_id, (body or {}).get("action_taken"))
    return ok(event, message="Event updated")


@router.post("/api/proactive/run")
def run_triggers(body: Optional[Dict[str, Any]] = Body(default=None), session: Session = Depends(get_session)):
    """Run every trigger now, for all users or only ``user_id``."""
    engine = ProactiveEngine(session)
    user_id = (body or {}).get("user_id")
    if user_id is None:
        report = engine.run_all_triggers()
    else:
        report = engine.run_for_user(validate_user_id(user_id))

    if report.failed_triggers:
        logger.warning("Triggers failed: %s", ", ".join(report.failed_triggers))
    return ok(report.to_dict())
