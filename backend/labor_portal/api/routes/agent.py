"""Agent action endpoints.

``GET`` lists the action catalogue; ``POST`` runs one action through the
dispatcher, which writes the audit row whether or not the action succeeds.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.agent.actions import ACTION_REGISTRY
from labor_portal.agent.dispatcher import ActionDispatcher
from labor_portal.api.deps import get_session
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.utils import is_missing

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/agent/action")
def list_actions():
    return ok({
        "available_actions": list(ActionDispatcher.available_actions()),
        "actions": {
            action.value: {
                "required": list(spec.required),
                "optional": list(spec.optional),
                "description": spec.description,
            }
            for action, spec in ACTION_REGISTRY.items()
        },
        "description": "Available actions that the AI agent can execute",
    })


@router.post("/api/agent/action")
def run_action(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    payload = dict(body)
    action = payload.pop("action", None)
    if is_missing(action):
        raise InputValidationError("action is required")

    result = ActionDispatcher(session).dispatch(action, payload)
    logger.info("Agent action %s executed", action)
    return ok(result, message=f"Action '{action}' executed successfully")
