"""Chat endpoint.

Both sides of the turn are stored by the chat service. Tool usage and
model metadata stay on the server; the client only sees the reply and
pending suggestions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.agent.model_router import ModelRouter
from labor_portal.api.deps import get_model_router, get_session
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/chat")
def chat(
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    router_: ModelRouter = Depends(get_model_router),
):
    history = body.get("history")
    if history is not None and not isinstance(history, list):
        raise InputValidationError("history must be a list")

    reply = ChatService(session, router_).send_message(body.get("user_id"), body.get("message"), history)
    logger.info(
        "Chat reply for %s: intent=%s model=%s tools=%s",
        body.get("user_id"), reply.intent, reply.model_name, reply.tools_used,
    )
    return ok(reply.to_public_dict())
