"""Personalized welcome message."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.services.welcome_service import WelcomeService

router = APIRouter()


@router.get("/api/welcome")
def welcome(
    user_id: str = Depends(require_user_id),
    user_name: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    text = WelcomeService(session).generate_welcome_message(user_id, user_name)
    return ok({"message": text}, message=text)
