"""User profile endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.services.dashboard_service import DashboardService
from labor_portal.services.profile_service import ProfileService
from labor_portal.services.utils import validate_user_id

router = APIRouter()


@router.get("/api/user/profile")
def get_profile(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    """Returns ``data: null`` when the user has not registered yet."""
    return ok(ProfileService(session).get_profile(user_id))


@router.post("/api/user/profile")
def save_profile(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    payload = dict(body)
    user_id = validate_user_id(payload.pop("user_id", None))
    return ok(ProfileService(session).upsert_profile(user_id, payload), message="Profile saved")


@router.get("/api/user/dashboard")
def dashboard(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    """Profile, current active contract and resume completion in one call."""
    return ok(DashboardService(session).get_user_data(user_id))
