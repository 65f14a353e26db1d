"""Domestic labor request endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.services.domestic_service import DomesticService
from labor_portal.services.utils import validate_user_id

router = APIRouter()


@router.get("/api/domestic")
def list_requests(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(DomesticService(session).get_domestic_requests(user_id))


@router.post("/api/domestic")
def create_request(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    user_id = validate_user_id(body.get("user_id"))
    request = DomesticService(session).create_domestic_request(
        user_id=user_id,
        request_type=body.get("request_type"),
        worker_nationality=body.get("worker_nationality"),
        request_details=body.get("request_details"),
    )
    return ok(request, message="Domestic labor request submitted")
