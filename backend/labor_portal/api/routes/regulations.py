"""Work regulation endpoints (read-only)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from labor_portal.api.deps import get_session
from labor_portal.api.responses import ok
from labor_portal.services.regulation_service import RegulationService

router = APIRouter()


@router.get("/api/regulations")
def list_regulations(
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    """``search`` takes precedence over ``category``; neither lists everything."""
    service = RegulationService(session)
    if search:
        return ok(service.search_regulations(search))
    if category:
        return ok(service.get_regulations_by_category(category))
    return ok(service.get_regulations())
