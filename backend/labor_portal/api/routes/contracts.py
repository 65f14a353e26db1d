"""Employment contract endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.contract_service import ContractService
from labor_portal.services.utils import is_missing, validate_user_id

router = APIRouter()


@router.get("/api/contracts")
def list_contracts(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(ContractService(session).get_contracts(user_id))


@router.post("/api/contracts")
def contract_action(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    """``action=create`` (default) creates a contract; ``action=end`` ends one."""
    payload = dict(body)
    action = payload.pop("action", None) or "create"
    service = ContractService(session)

    if action == "create":
        validate_user_id(payload.get("user_id"))
        return ok(service.create_contract(payload), message="Contract created")
    if action == "end":
        if is_missing(payload.get("contract_id")):
            raise InputValidationError("contract_id is required")
        return ok(service.end_contract(payload["contract_id"]), message="Contract ended")
    raise InputValidationError(f"Unsupported contract action: {action}")
