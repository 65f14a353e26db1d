"""Certificate endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError
from labor_portal.services.certificate_service import CertificateService
from labor_portal.services.utils import is_missing, validate_user_id

router = APIRouter()


@router.get("/api/certificates")
def list_certificates(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(CertificateService(session).get_certificates(user_id))


@router.post("/api/certificates")
def issue_certificate(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    user_id = validate_user_id(body.get("user_id"))
    certificate_type = body.get("certificate_type")
    if is_missing(certificate_type):
        raise InputValidationError("certificate_type is required")

    certificate = CertificateService(session).generate(user_id, certificate_type)
    return ok(certificate, message="Certificate issued")
