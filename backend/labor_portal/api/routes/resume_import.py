"""Resume upload and confirm endpoints.

Upload parses a file (or pasted text) and returns proposed profile changes
under a ``session_id``; nothing is written until the user confirms.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from sqlmodel import Session

from labor_portal.agent.model_router import ModelRouter
from labor_portal.api.deps import get_model_router, get_session
from labor_portal.api.responses import ok
from labor_portal.services.resume_import_service import ResumeImportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/resume/upload")
def upload_resume(
    file: Optional[UploadFile] = File(default=None),
    user_id: Optional[str] = Form(default=None),
    text_content: Optional[str] = Form(default=None),
    session: Session = Depends(get_session),
    router_: ModelRouter = Depends(get_model_router),
):
    file_bytes = file.file.read() if file is not None else None
    result = ResumeImportService(session, router_).upload(
        user_id,
        text_content=text_content,
        file_bytes=file_bytes,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
    )
    logger.info("Resume parsed for %s: %s", user_id, result["session_id"])
    return ok(result, message=result["summary"])


@router.get("/api/resume/upload")
def pending_upload(
    session_id: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
    router_: ModelRouter = Depends(get_model_router),
):
    """Proposed changes of an unconfirmed upload."""
    return ok(ResumeImportService(session, router_).get_pending(session_id))


@router.post("/api/resume/confirm-update")
def confirm_update(
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    router_: ModelRouter = Depends(get_model_router),
):
    result = ResumeImportService(session, router_).confirm(
        body.get("session_id"), body.get("user_id"), body.get("confirmed_changes")
    )
    return ok(result, message="Profile updated from the uploaded resume")
