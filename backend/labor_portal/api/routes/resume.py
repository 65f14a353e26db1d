"""Resume and resume-course endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlmodel import Session

from labor_portal.api.deps import get_session, require_user_id
from labor_portal.api.responses import ok
from labor_portal.exceptions import InputValidationError, NotFoundError
from labor_portal.services.resume_service import ResumeService
from labor_portal.services.utils import is_missing, validate_user_id

router = APIRouter()


@router.get("/api/resume")
def get_resume(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    return ok(ResumeService(session).get_resume_with_courses(user_id))


@router.post("/api/resume")
def save_resume(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    """Create the resume or update only the provided fields."""
    payload = dict(body)
    user_id = validate_user_id(payload.pop("user_id", None))
    return ok(ResumeService(session).update_resume(user_id, payload), message="Resume saved")


@router.get("/api/resume/courses")
def list_courses(resume_id: Optional[str] = Query(default=None), session: Session = Depends(get_session)):
    if is_missing(resume_id):
        raise InputValidationError("resume_id is required")
    return ok(ResumeService(session).get_courses(resume_id))


@router.post("/api/resume/courses")
def add_course(body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    if is_missing(body.get("resume_id")):
        raise InputValidationError("resume_id is required")
    course = ResumeService(session).add_course(
        resume_id=body["resume_id"],
        course_name=body.get("course_name"),
        provider=body.get("provider"),
        date_completed=body.get("date_completed"),
        certificate_url=body.get("certificate_url"),
    )
    return ok(course, message="Course added")


@router.delete("/api/resume/courses")
def delete_course(course_id: Optional[str] = Query(default=None), session: Session = Depends(get_session)):
    if is_missing(course_id):
        raise InputValidationError("course_id is required")
    if not ResumeService(session).delete_course(course_id):
        raise NotFoundError(f"Course not found: {course_id}")
    return ok({"course_id": course_id}, message="Course deleted")
