"""FastAPI dependencies: database session, model router, speech service."""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Query
from sqlmodel import Session

from labor_portal.agent.model_router import ModelRouter, model_router
from labor_portal.db.init_db import get_engine
from labor_portal.services.speech_service import SpeechService
from labor_portal.services.utils import validate_user_id

_engine = None


def get_db_engine():
    """Lazily create the process-wide engine on first request."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


def get_session() -> Generator[Session, None, None]:
    """One session per request, closed when the response is sent."""
    with Session(get_db_engine()) as session:
        yield session


def get_model_router() -> ModelRouter:
    return model_router


def get_speech_service() -> SpeechService:
    return SpeechService()


def require_user_id(user_id: Optional[str] = Query(default=None)) -> str:
    """Validate the ``user_id`` query parameter (UUID v1-v5)."""
    return validate_user_id(user_id)
