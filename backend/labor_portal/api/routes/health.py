"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from labor_portal import __version__

router = APIRouter()


@router.get("/api/health")
def health():
    """Liveness check."""
    return {"status": "ok", "version": __version__}
