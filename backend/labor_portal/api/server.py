"""FastAPI application for the labor services portal.

Run with: uvicorn labor_portal.api.server:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from labor_portal import __version__
from labor_portal.api.responses import error_response
from labor_portal.api.routes import (
    agent,
    appointments,
    certificates,
    chat,
    contracts,
    domestic,
    health,
    proactive,
    profile,
    regulations,
    resume,
    resume_import,
    tickets,
    tts,
    voice,
    welcome,
)
from labor_portal.config import get_cors_origins, get_port
from labor_portal.db.init_db import init_db
from labor_portal.exceptions import LaborPortalError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Labor portal server started.")
    yield


async def handle_portal_error(request: Request, exc: LaborPortalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(400, message)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc) or "Internal server error")


def create_app(initialize_database: bool = True) -> FastAPI:
    """Build the application.

    ``initialize_database=False`` skips table creation and seeding at
    startup; tests pass it and override the session dependency instead.
    """
    app = FastAPI(
        title="Labor Portal",
        description="Labor services portal with an agent action dispatcher",
        version=__version__,
        lifespan=lifespan if initialize_database else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LaborPortalError, handle_portal_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    for module in (
        health,
        agent,
        contracts,
        certificates,
        appointments,
        resume,
        resume_import,
        regulations,
        tickets,
        domestic,
        proactive,
        profile,
        chat,
        voice,
        tts,
        welcome,
    ):
        app.include_router(module.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("labor_portal.api.server:app", host="0.0.0.0", port=get_port())
