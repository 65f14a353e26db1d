"""Voice endpoint.

JSON ``{"action": "greeting"}`` returns the spoken greeting. Otherwise the
request is multipart with ``audio`` and ``user_id``: the audio is
transcribed and passed to the chat service. Any failure after input
validation is answered with 200 and an apology so the conversation
continues.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from labor_portal.agent.model_router import ModelRouter
from labor_portal.agent.prompts import (
    EMPTY_REPLY_FALLBACK,
    VOICE_APOLOGY,
    VOICE_EMPTY_AUDIO,
    VOICE_GREETING,
    VOICE_NOT_HEARD,
)
from labor_portal.api.deps import get_model_router, get_session, get_speech_service
from labor_portal.exceptions import InputValidationError
from labor_portal.services.chat_service import ChatService
from labor_portal.services.speech_service import SpeechService
from labor_portal.services.utils import validate_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


def voice_reply(user_text: str, ai_text: str):
    return {"userText": user_text, "aiText": ai_text, "audio": None}


@router.post("/api/voice")
async def voice(
    request: Request,
    session: Session = Depends(get_session),
    router_: ModelRouter = Depends(get_model_router),
    speech: SpeechService = Depends(get_speech_service),
):
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        body = await request.json()
        if isinstance(body, dict) and body.get("action") == "greeting":
            return voice_reply("", VOICE_GREETING)
        raise InputValidationError("audio is required")

    form = await request.form()
    upload = form.get("audio")
    if upload is None or isinstance(upload, str):
        raise InputValidationError("audio is required")
    user_id = validate_user_id(form.get("user_id"))

    audio = await upload.read()
    if not audio:
        return voice_reply("", VOICE_EMPTY_AUDIO)

    try:
        user_text = await run_in_threadpool(
            speech.transcribe,
            audio,
            upload.filename or "recording.webm",
            upload.content_type or "audio/webm",
        )
        if not user_text:
            return voice_reply("", VOICE_NOT_HEARD)

        reply = await run_in_threadpool(ChatService(session, router_).send_message, user_id, user_text)
        return voice_reply(user_text, reply.response or EMPTY_REPLY_FALLBACK)
    except Exception:
        logger.exception("Voice request failed for %s", user_id)
        return voice_reply("", VOICE_APOLOGY)
