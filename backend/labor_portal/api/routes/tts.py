"""Text-to-speech endpoint returning raw MP3 bytes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from labor_portal.api.deps import get_speech_service
from labor_portal.services.speech_service import SpeechService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/tts")
def text_to_speech(body: Dict[str, Any] = Body(...), speech: SpeechService = Depends(get_speech_service)):
    audio = speech.synthesize(body.get("text"))
    logger.info("Generated %d bytes of speech", len(audio))
    return Response(content=audio, media_type="audio/mpeg")
