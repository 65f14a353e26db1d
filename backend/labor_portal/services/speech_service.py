"""
语音服务

- 语音转文字：OpenAI Whisper（whisper-1，阿拉伯语）
- 文字转语音：ElevenLabs HTTP API，返回 MP3 字节
"""

from typing import Optional

import httpx
from openai import OpenAI, OpenAIError

from labor_portal.config import (
    ELEVENLABS_BASE_URL,
    TRANSCRIPTION_LANGUAGE,
    TRANSCRIPTION_MODEL,
    get_elevenlabs_api_key,
    get_elevenlabs_model_id,
    get_elevenlabs_voice_id,
    get_openai_api_key,
)
from labor_portal.exceptions import InputValidationError, UpstreamError
from labor_portal.services.utils import is_missing


# ElevenLabs 语音参数
VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "speed": 1.2,
}

TTS_TIMEOUT_SECONDS = 30.0


class SpeechService:
    """
    语音服务
    客户端可注入，测试时替换为假对象
    """

    def __init__(
        self,
        openai_client: Optional[OpenAI] = None,
        http_client: Optional[httpx.Client] = None
    ):
        self._openai_client = openai_client
        self._http_client = http_client

    def _get_openai_client(self) -> OpenAI:
        if self._openai_client is None:
            api_key = get_openai_api_key()
            if not api_key:
                raise UpstreamError("openai", "OPENAI_API_KEY is not set")
            self._openai_client = OpenAI(api_key=api_key)
        return self._openai_client

    def transcribe(
        self,
        audio: bytes,
        filename: str = "recording.webm",
        content_type: str = "audio/webm"
    ) -> str:
        """
        语音转文字

        Args:
            audio: 音频字节
            filename: 文件名（Whisper 根据扩展名判断格式）
            content_type: MIME 类型

        Returns:
            去除首尾空白的识别文本，可能为空字符串

        Raises:
            UpstreamError: OpenAI 调用失败
        """
        client = self._get_openai_client()
        try:
            transcription = client.audio.transcriptions.create(
                file=(filename, audio, content_type),
                model=TRANSCRIPTION_MODEL,
                language=TRANSCRIPTION_LANGUAGE
            )
        except OpenAIError as e:
            raise UpstreamError("openai", str(e)) from e

        text = (transcription.text or "").strip()
        print(f"[SpeechService] 识别结果: {text[:50] or 'EMPTY'}")
        return text

    def synthesize(self, text: str) -> bytes:
        """
        文字转语音

        Args:
            text: 要朗读的文本

        Returns:
            MP3 音频字节

        Raises:
            InputValidationError: 文本为空
            UpstreamError: 未配置 API Key 或 ElevenLabs 返回错误
        """
        if is_missing(text):
            raise InputValidationError("text is required")

        api_key = get_elevenlabs_api_key()
        if not api_key:
            raise UpstreamError("elevenlabs", "ELEVENLABS_API_KEY is not set")

        url = f"{ELEVENLABS_BASE_URL}/text-to-speech/{get_elevenlabs_voice_id()}"
        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": api_key,
        }
        body = {
            "text": text,
            "model_id": get_elevenlabs_model_id(),
            "voice_settings": VOICE_SETTINGS,
        }

        print(f"[SpeechService] 生成语音: {text[:50]}")
        try:
            if self._http_client is not None:
                response = self._http_client.post(url, headers=headers, json=body)
            else:
                with httpx.Client(timeout=TTS_TIMEOUT_SECONDS) as client:
                    response = client.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise UpstreamError("elevenlabs", str(e)) from e

        if response.status_code != 200:
            raise UpstreamError("elevenlabs", f"{response.status_code} {response.text}")

        print(f"[SpeechService] 语音生成完成: {len(response.content)} bytes")
        return response.content
