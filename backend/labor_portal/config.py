"""
配置管理模块

遵循安全协议：从不读取 .env 文件，只从系统环境变量获取配置和密钥。
LLM 提供商配置见 llm_config.json，由 LLMFactory 加载。
"""

import os
from pathlib import Path
from typing import List

# 项目根目录：backend/
BACKEND_ROOT: Path = Path(__file__).parent.parent

DEFAULT_PORT: int = 8000
DEFAULT_DATABASE_PATH: str = "database.db"
DEFAULT_LLM_CONFIG_FILENAME: str = "llm_config.json"

# 主动事件
PENDING_EVENTS_LIMIT: int = 5
PROACTIVE_CACHE_TTL_SECONDS: int = 15 * 60
CONTRACT_EXPIRY_WINDOW_DAYS: int = 30
APPOINTMENT_REMINDER_WINDOW_DAYS: int = 3
TICKET_FOLLOW_UP_AFTER_DAYS: int = 3
COMPLAINTS_THRESHOLD: int = 2

# 智能体
AGENT_MAX_STEPS: int = 10
CHAT_HISTORY_WINDOW: int = 5

# 欢迎语
WELCOME_EVENTS_LIMIT: int = 3
RECENT_ACTIVITY_HOURS: int = 48

# 简历导入
RESUME_UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024
RESUME_TEXT_MIN_LENGTH: int = 50
RESUME_TEXT_MAX_LENGTH: int = 15000
RESUME_PARSE_MAX_CHARS: int = 8000
RESUME_IMPORT_TTL_SECONDS: int = 30 * 60

# 语音
TRANSCRIPTION_MODEL: str = "whisper-1"
TRANSCRIPTION_LANGUAGE: str = "ar"
ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
DEFAULT_ELEVENLABS_VOICE_ID: str = "3nav5pHC1EYvWOd5LmnA"
DEFAULT_ELEVENLABS_MODEL_ID: str = "eleven_multilingual_v2"

DEFAULT_CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def get_database_url() -> str:
    """
    获取数据库连接 URL
    优先使用 DATABASE_URL，其次 DATABASE_PATH 指向的 SQLite 文件
    """
    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        return database_url

    db_path = os.environ.get("DATABASE_PATH", DEFAULT_DATABASE_PATH)
    # 相对路径从 backend/ 解析
    if not os.path.isabs(db_path):
        db_path = str(BACKEND_ROOT / db_path)
    return f"sqlite:///{db_path}"


def get_llm_config_path() -> str:
    """LLM 配置文件路径，可用 LLM_CONFIG_PATH 覆盖"""
    return os.environ.get("LLM_CONFIG_PATH", str(BACKEND_ROOT / DEFAULT_LLM_CONFIG_FILENAME))


def get_port() -> int:
    raw = os.getenv("PORTAL_PORT")
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            pass
    return DEFAULT_PORT


def get_cors_origins() -> List[str]:
    raw = os.getenv("PORTAL_CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_openai_api_key() -> str:
    return os.getenv("OPENAI_API_KEY", "")


def get_elevenlabs_api_key() -> str:
    return os.getenv("ELEVENLABS_API_KEY", "")


def get_elevenlabs_voice_id() -> str:
    return os.getenv("ELEVENLABS_VOICE_ID", DEFAULT_ELEVENLABS_VOICE_ID)


def get_elevenlabs_model_id() -> str:
    return os.getenv("ELEVENLABS_MODEL_ID", DEFAULT_ELEVENLABS_MODEL_ID)
