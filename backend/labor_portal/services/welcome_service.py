"""
欢迎语服务
按优先级生成个性化欢迎语：待处理主动事件 > 48 小时内未完成的操作 > 默认服务介绍
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlmodel import Session

from labor_portal.agent.prompts import (
    WELCOME_DEFAULT_TEMPLATE,
    WELCOME_EVENT_TEMPLATE,
    WELCOME_RECENT_INTENT_MESSAGES,
    welcome_greeting,
)
from labor_portal.config import RECENT_ACTIVITY_HOURS, WELCOME_EVENTS_LIMIT
from labor_portal.models import as_utc, utc_now
from labor_portal.proactive.engine import ProactiveEngine
from labor_portal.repositories import ProfileRepository
from labor_portal.services.utils import is_missing, validate_user_id


class WelcomeService:

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime] = utc_now,
        engine: Optional[ProactiveEngine] = None
    ):
        self.profiles = ProfileRepository(session)
        self.clock = clock
        self.engine = engine or ProactiveEngine(session, clock=clock)

    def _recent_intent_message(self, user_id: str) -> Optional[str]:
        behavior = self.profiles.get_behavior(user_id)
        if behavior is None or is_missing(behavior.last_message):
            return None
        message = WELCOME_RECENT_INTENT_MESSAGES.get(behavior.last_intent)
        if message is None:
            return None
        if as_utc(self.clock()) - as_utc(behavior.updated_at) >= timedelta(hours=RECENT_ACTIVITY_HOURS):
            return None
        return message

    def generate_welcome_message(self, user_id: str, user_name: Optional[str] = None) -> str:
        """
        生成欢迎语

        Args:
            user_id: 用户 UUID
            user_name: 显示的姓名（可选，缺省时使用资料中的姓名）

        Returns:
            阿拉伯语欢迎语
        """
        validate_user_id(user_id)
        if is_missing(user_name):
            profile = self.profiles.get_by_user_id(user_id)
            user_name = profile.full_name if profile else None
        greeting = welcome_greeting(user_name)

        events = self.engine.get_pending_events(user_id, WELCOME_EVENTS_LIMIT)
        if events:
            print(f"[WelcomeService] 使用待处理事件: {events[0].event_type}")
            return WELCOME_EVENT_TEMPLATE.format(greeting=greeting, suggested_action=events[0].suggested_action)

        message = self._recent_intent_message(user_id)
        if message:
            return f"{greeting} 👋\n\n{message}"

        return WELCOME_DEFAULT_TEMPLATE.format(greeting=greeting)
