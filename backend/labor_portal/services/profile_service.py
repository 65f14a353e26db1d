"""
用户资料与行为服务
"""

from typing import Any, Dict, Optional

from sqlmodel import Session

from labor_portal.config import COMPLAINTS_THRESHOLD
from labor_portal.exceptions import InputValidationError
from labor_portal.models import UserProfile, UserBehavior
from labor_portal.repositories import ProfileRepository
from labor_portal.services.utils import is_missing


PROFILE_FIELDS = ("full_name", "phone", "email", "national_id", "nationality")

# 评分小于等于该值视为差评
COMPLAINT_SCORE_MAX = 2


class ProfileService:
    """
    用户资料服务
    资料在首次访问时创建，之后只更新不删除
    """

    def __init__(self, session: Session):
        self.repo = ProfileRepository(session)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.repo.get_by_user_id(user_id)

    def upsert_profile(self, user_id: str, data: Dict[str, Any]) -> UserProfile:
        """
        创建或更新资料，首次创建必须提供 full_name

        Args:
            user_id: 用户 UUID
            data: 资料字段

        Returns:
            保存后的 UserProfile 对象
        """
        fields = {key: data[key] for key in PROFILE_FIELDS if data.get(key) is not None}
        if self.repo.get_by_user_id(user_id) is None and is_missing(fields.get("full_name")):
            raise InputValidationError("full_name is required")
        return self.repo.upsert(user_id, fields)

    def touch_behavior(self, user_id: str, message: str, intent: Optional[str]) -> UserBehavior:
        """记录最近一条消息和意图"""
        behavior = self.repo.get_or_create_behavior(user_id)
        behavior.last_message = message
        behavior.last_intent = intent
        return self.repo.save_behavior(behavior)

    def record_feedback(self, user_id: str, score: Any, message: Optional[str] = None) -> UserBehavior:
        """
        记录满意度评分
        差评累加连续差评次数，好评清零

        Args:
            user_id: 用户 UUID
            score: 1-5 的评分
            message: 反馈内容（可选）

        Returns:
            更新后的 UserBehavior 对象
        """
        try:
            score = int(score)
        except (TypeError, ValueError):
            raise InputValidationError(f"Invalid score: {score!r}")
        if not 1 <= score <= 5:
            raise InputValidationError("score must be between 1 and 5")

        behavior = self.repo.get_or_create_behavior(user_id)
        behavior.feedback_score = score
        if message:
            behavior.last_message = message
        if score <= COMPLAINT_SCORE_MAX:
            behavior.consecutive_complaints_count += 1
        else:
            behavior.consecutive_complaints_count = 0
        behavior = self.repo.save_behavior(behavior)

        if behavior.consecutive_complaints_count >= COMPLAINTS_THRESHOLD:
            print(f"[ProfileService] 用户 {user_id} 连续差评 {behavior.consecutive_complaints_count} 次")
        return behavior
