"""
用户资料 Repository
提供 user_profile 和 user_behavior 的增删改查操作
"""

from typing import Optional, Dict, Any

from sqlmodel import Session, select

from labor_portal.models import UserProfile, UserBehavior


class ProfileRepository:
    """
    用户资料数据访问对象
    封装所有与 user_profile 和 user_behavior 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    # ==================== UserProfile 操作 ====================

    def get_by_user_id(self, user_id: str) -> Optional[UserProfile]:
        """
        根据用户 ID 获取资料

        Args:
            user_id: 用户 UUID

        Returns:
            UserProfile 对象，不存在则返回 None
        """
        statement = select(UserProfile).where(UserProfile.user_id == user_id)
        return self.session.exec(statement).first()

    def upsert(self, user_id: str, data: Dict[str, Any]) -> UserProfile:
        """
        创建或更新用户资料
        只修改 data 中出现的字段

        Args:
            user_id: 用户 UUID
            data: 资料字段（full_name、phone、email 等）

        Returns:
            保存后的 UserProfile 对象
        """
        profile = self.get_by_user_id(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id, **data)
        else:
            for key, value in data.items():
                setattr(profile, key, value)
        self.session.add(profile)
        self.session.commit()
        self.session.refresh(profile)
        return profile

    # ==================== UserBehavior 操作 ====================

    def get_behavior(self, user_id: str) -> Optional[UserBehavior]:
        statement = select(UserBehavior).where(UserBehavior.user_id == user_id)
        return self.session.exec(statement).first()

    def get_or_create_behavior(self, user_id: str) -> UserBehavior:
        """
        获取用户行为记录，不存在则创建空记录

        Args:
            user_id: 用户 UUID

        Returns:
            UserBehavior 对象
        """
        behavior = self.get_behavior(user_id)
        if behavior is None:
            behavior = UserBehavior(user_id=user_id)
            self.session.add(behavior)
            self.session.commit()
            self.session.refresh(behavior)
        return behavior

    def save_behavior(self, behavior: UserBehavior) -> UserBehavior:
        self.session.add(behavior)
        self.session.commit()
        self.session.refresh(behavior)
        return behavior

    def list_behaviors_with_complaints(self, threshold: int):
        """
        获取连续差评次数达到阈值的用户行为记录

        Args:
            threshold: 连续差评阈值

        Returns:
            UserBehavior 对象列表
        """
        statement = select(UserBehavior).where(
            UserBehavior.consecutive_complaints_count >= threshold
        )
        return self.session.exec(statement).all()
