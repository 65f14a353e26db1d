"""
用户域模型 - 用户资料表与行为表
"""

from typing import Optional
from sqlmodel import Field

from .base import TimestampModel, new_id


class UserProfile(TimestampModel, table=True):
    """
    用户资料表
    首次访问/注册时创建，永不删除
    """
    __tablename__ = "user_profile"

    # 主键
    id: str = Field(default_factory=new_id, primary_key=True)

    # 客户端生成并缓存的 UUID（v1-v5），所有劳工档案的归属键
    user_id: str = Field(unique=True, index=True, nullable=False)

    # 姓名，证书正文中使用
    full_name: str = Field(nullable=False)

    phone: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    national_id: Optional[str] = Field(default=None)
    nationality: Optional[str] = Field(default=None)


class UserBehavior(TimestampModel, table=True):
    """
    用户行为表
    记录最近一次对话意图和满意度反馈，供不满情绪触发器读取
    """
    __tablename__ = "user_behavior"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(unique=True, index=True, nullable=False)

    # 最近一条用户消息和识别出的意图
    last_message: Optional[str] = Field(default=None)
    last_intent: Optional[str] = Field(default=None)

    # 最近一次反馈评分：1-5
    feedback_score: Optional[int] = Field(default=None, ge=1, le=5)

    # 连续差评次数，好评时清零
    consecutive_complaints_count: int = Field(default=0, nullable=False)
