"""
主动提醒域模型 - 主动事件表
"""

from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import Field, Column, JSON
from sqlalchemy import UniqueConstraint

from .base import TimestampModel, new_id, utc_now


class ProactiveEvent(TimestampModel, table=True):
    """
    主动事件表
    触发器检测到的待办事项，直到用户处理或关闭前一直保持待处理
    """
    __tablename__ = "proactive_events"

    # 复合唯一约束：同一用户同一事件类型最多一条待处理事件
    # pending_key 在事件被处理后置空，NULL 不参与唯一性比较
    __table_args__ = (UniqueConstraint("user_id", "pending_key", name="uix_user_pending_event"),)

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    # 事件类型，如 ticket_follow_up_needed
    event_type: str = Field(index=True, nullable=False)

    # 触发上下文快照（合同 ID、剩余天数等）
    event_data: Optional[Dict[str, Any]] = Field(default_factory=dict, sa_column=Column(JSON))

    # 给用户的建议文案
    suggested_action: str = Field(nullable=False)

    detected_at: datetime = Field(default_factory=utc_now, index=True, nullable=False)

    # 核心状态字段
    acted: bool = Field(default=False, index=True, nullable=False)

    action_taken: Optional[str] = Field(default=None)

    action_at: Optional[datetime] = Field(default=None)

    # 去重键：待处理期间等于 event_type，处理后为 NULL
    pending_key: Optional[str] = Field(default=None)
