"""
主动事件 Repository
提供 proactive_events 的去重写入、待处理查询和处理标记
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col

from labor_portal.models import ProactiveEvent


class ProactiveRepository:
    """
    主动事件数据访问对象

    去重规则：同一 (user_id, event_type) 在待处理期间只保留一条记录。
    先查询是否已存在，再插入；并发插入由 (user_id, pending_key) 唯一约束兜底。
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_id(self, event_id: str) -> Optional[ProactiveEvent]:
        return self.session.get(ProactiveEvent, event_id)

    def find_pending(self, user_id: str, event_type: str) -> Optional[ProactiveEvent]:
        """
        查询用户某类型的待处理事件

        Args:
            user_id: 用户 UUID
            event_type: 事件类型

        Returns:
            ProactiveEvent 对象，不存在则返回 None
        """
        statement = select(ProactiveEvent).where(
            ProactiveEvent.user_id == user_id,
            ProactiveEvent.event_type == event_type,
            ProactiveEvent.acted == False  # noqa: E712
        )
        return self.session.exec(statement).first()

    def create_if_absent(
        self,
        user_id: str,
        event_type: str,
        event_data: Dict[str, Any],
        suggested_action: str,
        detected_at: datetime
    ) -> Tuple[ProactiveEvent, bool]:
        """
        写入待处理事件，已存在同类型待处理事件时不重复写入

        Args:
            user_id: 用户 UUID
            event_type: 事件类型
            event_data: 触发上下文
            suggested_action: 建议文案
            detected_at: 检测时间

        Returns:
            (事件对象, 是否新建) 元组
        """
        existing = self.find_pending(user_id, event_type)
        if existing is not None:
            return existing, False

        event = ProactiveEvent(
            user_id=user_id,
            event_type=event_type,
            event_data=event_data,
            suggested_action=suggested_action,
            detected_at=detected_at,
            pending_key=event_type
        )
        self.session.add(event)
        try:
            self.session.commit()
        except IntegrityError:
            # 并发写入：另一个调用方已插入同类型待处理事件
            self.session.rollback()
            existing = self.find_pending(user_id, event_type)
            if existing is None:
                raise
            return existing, False

        self.session.refresh(event)
        return event, True

    def get_pending(self, user_id: str, limit: int) -> List[ProactiveEvent]:
        """
        获取用户未处理的事件，最新检测到的在前

        Args:
            user_id: 用户 UUID
            limit: 最大条数

        Returns:
            ProactiveEvent 对象列表
        """
        statement = (
            select(ProactiveEvent)
            .where(
                ProactiveEvent.user_id == user_id,
                ProactiveEvent.acted == False  # noqa: E712
            )
            .order_by(col(ProactiveEvent.detected_at).desc())
            .limit(limit)
        )
        return self.session.exec(statement).all()

    def mark_acted(
        self,
        event: ProactiveEvent,
        action_taken: str,
        action_at: datetime
    ) -> ProactiveEvent:
        """
        标记事件已处理，并释放去重键以便之后再次触发

        Args:
            event: 待处理的 ProactiveEvent 对象
            action_taken: 用户采取的操作
            action_at: 处理时间

        Returns:
            更新后的 ProactiveEvent 对象
        """
        event.acted = True
        event.action_taken = action_taken
        event.action_at = action_at
        event.pending_key = None
        self.session.add(event)
        self.session.commit()
        self.session.refresh(event)
        return event
