"""
智能体动作审计日志 Repository
只追加，不修改不删除
"""

from typing import List, Optional, Any

from sqlmodel import Session, select, col

from labor_portal.models import AgentActionLog


class ActionLogRepository:
    """
    审计日志数据访问对象
    """

    def __init__(self, session: Session):
        self.session = session

    def append(
        self,
        action_type: str,
        input_json: Any,
        output_json: Any,
        success: bool,
        user_id: Optional[str] = None
    ) -> AgentActionLog:
        """
        追加一条审计记录

        Args:
            action_type: 动作名
            input_json: 原始输入载荷
            output_json: 处理结果或 {"error": "..."}
            success: 是否成功
            user_id: 用户 UUID（可选）

        Returns:
            创建的 AgentActionLog 对象
        """
        entry = AgentActionLog(
            user_id=user_id,
            action_type=action_type,
            input_json=input_json,
            output_json=output_json,
            success=success
        )
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_user(self, user_id: str) -> List[AgentActionLog]:
        statement = (
            select(AgentActionLog)
            .where(AgentActionLog.user_id == user_id)
            .order_by(col(AgentActionLog.created_at).asc())
        )
        return self.session.exec(statement).all()

    def get_all(self) -> List[AgentActionLog]:
        statement = select(AgentActionLog).order_by(col(AgentActionLog.created_at).asc())
        return self.session.exec(statement).all()
