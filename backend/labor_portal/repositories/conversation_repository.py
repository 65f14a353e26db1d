"""
对话记录 Repository
保存每轮对话的用户消息和助手回复
"""

from typing import List

from sqlmodel import Session, select, col

from labor_portal.models import Conversation, MessageRole


class ConversationRepository:
    """
    对话记录数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def add_message(self, user_id: str, role: MessageRole, content: str) -> Conversation:
        """
        追加一条对话消息

        Args:
            user_id: 用户 UUID
            role: 消息角色
            content: 消息内容

        Returns:
            创建的 Conversation 对象
        """
        message = Conversation(user_id=user_id, role=role, content=content)
        self.session.add(message)
        self.session.commit()
        self.session.refresh(message)
        return message

    def get_recent(self, user_id: str, limit: int) -> List[Conversation]:
        """
        获取用户最近的 limit 条消息，按时间正序返回

        Args:
            user_id: 用户 UUID
            limit: 条数

        Returns:
            Conversation 对象列表
        """
        statement = (
            select(Conversation)
            .where(Conversation.user_id == user_id)
            .order_by(col(Conversation.created_at).desc())
            .limit(limit)
        )
        messages = self.session.exec(statement).all()
        return list(reversed(messages))
