"""
会话域模型 - 对话记录表
"""

from enum import Enum

from sqlmodel import Field

from .base import TimestampModel, new_id


class MessageRole(str, Enum):
    """消息角色枚举"""
    USER = "user"
    ASSISTANT = "assistant"


class Conversation(TimestampModel, table=True):
    """
    对话记录表
    聊天接口同时存储用户消息和助手回复
    """
    __tablename__ = "conversations"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    role: MessageRole = Field(nullable=False)

    content: str = Field(nullable=False)
