"""
审计域模型 - 智能体动作日志表
"""

from typing import Optional, Any

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id


class AgentActionLog(TimestampModel, table=True):
    """
    智能体动作日志表
    只追加，每次分发都会写入一行，无论成功与否
    """
    __tablename__ = "agent_actions_log"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 未携带 user_id 的动作（如 end_contract）记为 None
    user_id: Optional[str] = Field(default=None, index=True)

    action_type: str = Field(index=True, nullable=False)

    # 原始输入
    input_json: Optional[Any] = Field(default=None, sa_column=Column(JSON))

    # 原始输出，失败时为 {"error": "..."}
    output_json: Optional[Any] = Field(default=None, sa_column=Column(JSON))

    success: bool = Field(nullable=False)
