"""
工单域模型 - 工单表
"""

from enum import Enum

from sqlmodel import Field

from .base import TimestampModel, new_id


class TicketStatus(str, Enum):
    """工单状态枚举：closed 为终态"""
    OPEN = "open"
    CLOSED = "closed"


class Ticket(TimestampModel, table=True):
    """
    工单表
    创建即为 open，关闭后不可重开
    """
    __tablename__ = "tickets"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    # 对用户展示的工单编号，如 TKT-3F9A2C
    ticket_number: str = Field(unique=True, index=True, nullable=False)

    title: str = Field(nullable=False)

    category: str = Field(nullable=False)

    status: TicketStatus = Field(default=TicketStatus.OPEN, index=True, nullable=False)
