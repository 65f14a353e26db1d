"""
家政劳工域模型 - 家政劳工申请表
"""

from enum import Enum
from typing import Optional, Dict, Any

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id


class DomesticRequestStatus(str, Enum):
    """家政申请状态枚举"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class DomesticLaborRequest(TimestampModel, table=True):
    """家政劳工申请表"""
    __tablename__ = "domestic_labor_requests"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    # 申请类型，如 new_visa、transfer
    request_type: str = Field(nullable=False)

    worker_nationality: str = Field(nullable=False)

    status: DomesticRequestStatus = Field(default=DomesticRequestStatus.PENDING, nullable=False)

    # 申请详情 JSON，结构由申请类型决定
    request_details: Optional[Dict[str, Any]] = Field(default_factory=dict, sa_column=Column(JSON))
