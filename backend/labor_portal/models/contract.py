"""
劳动合同域模型 - 雇佣合同表
"""

from datetime import date
from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimestampModel, new_id


class ContractStatus(str, Enum):
    """合同状态枚举：active -> ended 单向流转"""
    ACTIVE = "active"
    ENDED = "ended"


class EmploymentContract(TimestampModel, table=True):
    """
    雇佣合同表
    证书生成以用户最近创建的 active 合同为数据源
    """
    __tablename__ = "employment_contracts"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 索引优化：按用户查询合同列表
    user_id: str = Field(index=True, nullable=False)

    employer_name: str = Field(nullable=False)
    position: str = Field(nullable=False)

    # 月薪（沙特里亚尔）
    salary: float = Field(nullable=False, ge=0)

    # 合同类型，如 "دوام كامل"
    contract_type: Optional[str] = Field(default=None)

    start_date: date = Field(nullable=False)

    # 结束日期：固定期限合同预先填写，终止合同时写入当天
    end_date: Optional[date] = Field(default=None)

    status: ContractStatus = Field(default=ContractStatus.ACTIVE, index=True, nullable=False)
