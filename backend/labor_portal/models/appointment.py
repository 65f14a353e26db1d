"""
预约域模型 - 劳工办公室预约表
"""

from datetime import date
from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimestampModel, new_id


class AppointmentStatus(str, Enum):
    """预约状态枚举：cancelled 和 completed 为终态"""
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class LaborAppointment(TimestampModel, table=True):
    """
    劳工办公室预约表
    """
    __tablename__ = "labor_appointments"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    # 预约类型，如 consultation、complaint
    appointment_type: str = Field(nullable=False)

    appointment_date: date = Field(nullable=False)

    office_location: Optional[str] = Field(default=None)

    notes: Optional[str] = Field(default=None)

    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True, nullable=False)
