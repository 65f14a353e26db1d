"""
预约 Repository
提供 labor_appointments 的增删改查操作
"""

from datetime import date
from typing import List, Optional

from sqlmodel import Session, select, col

from labor_portal.models import LaborAppointment, AppointmentStatus


class AppointmentRepository:
    """
    预约数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(self, appointment: LaborAppointment) -> LaborAppointment:
        self.session.add(appointment)
        self.session.commit()
        self.session.refresh(appointment)
        return appointment

    def get_by_id(self, appointment_id: str) -> Optional[LaborAppointment]:
        return self.session.get(LaborAppointment, appointment_id)

    def get_by_user(self, user_id: str) -> List[LaborAppointment]:
        """
        获取用户的所有预约，按预约日期升序

        Args:
            user_id: 用户 UUID

        Returns:
            LaborAppointment 对象列表
        """
        statement = (
            select(LaborAppointment)
            .where(LaborAppointment.user_id == user_id)
            .order_by(col(LaborAppointment.appointment_date).asc())
        )
        return self.session.exec(statement).all()

    def list_scheduled_between(self, start: date, end: date) -> List[LaborAppointment]:
        """
        获取日期区间内（含两端）所有 scheduled 状态的预约

        Args:
            start: 起始日期
            end: 结束日期

        Returns:
            LaborAppointment 对象列表
        """
        statement = select(LaborAppointment).where(
            LaborAppointment.status == AppointmentStatus.SCHEDULED,
            LaborAppointment.appointment_date >= start,
            LaborAppointment.appointment_date <= end
        )
        return self.session.exec(statement).all()

    def update(self, appointment: LaborAppointment) -> LaborAppointment:
        self.session.add(appointment)
        self.session.commit()
        self.session.refresh(appointment)
        return appointment
