"""
预约服务
状态流转：scheduled -> cancelled | completed，两个终态都不可再变更
"""

from typing import Any, List, Optional

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, DomainStateError, NotFoundError
from labor_portal.models import LaborAppointment, AppointmentStatus
from labor_portal.repositories import AppointmentRepository
from labor_portal.services.utils import is_missing, parse_date


class AppointmentService:
    """
    预约服务：查询、预约、取消、完成
    """

    def __init__(self, session: Session):
        self.repo = AppointmentRepository(session)

    def get_appointments(self, user_id: str) -> List[LaborAppointment]:
        return self.repo.get_by_user(user_id)

    def get_appointment_by_id(self, appointment_id: str) -> Optional[LaborAppointment]:
        return self.repo.get_by_id(appointment_id)

    def book_appointment(
        self,
        user_id: str,
        appointment_type: str,
        appointment_date: Any,
        notes: Optional[str] = None,
        office_location: Optional[str] = None
    ) -> LaborAppointment:
        """
        预约，状态为 scheduled

        Args:
            user_id: 用户 UUID
            appointment_type: 预约类型
            appointment_date: 预约日期（date 或 YYYY-MM-DD）
            notes: 备注（可选）
            office_location: 办公地点（可选）

        Returns:
            创建的 LaborAppointment 对象
        """
        if is_missing(appointment_type):
            raise InputValidationError("appointment_type is required")

        appointment = self.repo.create(LaborAppointment(
            user_id=user_id,
            appointment_type=appointment_type,
            appointment_date=parse_date(appointment_date, "appointment_date"),
            office_location=office_location,
            notes=notes,
            status=AppointmentStatus.SCHEDULED
        ))
        print(f"[AppointmentService] 预约成功: {appointment.id} ({appointment.appointment_date})")
        return appointment

    def _get_or_raise(self, appointment_id: str, user_id: Optional[str] = None) -> LaborAppointment:
        appointment = self.repo.get_by_id(appointment_id)
        if appointment is None or (user_id is not None and appointment.user_id != user_id):
            raise NotFoundError(f"Appointment not found: {appointment_id}")
        return appointment

    def cancel_appointment(self, appointment_id: str, user_id: Optional[str] = None) -> LaborAppointment:
        """
        取消预约

        Raises:
            NotFoundError: 预约不存在或不属于 user_id
            DomainStateError: 已取消或已完成
        """
        appointment = self._get_or_raise(appointment_id, user_id)
        if appointment.status == AppointmentStatus.CANCELLED:
            raise DomainStateError("Appointment already cancelled")
        if appointment.status == AppointmentStatus.COMPLETED:
            raise DomainStateError("Cannot cancel a completed appointment")

        appointment.status = AppointmentStatus.CANCELLED
        appointment = self.repo.update(appointment)
        print(f"[AppointmentService] 取消预约: {appointment.id}")
        return appointment

    def complete_appointment(self, appointment_id: str, user_id: Optional[str] = None) -> LaborAppointment:
        """
        完成预约

        Raises:
            NotFoundError: 预约不存在或不属于 user_id
            DomainStateError: 已完成或已取消
        """
        appointment = self._get_or_raise(appointment_id, user_id)
        if appointment.status == AppointmentStatus.COMPLETED:
            raise DomainStateError("Appointment already completed")
        if appointment.status == AppointmentStatus.CANCELLED:
            raise DomainStateError("Cannot complete a cancelled appointment")

        appointment.status = AppointmentStatus.COMPLETED
        appointment = self.repo.update(appointment)
        print(f"[AppointmentService] 完成预约: {appointment.id}")
        return appointment
