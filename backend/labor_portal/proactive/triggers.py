"""
主动提醒触发器

每个触发器是对数据库的一次无状态检查：给定当前时间，返回命中的 TriggerHit 列表。
触发器只读不写，落库和去重由 ProactiveEngine 负责。
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from labor_portal.config import (
    APPOINTMENT_REMINDER_WINDOW_DAYS,
    COMPLAINTS_THRESHOLD,
    CONTRACT_EXPIRY_WINDOW_DAYS,
    TICKET_FOLLOW_UP_AFTER_DAYS,
)
from labor_portal.models import as_utc
from labor_portal.repositories import (
    AppointmentRepository,
    ContractRepository,
    ProfileRepository,
    ResumeRepository,
    TicketRepository,
)


CONTRACT_EXPIRING_SOON = "contract_expiring_soon"
APPOINTMENT_REMINDER = "appointment_reminder"
TICKET_FOLLOW_UP_NEEDED = "ticket_follow_up_needed"
USER_DISSATISFACTION_DETECTED = "user_dissatisfaction_detected"
INCOMPLETE_RESUME_DETECTED = "incomplete_resume_detected"


@dataclass
class TriggerHit:
    """一次触发器命中"""
    user_id: str
    event_type: str
    suggested_action: str
    event_data: Dict[str, Any] = field(default_factory=dict)


def _for_user(user_id: Optional[str], candidate: str) -> bool:
    return user_id is None or candidate == user_id


def check_contract_expiry(session: Session, now: datetime, user_id: Optional[str] = None) -> List[TriggerHit]:
    """active 合同结束日期在 1-30 天内"""
    today = now.date()
    hits = []
    for contract in ContractRepository(session).list_active_with_end_date():
        if not _for_user(user_id, contract.user_id):
            continue
        days_left = (contract.end_date - today).days
        if 1 <= days_left <= CONTRACT_EXPIRY_WINDOW_DAYS:
            hits.append(TriggerHit(
                user_id=contract.user_id,
                event_type=CONTRACT_EXPIRING_SOON,
                suggested_action=f"عقدك مع {contract.employer_name} ينتهي خلال {days_left} يوم. هل تريد تجديده؟",
                event_data={
                    "contract_id": contract.id,
                    "employer_name": contract.employer_name,
                    "end_date": contract.end_date.isoformat(),
                    "days_until_expiry": days_left,
                }
            ))
    return hits


def check_appointment_reminders(session: Session, now: datetime, user_id: Optional[str] = None) -> List[TriggerHit]:
    """scheduled 预约在今天到 3 天内"""
    today = now.date()
    window_end = today + timedelta(days=APPOINTMENT_REMINDER_WINDOW_DAYS)
    hits = []
    for appointment in AppointmentRepository(session).list_scheduled_between(today, window_end):
        if not _for_user(user_id, appointment.user_id):
            continue
        location = appointment.office_location or "مكتب العمل"
        hits.append(TriggerHit(
            user_id=appointment.user_id,
            event_type=APPOINTMENT_REMINDER,
            suggested_action=f"لديك موعد في {location} يوم {appointment.appointment_date.isoformat()}. لا تنسَ!",
            event_data={
                "appointment_id": appointment.id,
                "appointment_type": appointment.appointment_type,
                "appointment_date": appointment.appointment_date.isoformat(),
                "days_until": (appointment.appointment_date - today).days,
            }
        ))
    return hits


def check_ticket_follow_ups(session: Session, now: datetime, user_id: Optional[str] = None) -> List[TriggerHit]:
    """open 工单已超过 3 天"""
    hits = []
    for ticket in TicketRepository(session).list_open():
        if not _for_user(user_id, ticket.user_id):
            continue
        days_open = (as_utc(now) - as_utc(ticket.created_at)).days
        if days_open >= TICKET_FOLLOW_UP_AFTER_DAYS:
            hits.append(TriggerHit(
                user_id=ticket.user_id,
                event_type=TICKET_FOLLOW_UP_NEEDED,
                suggested_action=f"تذكرتك رقم {ticket.ticket_number} \"{ticket.title}\" مفتوحة منذ {days_open} يوم. هل تحتاج متابعة؟",
                event_data={
                    "ticket_id": ticket.id,
                    "ticket_number": ticket.ticket_number,
                    "days_open": days_open,
                }
            ))
    return hits


def check_dissatisfaction(session: Session, now: datetime, user_id: Optional[str] = None) -> List[TriggerHit]:
    """连续差评次数达到阈值"""
    hits = []
    for behavior in ProfileRepository(session).list_behaviors_with_complaints(COMPLAINTS_THRESHOLD):
        if not _for_user(user_id, behavior.user_id):
            continue
        hits.append(TriggerHit(
            user_id=behavior.user_id,
            event_type=USER_DISSATISFACTION_DETECTED,
            suggested_action="نلاحظ عدم رضاك عن الخدمة. هل يمكننا مساعدتك بشكل أفضل؟ نقدر ملاحظاتك.",
            event_data={
                "consecutive_complaints": behavior.consecutive_complaints_count,
                "last_message": behavior.last_message,
            }
        ))
    return hits


def missing_resume_fields(resume) -> List[str]:
    missing = []
    if not resume.job_title:
        missing.append("job_title")
    if not resume.summary:
        missing.append("summary")
    if not resume.skills:
        missing.append("skills")
    if resume.experience_years is None:
        missing.append("experience_years")
    return missing


def check_incomplete_resumes(session: Session, now: datetime, user_id: Optional[str] = None) -> List[TriggerHit]:
    """用户最新简历缺少职位、简介、技能或工作年限"""
    latest = {}
    for resume in ResumeRepository(session).list_all():
        if not _for_user(user_id, resume.user_id):
            continue
        current = latest.get(resume.user_id)
        if current is None or as_utc(resume.created_at) > as_utc(current.created_at):
            latest[resume.user_id] = resume

    hits = []
    for resume in latest.values():
        missing = missing_resume_fields(resume)
        if missing:
            hits.append(TriggerHit(
                user_id=resume.user_id,
                event_type=INCOMPLETE_RESUME_DETECTED,
                suggested_action="سيرتك الذاتية غير مكتملة. أكمل المعلومات الناقصة لزيادة فرص التوظيف!",
                event_data={"resume_id": resume.id, "missing_fields": missing}
            ))
    return hits


# 触发器名 -> 检查函数
TRIGGERS = {
    CONTRACT_EXPIRING_SOON: check_contract_expiry,
    APPOINTMENT_REMINDER: check_appointment_reminders,
    TICKET_FOLLOW_UP_NEEDED: check_ticket_follow_ups,
    USER_DISSATISFACTION_DETECTED: check_dissatisfaction,
    INCOMPLETE_RESUME_DETECTED: check_incomplete_resumes,
}
