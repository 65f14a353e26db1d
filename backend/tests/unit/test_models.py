"""
数据模型单元测试
验证默认值、JSON 字段和唯一约束
"""

import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from labor_portal.models import (
    UserProfile,
    UserBehavior,
    EmploymentContract, ContractStatus,
    LaborAppointment, AppointmentStatus,
    Ticket, TicketStatus,
    Resume, ResumeCourse,
    DomesticLaborRequest, DomesticRequestStatus,
    ProactiveEvent,
    AgentActionLog,
    as_utc,
)


class TestDefaults:
    """测试模型默认值"""

    def test_contract_defaults(self, test_db_session, user_id):
        """测试合同默认为 active，主键为 UUID"""
        contract = EmploymentContract(
            user_id=user_id,
            employer_name="شركة",
            position="محاسب",
            salary=5000,
            start_date=date(2024, 1, 1)
        )
        test_db_session.add(contract)
        test_db_session.commit()
        test_db_session.refresh(contract)

        assert contract.status == ContractStatus.ACTIVE
        assert contract.end_date is None
        assert uuid.UUID(contract.id).version == 4
        assert contract.created_at is not None

    def test_appointment_and_ticket_defaults(self, test_db_session, user_id):
        """测试预约默认为 scheduled，工单默认为 open"""
        appointment = LaborAppointment(
            user_id=user_id,
            appointment_type="استشارة",
            appointment_date=date(2025, 3, 12)
        )
        ticket = Ticket(user_id=user_id, ticket_number="TKT-1", title="t", category="c")
        test_db_session.add(appointment)
        test_db_session.add(ticket)
        test_db_session.commit()

        assert appointment.status == AppointmentStatus.SCHEDULED
        assert ticket.status == TicketStatus.OPEN

    def test_behavior_defaults(self, test_db_session, user_id):
        """测试连续差评次数默认为 0"""
        behavior = UserBehavior(user_id=user_id)
        test_db_session.add(behavior)
        test_db_session.commit()
        test_db_session.refresh(behavior)

        assert behavior.consecutive_complaints_count == 0
        assert behavior.feedback_score is None

    def test_proactive_event_defaults(self, test_db_session, user_id):
        """测试主动事件默认未处理"""
        event = ProactiveEvent(
            user_id=user_id,
            event_type="appointment_reminder",
            suggested_action="...",
            pending_key="appointment_reminder"
        )
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)

        assert event.acted is False
        assert event.action_taken is None
        assert event.detected_at is not None


class TestJsonFields:
    """测试 JSON 字段读写"""

    def test_resume_skills(self, test_db_session, test_resume):
        """测试技能列表保存后可读回"""
        loaded = test_db_session.get(Resume, test_resume.id)
        assert loaded.skills == ["Python", "SQL"]

    def test_domestic_request_details(self, test_db_session, user_id):
        """测试申请附加信息保存后可读回"""
        request = DomesticLaborRequest(
            user_id=user_id,
            request_type="استقدام",
            worker_nationality="الفلبين",
            request_details={"duration_months": 24, "notes": "عاملة منزلية"}
        )
        test_db_session.add(request)
        test_db_session.commit()
        test_db_session.refresh(request)

        assert request.status == DomesticRequestStatus.PENDING
        assert request.request_details["duration_months"] == 24

    def test_action_log_json(self, test_db_session, user_id):
        """测试审计日志输入输出字段"""
        entry = AgentActionLog(
            user_id=user_id,
            action_type="get_contracts",
            input_json={"user_id": user_id},
            output_json=[{"id": "x"}],
            success=True
        )
        test_db_session.add(entry)
        test_db_session.commit()
        test_db_session.refresh(entry)

        assert entry.input_json == {"user_id": user_id}
        assert entry.output_json == [{"id": "x"}]


class TestConstraints:
    """测试唯一约束和外键"""

    def test_profile_user_id_unique(self, test_db_session, test_profile):
        """测试同一用户只能有一份资料"""
        test_db_session.add(UserProfile(user_id=test_profile.user_id, full_name="مكرر"))
        with pytest.raises(IntegrityError):
            test_db_session.commit()
        test_db_session.rollback()

    def test_pending_event_unique_per_type(self, test_db_session, user_id):
        """测试同一用户同一类型只能有一条待处理事件"""
        for _ in range(2):
            test_db_session.add(ProactiveEvent(
                user_id=user_id,
                event_type="ticket_follow_up_needed",
                suggested_action="...",
                pending_key="ticket_follow_up_needed"
            ))
        with pytest.raises(IntegrityError):
            test_db_session.commit()
        test_db_session.rollback()

    def test_acted_events_do_not_collide(self, test_db_session, user_id):
        """测试已处理事件（pending_key 为空）不受唯一约束限制"""
        for _ in range(3):
            test_db_session.add(ProactiveEvent(
                user_id=user_id,
                event_type="ticket_follow_up_needed",
                suggested_action="...",
                acted=True,
                pending_key=None
            ))
        test_db_session.commit()

        events = test_db_session.exec(select(ProactiveEvent)).all()
        assert len(events) == 3

    def test_course_belongs_to_resume(self, test_db_session, test_resume):
        """测试课程挂在简历下"""
        course = ResumeCourse(
            resume_id=test_resume.id,
            course_name="إدارة المشاريع",
            provider="معهد الإدارة",
            date_completed=date(2024, 6, 1)
        )
        test_db_session.add(course)
        test_db_session.commit()
        test_db_session.refresh(course)

        assert course.resume_id == test_resume.id


class TestAsUtc:
    """测试时区补齐"""

    def test_naive_datetime(self):
        """测试无时区时间视为 UTC"""
        value = as_utc(datetime(2025, 1, 1, 12, 0))
        assert value.tzinfo == timezone.utc
        assert value.hour == 12

    def test_aware_datetime(self):
        """测试带时区时间转换为 UTC"""
        from datetime import timedelta
        riyadh = timezone(timedelta(hours=3))
        value = as_utc(datetime(2025, 1, 1, 15, 0, tzinfo=riyadh))
        assert value.hour == 12
