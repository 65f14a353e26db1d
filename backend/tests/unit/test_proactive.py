"""
主动提醒单元测试
触发器阈值、去重、失败隔离和待处理事件缓存
"""

from datetime import date, timedelta

import pytest

from labor_portal.exceptions import NotFoundError
from labor_portal.models import (
    AppointmentStatus,
    EmploymentContract,
    LaborAppointment,
    Resume,
    Ticket,
    UserBehavior,
)
from labor_portal.proactive import triggers
from labor_portal.proactive.cache import ProactiveCache
from labor_portal.proactive.engine import ProactiveEngine
from labor_portal.proactive.triggers import (
    APPOINTMENT_REMINDER,
    CONTRACT_EXPIRING_SOON,
    INCOMPLETE_RESUME_DETECTED,
    TICKET_FOLLOW_UP_NEEDED,
    USER_DISSATISFACTION_DETECTED,
    check_appointment_reminders,
    check_contract_expiry,
    check_dissatisfaction,
    check_incomplete_resumes,
    check_ticket_follow_ups,
)


TODAY = date(2025, 3, 10)


def _add(session, *records):
    for record in records:
        session.add(record)
    session.commit()


def _contract(user_id, end_date):
    return EmploymentContract(
        user_id=user_id,
        employer_name="شركة الأفق",
        position="فني",
        salary=6000,
        start_date=date(2023, 1, 1),
        end_date=end_date
    )


class TestTriggers:
    """测试各触发器的阈值"""

    @pytest.mark.parametrize("days_left,expected", [(0, False), (1, True), (30, True), (31, False), (-5, False)])
    def test_contract_expiry_window(self, test_db_session, user_id, fixed_now, days_left, expected):
        _add(test_db_session, _contract(user_id, TODAY + timedelta(days=days_left)))

        hits = check_contract_expiry(test_db_session, fixed_now)
        assert bool(hits) is expected
        if expected:
            assert hits[0].event_type == CONTRACT_EXPIRING_SOON
            assert hits[0].event_data["days_until_expiry"] == days_left

    @pytest.mark.parametrize("offset,expected", [(-1, False), (0, True), (3, True), (4, False)])
    def test_appointment_reminder_window(self, test_db_session, user_id, fixed_now, offset, expected):
        _add(test_db_session, LaborAppointment(
            user_id=user_id, appointment_type="consultation", appointment_date=TODAY + timedelta(days=offset)
        ))

        hits = check_appointment_reminders(test_db_session, fixed_now)
        assert bool(hits) is expected

    def test_cancelled_appointment_not_reminded(self, test_db_session, user_id, fixed_now):
        _add(test_db_session, LaborAppointment(
            user_id=user_id, appointment_type="consultation", appointment_date=TODAY,
            status=AppointmentStatus.CANCELLED
        ))
        assert check_appointment_reminders(test_db_session, fixed_now) == []

    def test_ticket_follow_up_after_three_days(self, test_db_session, user_id, other_user_id, fixed_now):
        _add(
            test_db_session,
            Ticket(user_id=user_id, ticket_number="TKT-OLD00001", title="قديم", category="c",
                   created_at=fixed_now - timedelta(days=3)),
            Ticket(user_id=other_user_id, ticket_number="TKT-NEW00001", title="جديد", category="c",
                   created_at=fixed_now - timedelta(days=2, hours=23)),
        )

        hits = check_ticket_follow_ups(test_db_session, fixed_now)
        assert [hit.user_id for hit in hits] == [user_id]
        assert hits[0].event_type == TICKET_FOLLOW_UP_NEEDED
        assert hits[0].event_data["days_open"] == 3

    def test_dissatisfaction_threshold(self, test_db_session, user_id, other_user_id, fixed_now):
        _add(
            test_db_session,
            UserBehavior(user_id=user_id, consecutive_complaints_count=2),
            UserBehavior(user_id=other_user_id, consecutive_complaints_count=1),
        )

        hits = check_dissatisfaction(test_db_session, fixed_now)
        assert [hit.user_id for hit in hits] == [user_id]
        assert hits[0].event_type == USER_DISSATISFACTION_DETECTED

    def test_incomplete_resume(self, test_db_session, test_resume, other_user_id, fixed_now):
        """测试只对缺少字段的简历提醒"""
        _add(test_db_session, Resume(user_id=other_user_id, job_title="سائق"))

        hits = check_incomplete_resumes(test_db_session, fixed_now)
        assert [hit.user_id for hit in hits] == [other_user_id]
        assert hits[0].event_type == INCOMPLETE_RESUME_DETECTED
        assert hits[0].event_data["missing_fields"] == ["summary", "skills", "experience_years"]

    def test_user_filter(self, test_db_session, user_id, other_user_id, fixed_now):
        _add(test_db_session, _contract(user_id, TODAY + timedelta(days=5)), _contract(other_user_id, TODAY + timedelta(days=5)))

        hits = check_contract_expiry(test_db_session, fixed_now, other_user_id)
        assert [hit.user_id for hit in hits] == [other_user_id]


class TestProactiveEngine:
    """测试引擎去重和事件处理"""

    @pytest.fixture
    def engine(self, test_db_session, fixed_clock):
        return ProactiveEngine(test_db_session, clock=fixed_clock, cache=ProactiveCache())

    @pytest.fixture
    def due_records(self, test_db_session, user_id, fixed_now):
        _add(
            test_db_session,
            _contract(user_id, TODAY + timedelta(days=10)),
            LaborAppointment(user_id=user_id, appointment_type="consultation", appointment_date=TODAY + timedelta(days=1)),
        )

    def test_second_run_creates_nothing(self, engine, due_records, user_id):
        """测试重复运行不产生重复事件"""
        first = engine.run_all_triggers()
        second = engine.run_all_triggers()

        assert {e.event_type for e in first.created} == {CONTRACT_EXPIRING_SOON, APPOINTMENT_REMINDER}
        assert second.created == []
        assert second.already_pending == 2
        assert len(engine.get_pending_events(user_id)) == 2

    def test_one_event_per_type_per_user(self, test_db_session, engine, user_id):
        """测试同类型多条命中只保留一条待处理事件"""
        _add(
            test_db_session,
            LaborAppointment(user_id=user_id, appointment_type="a", appointment_date=TODAY),
            LaborAppointment(user_id=user_id, appointment_type="b", appointment_date=TODAY + timedelta(days=2)),
        )

        report = engine.run_all_triggers()
        assert len(report.created) == 1
        assert report.already_pending == 1

    def test_failing_trigger_is_isolated(self, monkeypatch, engine, due_records, user_id):
        """测试单个触发器失败不影响其他触发器"""
        def broken(session, now, user_id=None):
            raise RuntimeError("boom")

        monkeypatch.setitem(triggers.TRIGGERS, CONTRACT_EXPIRING_SOON, broken)
        report = engine.run_all_triggers()

        assert report.failed_triggers == {CONTRACT_EXPIRING_SOON: "boom"}
        assert [e.event_type for e in report.created] == [APPOINTMENT_REMINDER]
        assert report.to_dict()["created_count"] == 1

    def test_mark_acted_allows_retrigger(self, engine, due_records, user_id):
        """测试事件处理后条件仍成立会再次生成"""
        report = engine.run_for_user(user_id)
        event = next(e for e in report.created if e.event_type == APPOINTMENT_REMINDER)

        acted = engine.mark_event_acted(event.id, "dismissed")
        assert acted.acted is True
        assert acted.action_taken == "dismissed"
        assert acted.pending_key is None

        again = engine.run_for_user(user_id)
        assert [e.event_type for e in again.created] == [APPOINTMENT_REMINDER]
        assert again.created[0].id != event.id

    def test_mark_acted_twice_returns_event(self, engine, due_records, user_id):
        event = engine.run_for_user(user_id).created[0]
        engine.mark_event_acted(event.id, "accepted")

        unchanged = engine.mark_event_acted(event.id, "dismissed")
        assert unchanged.action_taken == "accepted"

    def test_mark_acted_defaults_action_taken(self, engine, due_records, user_id):
        """测试未提供处理方式时记为 user_action"""
        event = engine.run_for_user(user_id).created[0]

        acted = engine.mark_event_acted(event.id)
        assert acted.acted is True
        assert acted.action_taken == "user_action"
        assert acted.action_at is not None

    def test_mark_missing_event(self, engine):
        with pytest.raises(NotFoundError):
            engine.mark_event_acted("missing", "dismissed")
        with pytest.raises(NotFoundError):
            engine.mark_event_acted("missing", "")

    def test_pending_limit(self, engine, due_records, user_id):
        engine.run_all_triggers()
        assert len(engine.get_pending_events(user_id, limit=1)) == 1

    def test_cached_pending_invalidated_by_new_event(self, engine, due_records, user_id):
        """测试新事件写入后缓存失效"""
        assert engine.get_pending_events_cached(user_id) == []

        engine.run_all_triggers()
        cached = engine.get_pending_events_cached(user_id)
        assert {e["event_type"] for e in cached} == {CONTRACT_EXPIRING_SOON, APPOINTMENT_REMINDER}


class TestProactiveCache:
    """测试 TTL 缓存"""

    def test_expires_after_ttl(self):
        now = [1000.0]
        cache = ProactiveCache(ttl_seconds=900, clock=lambda: now[0])
        cache.set("u", [{"id": "e1"}])

        now[0] += 900
        assert cache.get("u") == [{"id": "e1"}]
        now[0] += 1
        assert cache.get("u") is None

    def test_invalidate_and_clear(self):
        cache = ProactiveCache()
        cache.set("u1", [])
        cache.set("u2", [])

        cache.invalidate("u1")
        assert cache.get("u1") is None
        assert cache.get("u2") == []

        cache.clear()
        assert cache.get("u2") is None
