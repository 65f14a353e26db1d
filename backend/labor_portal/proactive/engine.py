"""
主动提醒引擎

负责运行触发器、去重落库、查询和处理待处理事件。
单个触发器失败只记录错误，不影响其他触发器。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlmodel import Session

from labor_portal.config import PENDING_EVENTS_LIMIT
from labor_portal.exceptions import NotFoundError
from labor_portal.models import ProactiveEvent, utc_now
from labor_portal.proactive.cache import ProactiveCache, proactive_cache
from labor_portal.proactive.triggers import TRIGGERS
from labor_portal.repositories import ProactiveRepository
from labor_portal.services.utils import is_missing, to_jsonable


# 客户端只传 acted=true 时记录的处理方式
DEFAULT_ACTION_TAKEN = "user_action"


@dataclass
class TriggerRunReport:
    """一次触发器运行的结果汇总"""
    created: List[ProactiveEvent] = field(default_factory=list)
    already_pending: int = 0
    failed_triggers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": to_jsonable(self.created),
            "created_count": len(self.created),
            "already_pending": self.already_pending,
            "failed_triggers": dict(self.failed_triggers),
        }


class ProactiveEngine:
    """
    主动提醒引擎

    使用示例：
        engine = ProactiveEngine(session)
        report = engine.run_all_triggers()
        events = engine.get_pending_events(user_id)
    """

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime] = utc_now,
        cache: Optional[ProactiveCache] = None
    ):
        """
        Args:
            session: SQLModel 数据库会话
            clock: 返回当前 UTC 时间的函数，测试时可替换
            cache: 待处理事件缓存，默认使用全局实例
        """
        self.session = session
        self.repo = ProactiveRepository(session)
        self.clock = clock
        self.cache = cache if cache is not None else proactive_cache

    def _run(self, user_id: Optional[str]) -> TriggerRunReport:
        now = self.clock()
        report = TriggerRunReport()

        for name, check in TRIGGERS.items():
            try:
                hits = check(self.session, now, user_id)
                for hit in hits:
                    event, created = self.repo.create_if_absent(
                        user_id=hit.user_id,
                        event_type=hit.event_type,
                        event_data=hit.event_data,
                        suggested_action=hit.suggested_action,
                        detected_at=now
                    )
                    if created:
                        report.created.append(event)
                        self.cache.invalidate(hit.user_id)
                    else:
                        report.already_pending += 1
            except Exception as e:
                self.session.rollback()
                print(f"[ProactiveEngine] 触发器 {name} 失败: {e}")
                report.failed_triggers[name] = str(e)

        print(
            f"[ProactiveEngine] 新事件 {len(report.created)} 条，"
            f"已存在 {report.already_pending} 条，失败触发器 {len(report.failed_triggers)} 个"
        )
        return report

    def run_all_triggers(self) -> TriggerRunReport:
        """对所有用户运行全部触发器"""
        return self._run(None)

    def run_for_user(self, user_id: str) -> TriggerRunReport:
        """只为一个用户运行全部触发器"""
        return self._run(user_id)

    def get_pending_events(self, user_id: str, limit: int = PENDING_EVENTS_LIMIT) -> List[ProactiveEvent]:
        """
        获取待处理事件，最新检测到的在前

        Args:
            user_id: 用户 UUID
            limit: 最大条数，默认 5

        Returns:
            ProactiveEvent 对象列表
        """
        return self.repo.get_pending(user_id, limit)

    def get_pending_events_cached(self, user_id: str) -> List[Dict[str, Any]]:
        """带缓存的待处理事件（序列化后的字典），对话服务使用"""
        cached = self.cache.get(user_id)
        if cached is not None:
            print(f"[ProactiveEngine] 缓存命中: {user_id}")
            return cached

        events = to_jsonable(self.get_pending_events(user_id))
        self.cache.set(user_id, events)
        return events

    def mark_event_acted(self, event_id: str, action_taken: Optional[str] = None) -> ProactiveEvent:
        """
        标记事件已处理
        已处理的事件原样返回，未提供 action_taken 时记为 user_action

        Raises:
            NotFoundError: 事件不存在
        """
        if is_missing(action_taken):
            action_taken = DEFAULT_ACTION_TAKEN

        event = self.repo.get_by_id(event_id)
        if event is None:
            raise NotFoundError(f"Proactive event not found: {event_id}")
        if event.acted:
            return event

        event = self.repo.mark_acted(event, action_taken, self.clock())
        self.cache.invalidate(event.user_id)
        print(f"[ProactiveEngine] 事件已处理: {event.id} ({action_taken})")
        return event
