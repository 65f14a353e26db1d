"""
主动事件缓存
按用户缓存待处理事件，避免每轮对话都查询数据库
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from labor_portal.config import PROACTIVE_CACHE_TTL_SECONDS


class ProactiveCache:
    """
    进程内 TTL 缓存
    值为已序列化的事件字典列表，不缓存 ORM 对象
    """

    def __init__(
        self,
        ttl_seconds: float = PROACTIVE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[float, List[Dict[str, Any]]]] = {}

    def get(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        entry = self._entries.get(user_id)
        if entry is None:
            return None

        stored_at, events = entry
        if self.clock() - stored_at > self.ttl_seconds:
            del self._entries[user_id]
            return None
        return events

    def set(self, user_id: str, events: List[Dict[str, Any]]) -> None:
        self._entries[user_id] = (self.clock(), events)

    def invalidate(self, user_id: str) -> None:
        self._entries.pop(user_id, None)

    def clear(self) -> None:
        self._entries.clear()


# 全局缓存实例
proactive_cache = ProactiveCache()
