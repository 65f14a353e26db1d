"""
主动提醒模块
"""

from .cache import ProactiveCache, proactive_cache
from .engine import ProactiveEngine, TriggerRunReport
from .triggers import TRIGGERS, TriggerHit

__all__ = [
    "ProactiveCache",
    "proactive_cache",
    "ProactiveEngine",
    "TriggerRunReport",
    "TRIGGERS",
    "TriggerHit",
]
