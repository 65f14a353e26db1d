"""
Agent 模块 - 动作注册表、分发器、模型路由和 LangGraph 对话工作流
"""

from .actions import AgentAction, ActionSpec, ACTION_REGISTRY, available_actions
from .dispatcher import ActionDispatcher
from .state import AgentState

__all__ = [
    "AgentAction",
    "ActionSpec",
    "ACTION_REGISTRY",
    "available_actions",
    "ActionDispatcher",
    "AgentState",
]
