"""
LangGraph Agent 状态定义
"""

from typing import List, TypedDict

from langchain_core.messages import BaseMessage


class AgentState(TypedDict, total=False):
    """
    LangGraph Agent 状态定义

    贯穿 agent_node 和 tools_node 的循环，节点返回完整的更新后消息列表。
    """

    # 消息历史：系统提示 + 最近对话 + 本轮用户消息 + 模型/工具消息
    messages: List[BaseMessage]

    # 当前用户 UUID，工具调用时注入，不信任模型给出的 user_id
    user_id: str

    # 已执行的 agent_node 次数，用于控制循环上限
    step_count: int

    # 本轮对话调用过的动作名（按调用顺序，可重复）
    tools_used: List[str]
