"""
动作注册表 -> LLM 工具定义

每个 AgentAction 生成一个同名 pydantic 模型，交给 llm.bind_tools()。
user_id 不暴露给模型，由 tools_node 从会话中注入。
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field, create_model

from labor_portal.agent.actions import ACTION_REGISTRY, AgentAction


# 参数名 -> (类型, 描述)；未列出的参数按字符串处理
FIELD_TYPES: Dict[str, Any] = {
    "skills": (List[str], "List of skills"),
    "experience_years": (int, "Years of experience"),
    "score": (int, "Satisfaction score from 1 (worst) to 5 (best)"),
    "request_details": (Dict[str, Any], "Extra request details"),
    "appointment_date": (str, "Date in YYYY-MM-DD format"),
    "date_completed": (str, "Date in YYYY-MM-DD format"),
    "ticket_id": (str, "Ticket id or ticket number such as TKT-1A2B3C4D"),
    "query": (str, "Search keywords"),
}

# 由会话注入的参数
INJECTED_FIELDS = frozenset({"user_id"})


def _field_definition(name: str, required: bool):
    field_type, description = FIELD_TYPES.get(name, (str, name.replace("_", " ")))
    if required:
        return (field_type, Field(..., description=description))
    return (Optional[field_type], Field(default=None, description=description))


def build_tool_schema(action: AgentAction) -> Type[BaseModel]:
    """为单个动作生成工具参数模型，模型名即动作名"""
    spec = ACTION_REGISTRY[action]
    fields = {}
    for name in spec.required:
        if name not in INJECTED_FIELDS:
            fields[name] = _field_definition(name, required=True)
    for name in spec.optional:
        if name not in INJECTED_FIELDS:
            fields[name] = _field_definition(name, required=False)
    return create_model(action.value, __doc__=spec.description, **fields)


def build_tool_schemas() -> List[Type[BaseModel]]:
    return [build_tool_schema(action) for action in AgentAction]


def clean_tool_args(args: Optional[Dict[str, Any]], user_id: str) -> Dict[str, Any]:
    """
    整理模型给出的工具参数
    去掉值为 None 的可选参数，并强制使用会话中的 user_id
    """
    payload = {key: value for key, value in (args or {}).items() if value is not None}
    payload["user_id"] = user_id
    return payload
