"""
聊天服务层

封装对话业务逻辑，包括：
1. 存储用户消息和助手回复
2. 加载待处理主动事件（带缓存）并写入系统提示词
3. 意图识别 -> 模型路由
4. 调用 LangGraph 工作流（模型 + 工具循环）
5. 更新用户行为记录
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from sqlmodel import Session

from labor_portal.agent.dispatcher import ActionDispatcher
from labor_portal.agent.graph import create_agent_graph
from labor_portal.agent.model_router import ModelRouter, detect_intent, get_complexity_from_intent
from labor_portal.agent.prompts import EMPTY_REPLY_FALLBACK, build_system_prompt
from labor_portal.config import CHAT_HISTORY_WINDOW
from labor_portal.exceptions import InputValidationError, LaborPortalError, UpstreamError
from labor_portal.models import MessageRole, utc_now
from labor_portal.proactive.engine import ProactiveEngine
from labor_portal.repositories import ConversationRepository
from labor_portal.services.profile_service import ProfileService
from labor_portal.services.utils import is_missing, validate_user_id


@dataclass
class ChatReply:
    """一轮对话的完整结果，tools_used 和模型信息只用于服务端"""
    response: str
    tools_used: List[str] = field(default_factory=list)
    intent: str = ""
    model_name: str = ""
    proactive_events: List[Dict[str, Any]] = field(default_factory=list)

    def to_public_dict(self) -> Dict[str, Any]:
        """返回给客户端的内容，不含工具和模型元数据"""
        return {
            "response": self.response,
            "proactive_suggestions": [
                {
                    "id": event.get("id"),
                    "event_type": event.get("event_type"),
                    "suggested_action": event.get("suggested_action"),
                }
                for event in self.proactive_events
            ],
        }


def history_to_messages(history: List[Dict[str, Any]]) -> List[BaseMessage]:
    """[{"role": "user"|"assistant", "content": ...}] -> LangChain 消息"""
    messages: List[BaseMessage] = []
    for item in history:
        content = item.get("content")
        if is_missing(content):
            continue
        if item.get("role") == MessageRole.ASSISTANT.value:
            messages.append(AIMessage(content=content))
        else:
            messages.append(HumanMessage(content=content))
    return messages


def message_text(message: Any) -> str:
    """提取模型回复文本，兼容分段内容（如 Gemini 返回的列表）"""
    content = getattr(message, "content", "")
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        content = "".join(parts)
    return (content or "").strip()


class ChatService:
    """
    聊天服务类

    使用示例：
        service = ChatService(session, model_router)
        reply = service.send_message(user_id, "أريد حجز موعد")
        print(reply.response)
    """

    def __init__(
        self,
        session: Session,
        router: ModelRouter,
        engine: Optional[ProactiveEngine] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            session: SQLModel 数据库会话
            router: 模型路由器
            engine: 主动提醒引擎，默认基于同一会话创建
            clock: 返回当前 UTC 时间的函数
        """
        self.session = session
        self.router = router
        self.engine = engine or ProactiveEngine(session, clock=clock)
        self.clock = clock
        self.conversations = ConversationRepository(session)
        self.profiles = ProfileService(session)

    def _load_history(self, user_id: str, history: Optional[List[Dict[str, Any]]]) -> List[BaseMessage]:
        if history is None:
            stored = self.conversations.get_recent(user_id, CHAT_HISTORY_WINDOW)
            history = [{"role": item.role.value, "content": item.content} for item in stored]
        return history_to_messages(history[-CHAT_HISTORY_WINDOW:])

    def send_message(
        self,
        user_id: str,
        message: str,
        history: Optional[List[Dict[str, Any]]] = None
    ) -> ChatReply:
        """
        处理一轮对话

        Args:
            user_id: 用户 UUID
            message: 用户消息
            history: 客户端提供的历史消息（可选，缺省时从数据库读取最近 5 条）

        Returns:
            ChatReply 对象

        Raises:
            InputValidationError: user_id 或 message 不合法
            UpstreamError: 模型调用失败
        """
        validate_user_id(user_id)
        if is_missing(message):
            raise InputValidationError("message is required")

        prior_messages = self._load_history(user_id, history)
        self.conversations.add_message(user_id, MessageRole.USER, message)

        pending_events = self.engine.get_pending_events_cached(user_id)

        intent = detect_intent(message)
        complexity = get_complexity_from_intent(intent)
        model_name = self.router.get_model_name(complexity)
        print(f"[ChatService] 意图: {intent} -> {complexity.value} ({model_name})")

        profile = self.profiles.get_profile(user_id)
        system_prompt = build_system_prompt(
            today=self.clock().date(),
            full_name=profile.full_name if profile else None,
            pending_events=pending_events
        )
        messages = [SystemMessage(content=system_prompt)] + prior_messages + [HumanMessage(content=message)]

        try:
            llm = self.router.get_optimal_model(complexity)
            graph = create_agent_graph(llm, ActionDispatcher(self.session))
            final_state = graph.invoke({
                "messages": messages,
                "user_id": user_id,
                "step_count": 0,
                "tools_used": [],
            })
        except LaborPortalError:
            raise
        except Exception as e:
            raise UpstreamError(model_name, str(e)) from e

        tools_used = final_state.get("tools_used", [])
        response = message_text(final_state["messages"][-1]) or EMPTY_REPLY_FALLBACK
        if tools_used:
            print(f"[ChatService] 本轮调用工具: {tools_used}")
            self.engine.cache.invalidate(user_id)

        self.conversations.add_message(user_id, MessageRole.ASSISTANT, response)
        self.profiles.touch_behavior(user_id, message, intent)

        return ChatReply(
            response=response,
            tools_used=tools_used,
            intent=intent,
            model_name=model_name,
            proactive_events=pending_events
        )
