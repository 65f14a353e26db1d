"""
ChatService 单元测试
使用 Mock LLM 编排模型回复，验证工具循环、对话存储和主动事件注入
"""

import json
from datetime import date

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from sqlmodel import select

from labor_portal.agent.prompts import EMPTY_REPLY_FALLBACK
from labor_portal.config import AGENT_MAX_STEPS
from labor_portal.exceptions import InputValidationError, UpstreamError
from labor_portal.models import AgentActionLog, Conversation, LaborAppointment, MessageRole
from labor_portal.repositories import ConversationRepository, ProactiveRepository, ProfileRepository
from labor_portal.services.chat_service import ChatService, history_to_messages, message_text


def _tool_call(name, args, call_id="call_1"):
    return AIMessage(
        content="",
        tool_calls=[{"name": name, "args": args, "id": call_id, "type": "tool_call"}]
    )


@pytest.fixture
def chat_service(test_db_session, mock_router, fixed_clock):
    return ChatService(test_db_session, mock_router, clock=fixed_clock)


class TestHelpers:
    """测试消息转换工具函数"""

    def test_history_to_messages(self):
        messages = history_to_messages([
            {"role": "user", "content": "مرحبا"},
            {"role": "assistant", "content": "أهلاً"},
            {"role": "user", "content": ""},
        ])

        assert [type(m) for m in messages] == [HumanMessage, AIMessage]
        assert messages[1].content == "أهلاً"

    def test_message_text_with_parts(self):
        message = AIMessage(content=[{"type": "text", "text": "جزء "}, {"type": "image_url"}, "ثانٍ"])
        assert message_text(message) == "جزء ثانٍ"

    def test_message_text_strips(self):
        assert message_text(AIMessage(content="  نص  ")) == "نص"


class TestSendMessage:
    """测试一轮对话"""

    def test_plain_reply(self, chat_service, test_db_session, mock_router, user_id):
        """测试无工具调用时直接返回模型回复"""
        reply = chat_service.send_message(user_id, "السلام عليكم")

        assert reply.response == "Mock LLM response"
        assert reply.tools_used == []
        assert reply.model_name == "mock-model"

        stored = ConversationRepository(test_db_session).get_recent(user_id, 10)
        assert [(m.role, m.content) for m in stored] == [
            (MessageRole.USER, "السلام عليكم"),
            (MessageRole.ASSISTANT, "Mock LLM response"),
        ]
        behavior = ProfileRepository(test_db_session).get_behavior(user_id)
        assert behavior.last_message == "السلام عليكم"
        assert behavior.last_intent == reply.intent

    def test_tool_call_books_appointment(self, chat_service, test_db_session, mock_llm, user_id, other_user_id):
        """测试工具循环：预约写入会话用户名下，忽略模型给出的 user_id"""
        mock_llm.invoke.side_effect = [
            _tool_call("book_appointment", {
                "appointment_type": "consultation",
                "appointment_date": "2025-03-12",
                "notes": None,
                "user_id": other_user_id,
            }),
            AIMessage(content="تم حجز موعدك يوم 2025-03-12"),
        ]

        reply = chat_service.send_message(user_id, "أريد أن أحجز موعد")

        assert reply.response == "تم حجز موعدك يوم 2025-03-12"
        assert reply.tools_used == ["book_appointment"]

        appointments = test_db_session.exec(select(LaborAppointment)).all()
        assert len(appointments) == 1
        assert appointments[0].user_id == user_id
        assert appointments[0].appointment_date == date(2025, 3, 12)

        second_call_messages = mock_llm.invoke.call_args_list[1][0][0]
        tool_message = second_call_messages[-1]
        assert isinstance(tool_message, ToolMessage)
        assert json.loads(tool_message.content)["success"] is True

    def test_public_dict_hides_tools(self, chat_service, mock_llm, user_id):
        mock_llm.invoke.side_effect = [
            _tool_call("get_tickets", {}),
            AIMessage(content="لا توجد تذاكر"),
        ]

        public = chat_service.send_message(user_id, "تذاكري").to_public_dict()
        assert set(public) == {"response", "proactive_suggestions"}

    def test_tool_error_returned_to_model(self, chat_service, test_db_session, mock_llm, user_id):
        """测试业务错误作为失败结果回传给模型，对话继续"""
        mock_llm.invoke.side_effect = [
            _tool_call("cancel_appointment", {"appointment_id": "missing"}),
            AIMessage(content="لم أجد الموعد"),
        ]

        reply = chat_service.send_message(user_id, "ألغِ موعدي")

        assert reply.response == "لم أجد الموعد"
        tool_message = mock_llm.invoke.call_args_list[1][0][0][-1]
        assert json.loads(tool_message.content) == {"success": False, "error": "Appointment not found: missing"}
        logs = test_db_session.exec(select(AgentActionLog)).all()
        assert [log.success for log in logs] == [False]

    def test_step_limit(self, chat_service, mock_llm, user_id):
        """测试模型一直请求工具时在步数上限处停止"""
        mock_llm.invoke.return_value = _tool_call("get_tickets", {})

        reply = chat_service.send_message(user_id, "تذاكري")

        assert mock_llm.invoke.call_count == AGENT_MAX_STEPS
        assert len(reply.tools_used) == AGENT_MAX_STEPS - 1
        assert reply.response == EMPTY_REPLY_FALLBACK

    def test_llm_failure_wrapped(self, chat_service, test_db_session, mock_llm, user_id):
        mock_llm.invoke.side_effect = RuntimeError("rate limited")

        with pytest.raises(UpstreamError) as exc_info:
            chat_service.send_message(user_id, "مرحبا")

        assert exc_info.value.provider == "mock-model"
        assert "rate limited" in exc_info.value.message

    @pytest.mark.parametrize("bad_user_id,message", [
        ("not-a-uuid", "مرحبا"),
        ("", "مرحبا"),
        ("3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e", "   "),
    ])
    def test_invalid_input(self, chat_service, test_db_session, bad_user_id, message):
        with pytest.raises(InputValidationError):
            chat_service.send_message(bad_user_id, message)
        assert test_db_session.exec(select(Conversation)).all() == []

    def test_pending_events_in_prompt_and_reply(self, chat_service, test_db_session, mock_llm, fixed_now, user_id):
        """测试待处理事件写入系统提示词并随回复返回"""
        event, _ = ProactiveRepository(test_db_session).create_if_absent(
            user_id, "appointment_reminder", {}, "لديك موعد غداً", fixed_now
        )

        reply = chat_service.send_message(user_id, "مرحبا")

        system_message = mock_llm.invoke.call_args_list[0][0][0][0]
        assert isinstance(system_message, SystemMessage)
        assert "لديك موعد غداً" in system_message.content
        assert reply.to_public_dict()["proactive_suggestions"] == [
            {"id": event.id, "event_type": "appointment_reminder", "suggested_action": "لديك موعد غداً"}
        ]

    def test_user_name_in_prompt(self, chat_service, test_profile, mock_llm, user_id):
        chat_service.send_message(user_id, "مرحبا")

        system_message = mock_llm.invoke.call_args_list[0][0][0][0]
        assert "محمد عبدالله" in system_message.content
        assert "2025-03-10" in system_message.content

    def test_history_loaded_from_database(self, chat_service, mock_llm, user_id):
        """测试未提供历史时使用数据库中的最近消息"""
        chat_service.send_message(user_id, "الرسالة الأولى")
        chat_service.send_message(user_id, "الرسالة الثانية")

        messages = mock_llm.invoke.call_args_list[1][0][0]
        contents = [m.content for m in messages[1:]]
        assert contents == ["الرسالة الأولى", "Mock LLM response", "الرسالة الثانية"]

    def test_client_history_used(self, chat_service, mock_llm, user_id):
        chat_service.send_message(user_id, "سؤال", history=[{"role": "assistant", "content": "سابق"}])

        messages = mock_llm.invoke.call_args_list[0][0][0]
        assert [m.content for m in messages[1:]] == ["سابق", "سؤال"]
