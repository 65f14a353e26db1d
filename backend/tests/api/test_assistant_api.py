"""
智能助手 HTTP 接口测试
动作分发、聊天、语音和文字转语音
"""

import pytest
from langchain_core.messages import AIMessage
from sqlmodel import Session, select

from labor_portal.agent.prompts import VOICE_APOLOGY, VOICE_EMPTY_AUDIO, VOICE_GREETING, VOICE_NOT_HEARD
from labor_portal.exceptions import InputValidationError, UpstreamError
from labor_portal.models import AgentActionLog, LaborAppointment


pytestmark = pytest.mark.api


def _audit_rows(engine):
    with Session(engine) as session:
        return session.exec(select(AgentActionLog)).all()


class TestAgentActionApi:
    """测试 /api/agent/action"""

    def test_catalogue(self, client):
        body = client.get("/api/agent/action").json()

        assert body["success"] is True
        assert "book_appointment" in body["data"]["available_actions"]
        assert body["data"]["actions"]["book_appointment"]["required"] == [
            "user_id", "appointment_type", "appointment_date"
        ]

    def test_book_appointment_end_to_end(self, client, test_db_engine, user_id):
        """测试通过动作接口预约后可在预约列表中看到"""
        response = client.post("/api/agent/action", json={
            "action": "book_appointment",
            "user_id": user_id,
            "appointment_type": "consultation",
            "appointment_date": "2025-03-20",
            "notes": "مراجعة عقد",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Action 'book_appointment' executed successfully"
        assert body["data"]["status"] == "scheduled"

        listed = client.get("/api/appointments", params={"user_id": user_id}).json()["data"]
        assert [a["id"] for a in listed] == [body["data"]["id"]]
        assert listed[0]["notes"] == "مراجعة عقد"

        rows = _audit_rows(test_db_engine)
        assert [(r.action_type, r.success) for r in rows] == [("book_appointment", True)]

    def test_unknown_action(self, client, test_db_engine):
        response = client.post("/api/agent/action", json={"action": "drop_tables"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Unknown agent action: drop_tables"}
        assert [r.success for r in _audit_rows(test_db_engine)] == [False]

    def test_missing_action(self, client):
        response = client.post("/api/agent/action", json={"user_id": "x"})
        assert response.status_code == 400
        assert response.json()["error"] == "action is required"

    @pytest.mark.parametrize("bad_user_id", ["abc", "3f2b8c1e-4d5a-0b6c-8d7e-9f0a1b2c3d4e"])
    def test_invalid_user_id(self, client, test_db_engine, bad_user_id):
        response = client.post("/api/agent/action", json={"action": "get_contracts", "user_id": bad_user_id})

        assert response.status_code == 400
        assert "Invalid user_id format" in response.json()["error"]

    def test_missing_field_writes_nothing(self, client, test_db_engine, user_id):
        """测试缺少必填字段时不写领域数据，只写审计日志"""
        response = client.post("/api/agent/action", json={
            "action": "book_appointment",
            "user_id": user_id,
            "appointment_type": "consultation",
        })

        assert response.status_code == 400
        assert "appointment_date" in response.json()["error"]
        with Session(test_db_engine) as session:
            assert session.exec(select(LaborAppointment)).all() == []
        assert [r.success for r in _audit_rows(test_db_engine)] == [False]

    def test_double_cancel(self, client, test_db_engine, user_id):
        booked = client.post("/api/agent/action", json={
            "action": "book_appointment",
            "user_id": user_id,
            "appointment_type": "consultation",
            "appointment_date": "2025-03-20",
        }).json()["data"]

        first = client.post("/api/agent/action", json={"action": "cancel_appointment", "appointment_id": booked["id"]})
        second = client.post("/api/agent/action", json={"action": "cancel_appointment", "appointment_id": booked["id"]})

        assert first.status_code == 200
        assert second.status_code == 500
        assert second.json()["error"] == "Appointment already cancelled"
        assert [r.success for r in _audit_rows(test_db_engine)] == [True, True, False]

    def test_certificate_action(self, client, test_profile, test_contract, user_id):
        response = client.post("/api/agent/action", json={"action": "generate_labor_license", "user_id": user_id})

        assert response.status_code == 200
        assert response.json()["data"]["certificate_type"] == "labor_license"


class TestChatApi:
    """测试 /api/chat"""

    def test_plain_reply(self, client, user_id):
        response = client.post("/api/chat", json={"user_id": user_id, "message": "مرحبا"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"response": "Mock LLM response", "proactive_suggestions": []},
        }

    def test_tool_usage_not_exposed(self, client, test_db_engine, mock_llm, user_id):
        """测试工具调用结果落库，但响应中不暴露工具信息"""
        mock_llm.invoke.side_effect = [
            AIMessage(content="", tool_calls=[{
                "name": "create_ticket",
                "args": {"title": "تأخر الراتب", "category": "wages"},
                "id": "call_ticket",
                "type": "tool_call",
            }]),
            AIMessage(content="تم فتح تذكرة"),
        ]

        data = client.post("/api/chat", json={"user_id": user_id, "message": "أريد فتح تذكرة"}).json()["data"]

        assert data == {"response": "تم فتح تذكرة", "proactive_suggestions": []}
        tickets = client.get("/api/tickets", params={"user_id": user_id}).json()["data"]
        assert [t["title"] for t in tickets] == ["تأخر الراتب"]

    def test_invalid_input(self, client, user_id):
        assert client.post("/api/chat", json={"user_id": "abc", "message": "مرحبا"}).status_code == 400
        assert client.post("/api/chat", json={"user_id": user_id}).status_code == 400
        assert client.post("/api/chat", json={"user_id": user_id, "message": "x", "history": "bad"}).status_code == 400

    def test_model_failure(self, client, mock_llm, user_id):
        mock_llm.invoke.side_effect = RuntimeError("provider unavailable")

        response = client.post("/api/chat", json={"user_id": user_id, "message": "مرحبا"})
        assert response.status_code == 500
        assert response.json()["error"] == "mock-model error: provider unavailable"


class TestVoiceApi:
    """测试 /api/voice"""

    def test_greeting(self, client, mock_speech):
        response = client.post("/api/voice", json={"action": "greeting"})

        assert response.status_code == 200
        assert response.json() == {"userText": "", "aiText": VOICE_GREETING, "audio": None}
        mock_speech.transcribe.assert_not_called()

    def test_json_without_greeting(self, client):
        assert client.post("/api/voice", json={"action": "other"}).status_code == 400

    def test_missing_audio(self, client, user_id):
        response = client.post("/api/voice", data={"user_id": user_id})
        assert response.status_code == 400
        assert response.json()["error"] == "audio is required"

    def test_invalid_user_id(self, client):
        response = client.post(
            "/api/voice",
            files={"audio": ("rec.webm", b"audio", "audio/webm")},
            data={"user_id": "abc"},
        )
        assert response.status_code == 400

    def test_empty_audio(self, client, mock_speech, user_id):
        response = client.post(
            "/api/voice",
            files={"audio": ("rec.webm", b"", "audio/webm")},
            data={"user_id": user_id},
        )

        assert response.json()["aiText"] == VOICE_EMPTY_AUDIO
        mock_speech.transcribe.assert_not_called()

    def test_transcribe_and_reply(self, client, mock_speech, user_id):
        response = client.post(
            "/api/voice",
            files={"audio": ("rec.webm", b"audio-bytes", "audio/webm")},
            data={"user_id": user_id},
        )

        assert response.status_code == 200
        assert response.json() == {"userText": "أريد معرفة عقودي", "aiText": "Mock LLM response", "audio": None}
        mock_speech.transcribe.assert_called_once_with(b"audio-bytes", "rec.webm", "audio/webm")

    def test_nothing_heard(self, client, mock_speech, mock_llm, user_id):
        mock_speech.transcribe.return_value = ""

        response = client.post(
            "/api/voice",
            files={"audio": ("rec.webm", b"audio-bytes", "audio/webm")},
            data={"user_id": user_id},
        )

        assert response.json()["aiText"] == VOICE_NOT_HEARD
        mock_llm.invoke.assert_not_called()

    def test_failure_returns_apology(self, client, mock_speech, user_id):
        """测试下游失败时仍返回 200 和道歉文本"""
        mock_speech.transcribe.side_effect = UpstreamError("openai", "timeout")

        response = client.post(
            "/api/voice",
            files={"audio": ("rec.webm", b"audio-bytes", "audio/webm")},
            data={"user_id": user_id},
        )

        assert response.status_code == 200
        assert response.json() == {"userText": "", "aiText": VOICE_APOLOGY, "audio": None}


class TestTtsApi:
    """测试 /api/tts"""

    def test_returns_mp3(self, client, mock_speech):
        response = client.post("/api/tts", json={"text": "مرحباً"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.content == b"ID3-fake-mp3"
        mock_speech.synthesize.assert_called_once_with("مرحباً")

    def test_missing_text(self, client, mock_speech):
        mock_speech.synthesize.side_effect = InputValidationError("text is required")

        response = client.post("/api/tts", json={})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "text is required"}

    def test_provider_failure(self, client, mock_speech):
        mock_speech.synthesize.side_effect = UpstreamError("elevenlabs", "401 invalid api key")

        response = client.post("/api/tts", json={"text": "مرحباً"})
        assert response.status_code == 500
        assert response.json()["error"] == "elevenlabs error: 401 invalid api key"
