"""
服务层工具函数单元测试
"""

from datetime import date, datetime, timezone

import pytest

from labor_portal.exceptions import InputValidationError
from labor_portal.models import AppointmentStatus, LaborAppointment
from labor_portal.services.utils import (
    is_missing,
    is_valid_uuid,
    parse_date,
    parse_optional_date,
    require_fields,
    to_jsonable,
    validate_user_id,
)


class TestUuid:
    """测试 UUID v1-v5 校验"""

    @pytest.mark.parametrize("value", [
        "3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e",
        "A1B2C3D4-E5F6-1A2B-9C3D-4E5F6A7B8C9D",
        "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
    ])
    def test_valid(self, value):
        assert is_valid_uuid(value)

    @pytest.mark.parametrize("value", [
        None,
        "",
        "abc",
        123,
        "00000000-0000-0000-0000-000000000000",
        "3f2b8c1e-4d5a-7b6c-8d7e-9f0a1b2c3d4e",
        "3f2b8c1e-4d5a-4b6c-7d7e-9f0a1b2c3d4e",
        " 3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e",
    ])
    def test_invalid(self, value):
        assert not is_valid_uuid(value)

    def test_validate_user_id_messages(self):
        with pytest.raises(InputValidationError, match="user_id is required"):
            validate_user_id(None)
        with pytest.raises(InputValidationError, match="Invalid user_id format"):
            validate_user_id("abc")


class TestFields:

    def test_is_missing(self):
        assert is_missing(None)
        assert is_missing("  ")
        assert not is_missing(0)
        assert not is_missing([])

    def test_require_fields_lists_all(self):
        with pytest.raises(InputValidationError) as exc_info:
            require_fields({"a": 1, "b": ""}, ["a", "b", "c"])
        assert exc_info.value.message == "Missing required fields: b, c"


class TestParseDate:
    """测试日期解析"""

    def test_accepts_date_datetime_and_string(self):
        assert parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
        assert parse_date(datetime(2025, 3, 1, 15, 30)) == date(2025, 3, 1)
        assert parse_date("2025-03-01") == date(2025, 3, 1)
        assert parse_date("2025-03-01T10:00:00Z") == date(2025, 3, 1)

    @pytest.mark.parametrize("value", ["01/03/2025", "tomorrow", 20250301, None])
    def test_rejects_other_values(self, value):
        with pytest.raises(InputValidationError, match="appointment_date"):
            parse_date(value, "appointment_date")

    def test_optional(self):
        assert parse_optional_date("") is None
        assert parse_optional_date("2025-03-01") == date(2025, 3, 1)


class TestToJsonable:

    def test_model_and_nested_values(self):
        appointment = LaborAppointment(
            id="appt-1",
            user_id="u",
            appointment_type="consultation",
            appointment_date=date(2025, 3, 12),
            created_at=datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
        )

        result = to_jsonable({"items": [appointment], "status": AppointmentStatus.SCHEDULED, "day": date(2025, 1, 2)})

        assert result["status"] == "scheduled"
        assert result["day"] == "2025-01-02"
        item = result["items"][0]
        assert item["id"] == "appt-1"
        assert item["appointment_date"] == "2025-03-12"
        assert item["status"] == "scheduled"

    def test_plain_values_unchanged(self):
        assert to_jsonable({"a": 1, "b": None, "c": "x"}) == {"a": 1, "b": None, "c": "x"}
