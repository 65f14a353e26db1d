"""
服务层公共工具
用户 ID 校验、日期解析、必填字段检查和 JSON 序列化
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from sqlmodel import SQLModel

from labor_portal.exceptions import InputValidationError


# 严格的 UUID v1-v5 格式（大小写不敏感）
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE
)


def is_valid_uuid(value: Any) -> bool:
    """判断是否为合法的 UUID v1-v5 字符串"""
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def validate_user_id(user_id: Any) -> str:
    """
    校验用户 ID

    Args:
        user_id: 待校验的值

    Returns:
        原样返回合法的 user_id

    Raises:
        InputValidationError: 缺失或格式不合法
    """
    if user_id is None or user_id == "":
        raise InputValidationError("user_id is required")
    if not is_valid_uuid(user_id):
        raise InputValidationError(f"Invalid user_id format: {user_id}")
    return user_id


def is_missing(value: Any) -> bool:
    """None 和空字符串都视为缺失"""
    return value is None or (isinstance(value, str) and value.strip() == "")


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """
    检查必填字段

    Raises:
        InputValidationError: 列出所有缺失字段
    """
    missing = [name for name in fields if is_missing(data.get(name))]
    if missing:
        raise InputValidationError(f"Missing required fields: {', '.join(missing)}")


def parse_date(value: Any, field_name: str = "date") -> date:
    """
    解析日期
    表模型不做 pydantic 校验，字符串日期需要显式转换

    Args:
        value: date、datetime 或 ISO 格式字符串（YYYY-MM-DD）
        field_name: 出错时提示的字段名

    Returns:
        date 对象
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise InputValidationError(f"Invalid {field_name}: {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Any, field_name: str = "date") -> Optional[date]:
    if is_missing(value):
        return None
    return parse_date(value, field_name)


def to_jsonable(value: Any) -> Any:
    """
    把模型对象、日期和枚举递归转换为可 JSON 序列化的结构
    用于审计日志和 HTTP 响应
    """
    if isinstance(value, SQLModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
