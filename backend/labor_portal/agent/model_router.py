"""
模型路由

按对话意图选择模型：
- simple: 快速低成本模型（查看类请求）
- medium: 默认均衡模型
- complex: 推理能力最强的模型（简历编写、法规咨询、预约）
"""

import re
from enum import Enum
from typing import Any, Dict, Optional

from labor_portal.agent.llm_factory import LLMFactory, llm_factory


class ModelComplexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


SIMPLE_INTENTS = frozenset({
    "view_resume",
    "view_certificates",
    "view_appointments",
    "view_contracts",
    "check_ticket",
    "general_inquiry",
})

COMPLEX_INTENTS = frozenset({
    "create_resume",
    "update_resume",
    "regulations",
    "book_appointment",
})

# 关键词 -> 意图，按顺序匹配，先命中者生效
INTENT_KEYWORDS = (
    ("book_appointment", ("احجز", "حجز موعد", "book appointment", "موعد جديد")),
    ("view_appointments", ("مواعيد", "موعدي", "appointment")),
    ("update_resume", ("حدث السيرة", "تحديث السيرة", "عدل السيرة", "update resume")),
    ("create_resume", ("أنشئ سيرة", "سيرة ذاتية جديدة", "create resume")),
    ("view_resume", ("سيرتي", "السيرة الذاتية", "resume", "cv")),
    ("view_certificates", ("شهادة", "شهادات", "تعريف براتب", "رخصة", "certificate")),
    ("view_contracts", ("عقد", "عقدي", "عقود", "contract")),
    ("check_ticket", ("تذكرة", "تذاكر", "شكوى", "ticket")),
    ("regulations", ("نظام العمل", "لائحة", "قانون", "أنظمة", "regulation", "law")),
    ("domestic_labor", ("عمالة منزلية", "عاملة منزلية", "استقدام", "domestic")),
)

DEFAULT_INTENT = "general_inquiry"


def _keyword_pattern(keyword: str) -> str:
    # 英文关键词按整词匹配（允许复数 s），阿拉伯语关键词常带前缀，按子串匹配
    if keyword.isascii():
        return rf"\b{re.escape(keyword)}s?\b"
    return re.escape(keyword)


INTENT_PATTERNS = tuple(
    (intent, re.compile("|".join(_keyword_pattern(keyword) for keyword in keywords)))
    for intent, keywords in INTENT_KEYWORDS
)


def get_complexity_from_intent(intent: Optional[str]) -> ModelComplexity:
    """意图 -> 复杂度，未知意图为 medium"""
    if intent in SIMPLE_INTENTS:
        return ModelComplexity.SIMPLE
    if intent in COMPLEX_INTENTS:
        return ModelComplexity.COMPLEX
    return ModelComplexity.MEDIUM


def detect_intent(message: str) -> str:
    """
    基于关键词的意图识别

    Args:
        message: 用户消息

    Returns:
        意图名，未命中任何关键词时为 general_inquiry
    """
    text = (message or "").lower()
    for intent, pattern in INTENT_PATTERNS:
        if pattern.search(text):
            return intent
    return DEFAULT_INTENT


def _coerce_complexity(complexity: Any) -> ModelComplexity:
    try:
        return ModelComplexity(complexity)
    except ValueError:
        return ModelComplexity.MEDIUM


class ModelRouter:
    """
    模型路由器
    复杂度 -> provider 的映射来自 llm_config.json 的 routes
    """

    def __init__(self, factory: LLMFactory = None):
        self.factory = factory or llm_factory

    def get_model_config(self, complexity: Any) -> Dict[str, Any]:
        """
        查表获取某复杂度对应的模型配置，不创建模型

        Returns:
            provider 配置字典，附带 provider 名
        """
        complexity = _coerce_complexity(complexity)
        provider_name = self.factory.get_route_provider(complexity.value)
        config = dict(self.factory.get_provider_config(provider_name))
        config["provider"] = provider_name
        return config

    def get_model_name(self, complexity: Any) -> str:
        """用于日志展示的模型名"""
        config = self.get_model_config(complexity)
        return config.get("display_name") or config.get("model_name", config["provider"])

    def get_optimal_model(self, complexity: Any) -> Any:
        """
        创建某复杂度对应的聊天模型
        不做重试，也不回退到其他 provider
        """
        complexity = _coerce_complexity(complexity)
        provider_name = self.factory.get_route_provider(complexity.value)
        print(f"[ModelRouter] {complexity.value} -> {provider_name}")
        return self.factory.create_llm(provider_name)


# 全局路由器实例
model_router = ModelRouter()


def get_model_config(complexity: Any) -> Dict[str, Any]:
    return model_router.get_model_config(complexity)


def get_model_name(complexity: Any) -> str:
    return model_router.get_model_name(complexity)


def get_optimal_model(complexity: Any) -> Any:
    return model_router.get_optimal_model(complexity)
