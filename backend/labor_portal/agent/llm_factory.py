"""LLM 工厂模块

根据配置文件创建和管理 LLM 实例。
遵循安全协议：从不读取 .env 文件，只从系统环境变量获取密钥。

配置文件结构：
- active_model: 默认使用的 provider
- routes: 复杂度 -> provider 的映射（模型路由使用）
- providers: 各 provider 的 type、model_name、base_url、env_key_map、temperature
"""

import json
import os
from typing import Any, Dict, Optional

from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI

from labor_portal.config import get_llm_config_path


class LLMFactory:
    """LLM 工厂类，负责创建和管理 LLM 实例"""

    def __init__(self, config_path: str = None):
        """初始化工厂，加载配置文件

        Args:
            config_path: 配置文件路径，如果为 None 则使用 backend/llm_config.json
                （可用 LLM_CONFIG_PATH 环境变量覆盖）
        """
        self.config_path = config_path or get_llm_config_path()
        self._loaded_config = None

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            json.JSONDecodeError: JSON 格式错误
        """
        if self._loaded_config is None:
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    self._loaded_config = json.load(f)
            except FileNotFoundError:
                raise FileNotFoundError(f"配置文件不存在: {self.config_path}")
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(f"JSON 格式错误: {e}", e.doc, e.pos)

        return self._loaded_config

    def get_provider_config(self, provider_name: str) -> Dict[str, Any]:
        """获取指定 provider 的配置

        Raises:
            ValueError: providers 缺失或找不到该 provider
        """
        providers = self._load_config().get("providers")
        if not providers:
            raise ValueError("配置文件中缺少 providers 字段")

        model_config = providers.get(provider_name)
        if not model_config:
            raise ValueError(f"providers 中找不到 '{provider_name}' 的配置")
        return model_config

    def get_active_provider(self) -> str:
        active_model = self._load_config().get("active_model")
        if not active_model:
            raise ValueError("配置文件中缺少 active_model 字段")
        return active_model

    def get_active_model_config(self) -> Dict[str, Any]:
        """获取当前激活的模型配置"""
        return self.get_provider_config(self.get_active_provider())

    def get_route_provider(self, complexity: str) -> str:
        """获取某复杂度对应的 provider 名

        Raises:
            ValueError: routes 中没有该复杂度
        """
        routes = self._load_config().get("routes") or {}
        provider_name = routes.get(complexity)
        if not provider_name:
            raise ValueError(f"routes 中找不到复杂度 '{complexity}' 的配置")
        return provider_name

    def _get_api_key(self, env_key: str) -> str:
        """从系统环境变量获取 API Key

        Raises:
            ValueError: 环境变量不存在或为空
        """
        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(f"环境变量 '{env_key}' 未设置或为空，无法初始化 LLM")

        return api_key

    def create_llm(self, provider_name: Optional[str] = None) -> Any:
        """创建并返回 LLM 实例

        Args:
            provider_name: provider 名，None 时使用 active_model

        Returns:
            LangChain LLM 对象 (ChatOpenAI 或 ChatGoogleGenerativeAI)

        Raises:
            ValueError: 配置错误或环境变量缺失
            NotImplementedError: 不支持的模型类型
        """
        if provider_name is None:
            provider_name = self.get_active_provider()
        model_config = self.get_provider_config(provider_name)

        env_key_map = model_config.get("env_key_map")
        if not env_key_map:
            raise ValueError("模型配置中缺少 env_key_map 字段")

        api_key = self._get_api_key(env_key_map)

        base_url = model_config.get("base_url")
        model_name = model_config.get("model_name")
        temperature = model_config.get("temperature", 0.7)

        if not model_name:
            raise ValueError("模型配置中缺少 model_name 字段")

        model_type = model_config.get("type", "openai_compatible")

        if model_type == "openai_compatible":
            # OpenAI 官方及 Groq 等 OpenAI 兼容接口
            return ChatOpenAI(
                api_key=api_key,
                base_url=base_url,
                model=model_name,
                temperature=temperature
            )
        elif model_type == "gemini":
            # Google Gemini
            return ChatGoogleGenerativeAI(
                google_api_key=api_key,
                model=model_name,
                temperature=temperature
            )
        else:
            raise NotImplementedError(f"不支持的模型类型: {model_type}")


# 全局工厂实例
llm_factory = LLMFactory()


def get_llm(provider_name: Optional[str] = None):
    """获取 LLM 实例的便捷函数

    Returns:
        LangChain LLM 对象
    """
    return llm_factory.create_llm(provider_name)
