"""
Pytest 测试配置
提供测试数据库、固定时钟、Mock LLM 和 API 客户端等测试基础设施
"""

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine
from unittest.mock import Mock

# 添加 backend 目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from labor_portal.db.init_db import create_tables
from labor_portal.models import (
    UserProfile,
    EmploymentContract, ContractStatus,
    Resume,
)


# 固定的“当前时间”，所有依赖时钟的测试都以它为基准
FIXED_NOW = datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc)

TEST_USER_ID = "3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e"
OTHER_USER_ID = "a1b2c3d4-e5f6-1a2b-9c3d-4e5f6a7b8c9d"


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    StaticPool 让 TestClient 的工作线程共享同一个内存库
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    create_tables(engine)

    yield engine


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    创建测试用的数据库会话
    """
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture(scope="function")
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture(scope="function")
def fixed_clock():
    """返回 FIXED_NOW 的时钟函数"""
    return lambda: FIXED_NOW


@pytest.fixture(scope="function")
def user_id() -> str:
    return TEST_USER_ID


@pytest.fixture(scope="function")
def other_user_id() -> str:
    return OTHER_USER_ID


# ==================== Mock LLM Fixtures ====================

@pytest.fixture(scope="function")
def mock_llm():
    """
    Mock LLM 实例
    bind_tools 返回自身，测试通过 invoke.side_effect 编排模型回复
    """
    from langchain_core.messages import AIMessage

    mock = Mock()
    mock.bind_tools.return_value = mock
    mock.invoke.return_value = AIMessage(content="Mock LLM response")
    return mock


@pytest.fixture(scope="function")
def mock_router(mock_llm):
    """
    Mock ModelRouter
    不读取 llm_config.json，也不创建真实模型
    """
    router = Mock()
    router.get_model_name.return_value = "mock-model"
    router.get_optimal_model.return_value = mock_llm
    return router


@pytest.fixture(scope="function")
def mock_speech():
    """Mock SpeechService"""
    speech = Mock()
    speech.transcribe.return_value = "أريد معرفة عقودي"
    speech.synthesize.return_value = b"ID3-fake-mp3"
    return speech


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def test_profile(test_db_session: Session) -> UserProfile:
    """
    创建测试用户资料
    """
    profile = UserProfile(
        user_id=TEST_USER_ID,
        full_name="محمد عبدالله",
        phone="0500000000",
        email="mohammed@example.com",
        national_id="1000000001",
        nationality="سعودي"
    )
    test_db_session.add(profile)
    test_db_session.commit()
    test_db_session.refresh(profile)
    return profile


@pytest.fixture(scope="function")
def test_contract(test_db_session: Session) -> EmploymentContract:
    """
    创建 active 合同（无结束日期）
    """
    contract = EmploymentContract(
        user_id=TEST_USER_ID,
        employer_name="شركة الرياض للتقنية",
        position="مهندس برمجيات",
        salary=12500.0,
        contract_type="دوام كامل",
        start_date=date(2020, 1, 15),
        status=ContractStatus.ACTIVE,
        created_at=FIXED_NOW - timedelta(days=400)
    )
    test_db_session.add(contract)
    test_db_session.commit()
    test_db_session.refresh(contract)
    return contract


@pytest.fixture(scope="function")
def test_resume(test_db_session: Session) -> Resume:
    """
    创建完整的测试简历
    """
    resume = Resume(
        user_id=TEST_USER_ID,
        job_title="مهندس برمجيات",
        skills=["Python", "SQL"],
        experience_years=5,
        education="بكالوريوس علوم الحاسب",
        summary="مطور خلفيات بخبرة خمس سنوات"
    )
    test_db_session.add(resume)
    test_db_session.commit()
    test_db_session.refresh(resume)
    return resume


# ==================== API Fixtures ====================

@pytest.fixture(scope="function")
def client(test_db_engine, mock_router, mock_speech):
    """
    FastAPI TestClient
    替换数据库会话、模型路由和语音服务依赖
    """
    from fastapi.testclient import TestClient

    from labor_portal.api.deps import get_model_router, get_session, get_speech_service
    from labor_portal.api.server import create_app

    app = create_app(initialize_database=False)

    def override_session():
        with Session(test_db_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_model_router] = lambda: mock_router
    app.dependency_overrides[get_speech_service] = lambda: mock_speech

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_proactive_cache():
    """每个测试前后清空全局主动事件缓存"""
    from labor_portal.proactive.cache import proactive_cache

    proactive_cache.clear()
    yield
    proactive_cache.clear()


@pytest.fixture(autouse=True)
def clear_resume_import_store():
    """每个测试前后清空待确认的简历导入会话"""
    from labor_portal.services.resume_import_service import resume_import_store

    resume_import_store.clear()
    yield
    resume_import_store.clear()


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    # 标记测试分类
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "api: HTTP API tests"
    )
