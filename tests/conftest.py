"""测试夹具：为 pytest 提供隔离的数据库、文案目录与客户端。"""

import os
import tempfile
from typing import Generator

_TMP_DIR = tempfile.mkdtemp(prefix="respkit-tests-")
TEST_DB_PATH = os.path.join(_TMP_DIR, "test.db")

# 必须在导入 respkit 之前设置，配置对象与数据库引擎在导入时即被创建
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "log")
os.environ["SERVICE_NAME"] = "respkit"
os.environ.setdefault("DF_LANG", "zh_CN")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from respkit.db import session as db_session  # noqa: E402
from respkit.db.init_db import init_db  # noqa: E402
from respkit.main import app  # noqa: E402
from respkit.services.catalog import CatalogRegistry  # noqa: E402
from respkit.services.localization import MessageResolver, set_request_locale  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_database() -> Generator[None, None, None]:
    """创建 SQLite 测试数据库并写入基础文案，会话结束后清理。"""
    init_db()
    yield
    db_session.engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture(autouse=True)
def reset_request_locale() -> Generator[None, None, None]:
    set_request_locale(None)
    yield
    set_request_locale(None)


@pytest.fixture()
def db_session_fixture() -> Generator[Session, None, None]:
    """提供给测试用例使用的数据库会话。"""
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def registry() -> CatalogRegistry:
    registry = CatalogRegistry()
    registry.publish(
        "msgLangMap",
        {
            "greet": {"en": "Hi <%n%>", "zh_CN": "嗨 <%n%>"},
            "0": {"en": "success", "zh_CN": "成功"},
            "1001": {"en": "Invalid request", "zh_CN": "参数错误"},
            "only_en": {"en": "English only"},
        },
    )
    return registry


@pytest.fixture()
def resolver(registry: CatalogRegistry) -> MessageResolver:
    return MessageResolver(registry, map_key="msgLangMap", df_lang="zh_CN")


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """构建 FastAPI TestClient，启动事件会加载文案目录。"""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
