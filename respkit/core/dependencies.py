"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from collections.abc import Generator
from functools import lru_cache

from fastapi import Request
from sqlalchemy.orm import Session

from respkit.core.config import get_settings
from respkit.db import session as db_session
from respkit.services.catalog import catalog_registry
from respkit.services.envelope import EnvelopeBuilder
from respkit.services.http_client import HttpNormalizer
from respkit.services.localization import MessageResolver


def get_db() -> Generator[Session, None, None]:
    """生成一个数据库会话，并在请求结束后自动关闭。"""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_message_resolver() -> MessageResolver:
    return MessageResolver.from_settings(get_settings(), catalog_registry)


@lru_cache
def get_envelope_builder() -> EnvelopeBuilder:
    return EnvelopeBuilder.from_settings(get_settings(), get_message_resolver())


def get_http_normalizer(request: Request) -> HttpNormalizer:
    """返回应用启动时创建的共享 HTTP 客户端。"""
    return request.app.state.http_normalizer
