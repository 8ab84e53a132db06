"""Database bootstrapping utilities."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from respkit.crud.message import message_crud
from respkit.db import session as db_session
from respkit.models.base import Base
from respkit.services.catalog import COMMON_SERVICE

logger = logging.getLogger(__name__)

# 所有服务共享的基础文案，键与响应结果码保持一致
DEFAULT_COMMON_MESSAGES = {
    "0": {"zh_CN": "成功", "zh_TW": "成功", "en": "success", "ja": "成功"},
    "400": {"zh_CN": "请求错误", "zh_TW": "請求錯誤", "en": "Bad request", "ja": "不正なリクエスト"},
    "404": {"zh_CN": "资源不存在", "zh_TW": "資源不存在", "en": "Not found", "ja": "見つかりません"},
    "500": {"zh_CN": "服务器内部错误", "zh_TW": "伺服器內部錯誤", "en": "Internal server error", "ja": "サーバー内部エラー"},
    "600": {"zh_CN": "网络请求失败", "zh_TW": "網路請求失敗", "en": "Network request failed", "ja": "ネットワークエラー"},
    "1001": {"zh_CN": "请求参数验证失败", "zh_TW": "請求參數驗證失敗", "en": "Invalid request parameters", "ja": "パラメータが不正です"},
    "INTERNAL_ERROR": {"zh_CN": "服务器内部错误", "zh_TW": "伺服器內部錯誤", "en": "Internal server error", "ja": "サーバー内部エラー"},
}


def init_db() -> None:
    """Create all database tables if they do not exist and seed baseline data."""
    Base.metadata.create_all(bind=db_session.engine)

    session = db_session.SessionLocal()
    try:
        _seed_common_messages(session)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to seed default data during database initialization")
        raise
    finally:
        session.close()


def _seed_common_messages(session: Session) -> None:
    """只补齐缺失的键，不覆盖运维后来修改过的文本。"""
    for key, texts in DEFAULT_COMMON_MESSAGES.items():
        existing = message_crud.get_by_key(session, key=key, service=COMMON_SERVICE, include_deleted=True)
        if existing is not None:
            continue
        message_crud.create(session, {"key": key, "service": COMMON_SERVICE, **texts}, auto_commit=False)
