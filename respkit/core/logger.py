"""日志配置：文本或 JSON 两种输出，每条记录都带上请求 ID 与请求语言。"""

import json
import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, Optional

from respkit.services.localization import get_request_locale

from .config import get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s|%(locale)s] %(message)s"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class TextFormatter(logging.Formatter):
    """按 ``Settings.timezone`` 渲染时间戳，未指定 datefmt 时输出带毫秒的 ISO-8601。"""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:  # noqa: N802
        dt = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class JsonFormatter(TextFormatter):
    """一行一个 JSON 对象，便于日志平台按 service / request_id / locale 检索。"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record),
            "service": get_settings().service_name,
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            "locale": getattr(record, "locale", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # 不走 respkit.utils.codec：codec 失败时自己也要写日志
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """把当前请求的 request_id 与解析出的语言写到 LogRecord 上。"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.locale = get_request_locale() or "-"
        return True


def setup_logging() -> None:
    """控制台与按天滚动的文件共用同一格式，``LOG_JSON`` 决定用文本还是 JSON。"""
    settings = get_settings()
    settings.log_directory.mkdir(parents=True, exist_ok=True)

    formatter = "json" if settings.log_json else "text"
    handlers = ["console", "file"]
    routed = {"handlers": handlers, "level": settings.log_level, "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"()": "respkit.core.logger.TextFormatter", "format": TEXT_FORMAT},
                "json": {"()": "respkit.core.logger.JsonFormatter"},
            },
            "filters": {"request_context": {"()": "respkit.core.logger.RequestContextFilter"}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "filters": ["request_context"],
                },
                "file": {
                    "class": "logging.handlers.TimedRotatingFileHandler",
                    "formatter": formatter,
                    "filters": ["request_context"],
                    "filename": str(settings.log_file_path),
                    "when": "midnight",
                    "backupCount": 14,
                    "encoding": "utf-8",
                    "delay": True,
                },
            },
            "loggers": {name: dict(routed) for name in ("uvicorn", "uvicorn.access", "respkit")},
            "root": {"handlers": handlers, "level": settings.log_level},
        }
    )


logger = logging.getLogger("respkit")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()
