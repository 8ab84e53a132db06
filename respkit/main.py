"""应用入口：负责创建 FastAPI 实例并绑定生命周期事件。"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from respkit.api.v1 import api_router
from respkit.core.config import get_settings
from respkit.core.dependencies import get_envelope_builder, get_message_resolver
from respkit.core.exceptions import (
    EnvelopeError,
    envelope_error_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from respkit.core.logger import logger, setup_logging
from respkit.db import session as db_session
from respkit.db.init_db import init_db
from respkit.middleware.locale import LocaleMiddleware
from respkit.middleware.request_id import RequestIdMiddleware
from respkit.services.http_client import HttpNormalizer
from respkit.services.message_service import message_service

setup_logging()
settings = get_settings()

app = FastAPI(title=settings.project_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LocaleMiddleware, header_key=settings.header_key)
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(EnvelopeError, envelope_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.on_event("startup")
async def startup_event() -> None:
    """初始化数据库与文案目录，并创建共享的外部 HTTP 客户端。"""
    init_db()
    if settings.lang_enabled:
        with db_session.SessionLocal() as session:
            message_service.reload(session, get_message_resolver(), service=settings.service_name)
    app.state.http_normalizer = HttpNormalizer.from_settings(settings)
    logger.info("SUCCESS - Application running at http://127.0.0.1:%s", settings.app_port)


@app.on_event("shutdown")
async def shutdown_event() -> None:
    normalizer = getattr(app.state, "http_normalizer", None)
    if normalizer is not None:
        await normalizer.aclose()


@app.get("/health")
async def health_check():
    """提供健康检查接口，便于编排器与监控系统探活。"""
    return get_envelope_builder().success({"status": "healthy"})


app.include_router(api_router, prefix=settings.api_v1_str)
