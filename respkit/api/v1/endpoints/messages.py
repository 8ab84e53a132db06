"""多语言文案相关的路由定义。"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from respkit.core.config import Settings, get_settings
from respkit.core.dependencies import get_db, get_envelope_builder, get_message_resolver
from respkit.core.logger import logger
from respkit.models.message import LOCALE_COLUMNS
from respkit.schemas.message import MessageUpsertRequest
from respkit.services.envelope import EnvelopeBuilder
from respkit.services.localization import MessageResolver
from respkit.services.message_service import message_service
from respkit.utils.codec import str_to_obj

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("")
def list_messages(
    service: Optional[str] = Query(None, description="按归属服务过滤"),
    keyword: Optional[str] = Query(None, description="按文案键或文本模糊搜索"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    builder: EnvelopeBuilder = Depends(get_envelope_builder),
) -> JSONResponse:
    """分页返回数据库中的文案。"""
    data = message_service.list_messages(db, service=service, keyword=keyword, page=page, page_size=page_size)
    return builder.success(data)


@router.post("")
def upsert_message(
    payload: MessageUpsertRequest,
    db: Session = Depends(get_db),
    builder: EnvelopeBuilder = Depends(get_envelope_builder),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """新增或覆盖一条文案；需调用 reload 后才会生效。"""
    texts = payload.model_dump(include=set(LOCALE_COLUMNS))
    data = message_service.upsert_message(
        db,
        key=payload.key,
        service=payload.service or settings.service_name,
        texts=texts,
    )
    return builder.success(data)


@router.post("/reload")
def reload_messages(
    db: Session = Depends(get_db),
    builder: EnvelopeBuilder = Depends(get_envelope_builder),
    resolver: MessageResolver = Depends(get_message_resolver),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """重新加载文案目录并整体替换。"""
    count = message_service.reload(db, resolver, service=settings.service_name)
    logger.info("Message catalog reloaded on demand, %s keys", count)
    return builder.success({"count": count})


@router.get("/resolve")
def resolve_message(
    key: str = Query(..., min_length=1, description="文案键或原始文案"),
    locale: Optional[str] = Query(None, description="指定语言，缺省取请求头"),
    params: Optional[str] = Query(None, description="模板参数，JSON 对象"),
    builder: EnvelopeBuilder = Depends(get_envelope_builder),
    resolver: MessageResolver = Depends(get_message_resolver),
) -> JSONResponse:
    """预览文案在指定语言与参数下的解析结果。"""
    context = None
    if params:
        context = str_to_obj(params, fallback=None)
        if not isinstance(context, dict):
            return builder.validate_fail(data={"params": params})
    return builder.success({"key": key, "text": resolver.resolve(key, context, locale)})
