"""上游服务转发：演示外部调用结果直接作为响应返回。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from respkit.core.config import Settings, get_settings
from respkit.core.dependencies import get_envelope_builder, get_http_normalizer
from respkit.services.envelope import EnvelopeBuilder
from respkit.services.http_client import HttpNormalizer

router = APIRouter(prefix="/remote", tags=["remote"])


@router.get("/{path:path}")
async def relay_get(
    path: str,
    request: Request,
    normalizer: HttpNormalizer = Depends(get_http_normalizer),
    builder: EnvelopeBuilder = Depends(get_envelope_builder),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """把 GET 请求转发到 ``UPSTREAM_BASE_URL``，按统一结果输出。"""
    if not settings.upstream_base_url:
        return builder.fail(status.HTTP_503_SERVICE_UNAVAILABLE, "UPSTREAM_NOT_CONFIGURED")
    url = f"{settings.upstream_base_url.rstrip('/')}/{path}"
    result = await normalizer.get(url, dict(request.query_params))
    return builder.handle_result(result)
