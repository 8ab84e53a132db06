"""异常处理模块：定义可中断请求的业务异常，并把各类异常统一转换为响应体。"""

from http import HTTPStatus
from typing import Any, Mapping, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from respkit.core.config import get_settings
from respkit.core.dependencies import get_envelope_builder
from respkit.core.logger import logger
from respkit.services.localization import parse_locale_header

_STATUS_PHRASES = {item.value: item.phrase for item in HTTPStatus}


class EnvelopeError(Exception):
    """在请求处理的任意位置抛出，直接以 ``fail(code, msg, data, params)`` 结束本次请求。"""

    def __init__(
        self,
        code: Any,
        msg: Any = "",
        data: Any = "",
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(msg or code)
        self.code = code
        self.msg = msg
        self.data = data
        self.params = params


def _request_locale(request: Request) -> Optional[str]:
    return parse_locale_header(request.headers.get(get_settings().header_key))


def _serialize(obj: Any) -> Any:
    if isinstance(obj, Exception):
        return str(obj)
    if isinstance(obj, dict):
        return {key: _serialize(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    return obj


async def envelope_error_handler(request: Request, exc: EnvelopeError) -> JSONResponse:
    return get_envelope_builder().fail(
        exc.code, exc.msg, exc.data, exc.params, locale=_request_locale(request)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """将 ``HTTPException`` 转换为统一响应格式，HTTP 状态码保持不变。

    ``detail`` 只是默认的状态短语时，以状态码作为文案键，使其同样可以被本地化。
    """
    msg: Any = exc.detail
    if msg == _STATUS_PHRASES.get(exc.status_code):
        msg = ""
    return get_envelope_builder().fail(
        exc.status_code, msg, locale=_request_locale(request), status_code=exc.status_code
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求参数校验失败统一使用校验失败码。"""
    return get_envelope_builder().validate_fail(
        data=_serialize(exc.errors()),
        locale=_request_locale(request),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：将未捕获异常转换为标准的 500 响应结构。"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return get_envelope_builder().fail(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        locale=_request_locale(request),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
