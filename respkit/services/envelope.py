"""统一响应体构建：解析本地化文案，组装 ``{errno, errmsg, data}`` 并交给响应出口。"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from fastapi.responses import JSONResponse
from starlette import status

from respkit.core.config import Settings
from respkit.core.responses import respond_json
from respkit.schemas.result import SUCCESS_CODE, Result
from respkit.services.localization import MessageResolver
from respkit.utils.template import TemplateContext

Finalizer = Callable[..., JSONResponse]


class EnvelopeBuilder:
    """字段名与校验失败码在构造时由配置决定。"""

    def __init__(
        self,
        resolver: MessageResolver,
        *,
        errno_field: str = "errno",
        errmsg_field: str = "errmsg",
        validate_errno: int = 1001,
        finalizer: Finalizer = respond_json,
    ) -> None:
        self.resolver = resolver
        self.errno_field = errno_field
        self.errmsg_field = errmsg_field
        self.validate_errno = validate_errno
        self._finalize = finalizer

    @classmethod
    def from_settings(cls, settings: Settings, resolver: MessageResolver) -> "EnvelopeBuilder":
        return cls(
            resolver,
            errno_field=settings.errno_field,
            errmsg_field=settings.errmsg_field,
            validate_errno=settings.validate_default_errno,
        )

    def build(
        self,
        code: Any,
        msg: Any = "",
        data: Any = "",
        params: Optional[TemplateContext] = None,
        *,
        locale: Optional[str] = None,
    ) -> Dict[str, Any]:
        """组装响应体；``msg`` 为空时以 ``code`` 作为文案键。"""
        if msg is None or msg == "":
            msg = code
        return {
            self.errno_field: code,
            self.errmsg_field: self.resolver.resolve(msg, params, locale),
            "data": data,
        }

    def fail(
        self,
        code: Any,
        msg: Any = "",
        data: Any = "",
        params: Optional[TemplateContext] = None,
        *,
        locale: Optional[str] = None,
        status_code: int = status.HTTP_200_OK,
    ) -> JSONResponse:
        return self._finalize(self.build(code, msg, data, params, locale=locale), status_code=status_code)

    def success(
        self,
        data: Any = "",
        msg: Any = "",
        params: Optional[TemplateContext] = None,
        *,
        locale: Optional[str] = None,
    ) -> JSONResponse:
        return self.fail(SUCCESS_CODE, msg, data, params, locale=locale)

    def validate_fail(
        self,
        msg: Any = "",
        data: Any = "",
        params: Optional[TemplateContext] = None,
        *,
        locale: Optional[str] = None,
        status_code: int = status.HTTP_200_OK,
    ) -> JSONResponse:
        return self.fail(self.validate_errno, msg, data, params, locale=locale, status_code=status_code)

    def handle_result(
        self,
        result: Union[Result, Mapping[str, Any]],
        params: Optional[TemplateContext] = None,
        *,
        locale: Optional[str] = None,
    ) -> JSONResponse:
        """按 ``result.code`` 分流到 ``success`` 或 ``fail``，外部调用结果可直接作为响应返回。"""
        if not isinstance(result, Result):
            result = Result.model_validate(dict(result))
        msg = "" if result.msg is None else result.msg
        data = "" if result.data is None else result.data
        if result.is_success:
            return self.success(data, msg, params, locale=locale)
        return self.fail(result.code, msg, data, params, locale=locale)
