"""外部 HTTP 调用：把成功、HTTP 失败与网络失败统一折叠为 ``Result``。

调用方只需根据 ``Result.code`` 分支：

- ``0``：成功（2xx 且业务体未携带 ``code`` 时补齐）；
- 远端业务码或 HTTP 状态码：收到响应但失败，附带 ``status``/``headers``；
- ``600``：未收到任何响应（DNS、连接、超时）。
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import httpx

from respkit.core.config import Settings
from respkit.schemas.result import SUCCESS_CODE, TRANSPORT_FAILURE_CODE, Result
from respkit.utils.codec import str_to_obj

logger = logging.getLogger("respkit.http")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_TIMEOUT = 10.0


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"


READ_METHODS = frozenset({HttpMethod.GET, HttpMethod.DELETE, HttpMethod.HEAD, HttpMethod.OPTIONS})

_Sender = Callable[[HttpMethod, str, Any, Dict[str, Any]], Awaitable[httpx.Response]]


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    if "json" not in response.headers.get("content-type", ""):
        return response.text
    return str_to_obj(response.content, fallback=response.text)


class HttpNormalizer:
    """包装一个 ``httpx.AsyncClient``，连接池、超时与重定向交由 httpx 处理。"""

    def __init__(
        self,
        base_config: Optional[Mapping[str, Any]] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        config = dict(base_config or {})
        self._client = httpx.AsyncClient(
            base_url=config.get("base_url") or "",
            headers=config.get("headers") or {},
            timeout=config.get("timeout", DEFAULT_TIMEOUT),
            follow_redirects=True,
            transport=transport,
        )
        self._senders: Dict[HttpMethod, _Sender] = {
            method: (self._send_query if method in READ_METHODS else self._send_body) for method in HttpMethod
        }

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "HttpNormalizer":
        return cls(settings.http_base_config, transport=transport)

    async def __aenter__(self) -> "HttpNormalizer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # 发送
    # ------------------------------------------------------------------

    async def _send_query(
        self, method: HttpMethod, url: str, data: Any, options: Dict[str, Any]
    ) -> httpx.Response:
        params = dict(options.pop("params", None) or {})
        if data:
            params.update(data)
        return await self._client.request(method.value.upper(), url, params=params or None, **options)

    async def _send_body(
        self, method: HttpMethod, url: str, data: Any, options: Dict[str, Any]
    ) -> httpx.Response:
        content_type = httpx.Headers(options.get("headers")).get("content-type") or self._client.headers.get(
            "content-type", ""
        )
        if _media_type(content_type) == FORM_CONTENT_TYPE:
            return await self._client.request(method.value.upper(), url, data=data or {}, **options)
        return await self._client.request(method.value.upper(), url, json=data, **options)

    async def call(
        self,
        method: Union[HttpMethod, str],
        url: str,
        data: Any = None,
        request_config: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """发起请求并返回统一结果，除非 ``method`` 不是受支持的 HTTP 动词，否则不会抛出异常。"""
        verb = HttpMethod(method.lower() if isinstance(method, str) else method)
        options = self._request_options(request_config)
        try:
            response = await self._senders[verb](verb, url, data, options)
        except (httpx.RequestError, httpx.InvalidURL, httpx.StreamError, TypeError, ValueError) as exc:
            logger.warning("%s %s failed before a response arrived: %r", verb.value.upper(), url, exc)
            return Result(code=TRANSPORT_FAILURE_CODE, status=TRANSPORT_FAILURE_CODE, msg=str(exc) or repr(exc))

        if response.is_success:
            return self._success_result(response)
        return self._failure_result(response)

    async def get(self, url: str, data: Any = None, request_config: Optional[Mapping[str, Any]] = None) -> Result:
        return await self.call(HttpMethod.GET, url, data, request_config)

    async def post(self, url: str, data: Any = None, request_config: Optional[Mapping[str, Any]] = None) -> Result:
        return await self.call(HttpMethod.POST, url, data, request_config)

    async def put(self, url: str, data: Any = None, request_config: Optional[Mapping[str, Any]] = None) -> Result:
        return await self.call(HttpMethod.PUT, url, data, request_config)

    async def patch(self, url: str, data: Any = None, request_config: Optional[Mapping[str, Any]] = None) -> Result:
        return await self.call(HttpMethod.PATCH, url, data, request_config)

    async def delete(self, url: str, data: Any = None, request_config: Optional[Mapping[str, Any]] = None) -> Result:
        return await self.call(HttpMethod.DELETE, url, data, request_config)

    # ------------------------------------------------------------------
    # 结果归一
    # ------------------------------------------------------------------

    @staticmethod
    def _request_options(request_config: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        config = request_config or {}
        for name in ("headers", "params", "timeout"):
            if config.get(name) is not None:
                options[name] = config[name]
        return options

    @staticmethod
    def _success_result(response: httpx.Response) -> Result:
        body = _parse_body(response)
        if isinstance(body, Mapping):
            if body.get("code") is not None:
                return Result.model_validate(dict(body))
            payload = dict(body)
            payload["code"] = SUCCESS_CODE
            if payload.get("msg") is None:
                payload["msg"] = ""
            return Result.model_validate(payload)
        return Result(code=SUCCESS_CODE, msg="", data=body)

    @staticmethod
    def _failure_result(response: httpx.Response) -> Result:
        body = _parse_body(response)
        detail: Mapping[str, Any] = body if isinstance(body, Mapping) else {}
        code = detail.get("code")
        msg = detail.get("msg")
        return Result(
            code=response.status_code if code is None else code,
            msg=response.reason_phrase if msg is None else msg,
            data=detail.get("data"),
            status=response.status_code,
            headers=dict(response.headers),
        )
