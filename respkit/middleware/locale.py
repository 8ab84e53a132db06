"""Locale middleware: exposes the request language to the message resolver."""

from __future__ import annotations

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from respkit.services.localization import parse_locale_header, set_request_locale


class LocaleMiddleware:
    def __init__(self, app: ASGIApp, header_key: str = "accept-language") -> None:
        self.app = app
        self.header_key = header_key

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return
        set_request_locale(parse_locale_header(Headers(scope=scope).get(self.header_key)))
        await self.app(scope, receive, send)
