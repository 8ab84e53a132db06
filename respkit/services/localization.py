"""多语言文案解析：把消息键（或原始文案）解析为本地化并完成模板渲染的文本。

解析顺序：请求语言 -> 默认语言 -> 键本身。任何一级缺失都只会降级到下一级，不会抛出异常。
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from respkit.core.config import Settings
from respkit.services.catalog import CatalogRegistry, MsgCatalog, catalog_registry
from respkit.utils.template import TemplateContext, render


# ---------------------------------------------------------------------------
# 消息键的几种形态
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextKey:
    """字面文案或目录中的文案键。"""

    text: str


@dataclass(frozen=True)
class CodeKey:
    """数值结果码，本身不携带可读文案。"""

    code: Union[int, float]


@dataclass(frozen=True)
class BatchKey:
    """多字段批量解析，每个值独立解析。"""

    items: Mapping[str, Any]


@dataclass(frozen=True)
class RawValue:
    """无法作为文案解析的值，原样透传。"""

    value: Any


MessageKey = Union[TextKey, CodeKey, BatchKey, RawValue]


def message_key(raw: Any) -> MessageKey:
    """把调用方传入的任意值归类为一种消息键。"""
    if isinstance(raw, (TextKey, CodeKey, BatchKey, RawValue)):
        return raw
    if isinstance(raw, str):
        return TextKey(raw)
    if isinstance(raw, bool):
        return RawValue(raw)
    if isinstance(raw, (int, float)):
        return CodeKey(raw)
    if isinstance(raw, Mapping):
        return BatchKey(raw)
    return RawValue(raw)


# ---------------------------------------------------------------------------
# 请求语言
# ---------------------------------------------------------------------------

_locale_ctx: ContextVar[Optional[str]] = ContextVar("request_locale", default=None)


def parse_locale_header(value: Optional[str]) -> Optional[str]:
    """从 ``en-US,en;q=0.9`` 形式的请求头中取首选语言，并规整为 ``en_US``。"""
    if not value:
        return None
    first = value.split(",", 1)[0].split(";", 1)[0].strip()
    if not first or first == "*":
        return None
    return first.replace("-", "_")


def set_request_locale(locale: Optional[str]) -> None:
    _locale_ctx.set(locale)


def get_request_locale() -> Optional[str]:
    return _locale_ctx.get()


# ---------------------------------------------------------------------------
# 解析器
# ---------------------------------------------------------------------------


def _render_if(text: Any, params: Optional[TemplateContext]) -> Any:
    if params is not None and isinstance(text, str):
        return render(text, params)
    return text


class MessageResolver:
    """基于注入的目录注册表解析文案；未发布目录时视为未启用多语言。"""

    def __init__(self, registry: CatalogRegistry, *, map_key: str, df_lang: str) -> None:
        self.registry = registry
        self.map_key = map_key
        self.df_lang = df_lang
        self._plain: Dict[type, Callable[[Any, Optional[TemplateContext]], Any]] = {
            TextKey: self._plain_text,
            CodeKey: self._plain_code,
            BatchKey: self._plain_batch,
            RawValue: self._raw,
        }
        self._localized: Dict[type, Callable[[Any, Optional[TemplateContext], MsgCatalog, str], Any]] = {
            TextKey: self._localized_text,
            CodeKey: self._localized_code,
            BatchKey: self._localized_batch,
            RawValue: self._localized_raw,
        }

    @classmethod
    def from_settings(cls, settings: Settings, registry: CatalogRegistry = catalog_registry) -> "MessageResolver":
        return cls(registry, map_key=settings.map_key, df_lang=settings.df_lang)

    @property
    def configured(self) -> bool:
        return self.registry.get(self.map_key) is not None

    def resolve(
        self,
        msg: Any,
        params: Optional[TemplateContext] = None,
        locale: Optional[str] = None,
    ) -> Union[str, Dict[str, Any], Any]:
        """解析 ``msg``；``locale`` 缺省时取当前请求语言，再缺省时取默认语言。"""
        key = message_key(msg)
        catalog = self.registry.get(self.map_key)
        if catalog is None:
            return self._plain[type(key)](key, params)
        lang = locale or get_request_locale() or self.df_lang
        return self._localized[type(key)](key, params, catalog, lang)

    # -- 未启用多语言 --------------------------------------------------------

    def _plain_text(self, key: TextKey, params: Optional[TemplateContext]) -> str:
        return _render_if(key.text, params)

    def _plain_code(self, key: CodeKey, params: Optional[TemplateContext]) -> str:
        return ""

    def _plain_batch(self, key: BatchKey, params: Optional[TemplateContext]) -> Dict[str, Any]:
        return {name: _render_if(value, params) for name, value in key.items.items()}

    def _raw(self, key: RawValue, params: Optional[TemplateContext]) -> Any:
        return key.value

    # -- 已启用多语言 --------------------------------------------------------

    def _lookup(self, catalog: MsgCatalog, key: str, lang: str) -> Optional[Any]:
        texts = catalog.get(key)
        if texts is None:
            return None
        text = texts.get(lang)
        if text is None:
            text = texts.get(self.df_lang)
        return text

    def _localized_text(self, key: TextKey, params: Optional[TemplateContext], catalog: MsgCatalog, lang: str) -> Any:
        text = self._lookup(catalog, key.text, lang)
        return _render_if(key.text if text is None else text, params)

    def _localized_code(self, key: CodeKey, params: Optional[TemplateContext], catalog: MsgCatalog, lang: str) -> Any:
        text = self._lookup(catalog, str(key.code), lang)
        return _render_if(str(key.code) if text is None else text, params)

    def _localized_batch(
        self, key: BatchKey, params: Optional[TemplateContext], catalog: MsgCatalog, lang: str
    ) -> Dict[str, Any]:
        resolved: Dict[str, Any] = {}
        for name, value in key.items.items():
            entry = message_key(value)
            resolved[name] = self._localized[type(entry)](entry, params, catalog, lang)
        return resolved

    def _localized_raw(self, key: RawValue, params: Optional[TemplateContext], catalog: MsgCatalog, lang: str) -> Any:
        return key.value
