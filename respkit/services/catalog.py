"""多语言文案目录：进程级共享的只读映射，重载时整体替换引用。"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from respkit.crud.message import message_crud

logger = logging.getLogger("respkit.catalog")

COMMON_SERVICE = "common"

# 数据行中不属于语言列的字段
_NON_LOCALE_COLUMNS = frozenset({"id", "key", "service"})

MsgCatalog = Mapping[str, Mapping[str, str]]


def build_catalog(rows: Iterable[Mapping[str, Any]], service: str) -> Dict[str, Dict[str, str]]:
    """把 ``{key, service, <locale>: text}`` 行转换为 ``{key: {locale: text}}``。

    ``common`` 行先落位，当前服务的同名文案随后覆盖。
    """
    ordered = sorted(rows, key=lambda row: row.get("service") != COMMON_SERVICE)
    catalog: Dict[str, Dict[str, str]] = {}
    for row in ordered:
        key = row.get("key")
        if not key:
            continue
        if row.get("service") not in (COMMON_SERVICE, service):
            continue
        texts = {
            column: value
            for column, value in row.items()
            if column not in _NON_LOCALE_COLUMNS and value is not None
        }
        catalog[str(key)] = texts
    return catalog


def _freeze(catalog: Mapping[str, Mapping[str, str]]) -> MsgCatalog:
    return MappingProxyType({key: MappingProxyType(dict(texts)) for key, texts in catalog.items()})


class CatalogRegistry:
    """按名称发布文案目录的持有者。

    读取方每次解析都拿一次当前引用作为快照；发布方构造新的只读目录后一次性替换引用，
    因此并发读取只会看到完整的旧目录或完整的新目录。
    """

    def __init__(self) -> None:
        self._published: Dict[str, MsgCatalog] = {}

    def publish(self, name: str, catalog: Mapping[str, Mapping[str, str]]) -> MsgCatalog:
        frozen = _freeze(catalog)
        self._published[name] = frozen
        return frozen

    def get(self, name: str) -> Optional[MsgCatalog]:
        return self._published.get(name)

    def clear(self, name: str) -> None:
        self._published.pop(name, None)


catalog_registry = CatalogRegistry()


def load_catalog(
    db: Session,
    registry: CatalogRegistry,
    *,
    service: str,
    map_key: str,
) -> int:
    """从数据库读取当前服务与 ``common`` 的文案，构建并发布目录，返回文案条数。"""
    rows = message_crud.catalog_rows(db, services=(service, COMMON_SERVICE))
    catalog = build_catalog(rows, service)
    registry.publish(map_key, catalog)
    logger.info("Published %s message texts under '%s' for service '%s'", len(catalog), map_key, service)
    return len(catalog)
