"""多语言文案服务：维护数据库中的文案，并负责重新发布进程内目录。"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from respkit.crud.message import message_crud
from respkit.models.message import LOCALE_COLUMNS, MessageText
from respkit.services.catalog import load_catalog
from respkit.services.localization import MessageResolver


class MessageService:
    """封装文案的查询、维护与目录重载。"""

    def list_messages(
        self,
        db: Session,
        *,
        service: Optional[str] = None,
        keyword: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Dict[str, Any]:
        skip = (max(page, 1) - 1) * page_size
        items, total = message_crud.list_with_filters(
            db, service=service, keyword=keyword, skip=skip, limit=page_size
        )
        return {
            "total": total,
            "page": page,
            "page_size": page_size,
            "items": [self._serialize(item) for item in items],
        }

    def upsert_message(
        self,
        db: Session,
        *,
        key: str,
        service: str,
        texts: Dict[str, Optional[str]],
    ) -> Dict[str, Any]:
        item = message_crud.upsert(db, key=key, service=service, texts=texts)
        return self._serialize(item)

    def reload(self, db: Session, resolver: MessageResolver, *, service: str) -> int:
        """从数据库重建目录并整体替换解析器使用的引用。"""
        return load_catalog(db, resolver.registry, service=service, map_key=resolver.map_key)

    @staticmethod
    def _serialize(item: MessageText) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": item.id, "key": item.key, "service": item.service}
        payload.update({column: getattr(item, column) for column in LOCALE_COLUMNS})
        return payload


message_service = MessageService()
