"""多语言文案的数据库访问方法。"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from respkit.crud.base import CRUDBase
from respkit.models.message import LOCALE_COLUMNS, MessageText


class CRUDMessage(CRUDBase[MessageText]):
    """提供按服务查询与维护文案的能力。"""

    def list_with_filters(
        self,
        db: Session,
        *,
        service: Optional[str],
        keyword: Optional[str],
        skip: int,
        limit: int,
    ) -> Tuple[List[MessageText], int]:
        """根据服务与关键字返回分页后的文案列表。"""
        query = self.query(db)
        if service:
            query = query.filter(self.model.service == service)

        if keyword:
            trimmed = keyword.strip()
            if trimmed:
                pattern = f"%{trimmed}%"
                query = query.filter(
                    or_(*(getattr(self.model, column).ilike(pattern) for column in ("key", *LOCALE_COLUMNS)))
                )

        total = query.count()
        items = (
            query.order_by(self.model.service.asc(), self.model.key.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    def get_by_key(
        self,
        db: Session,
        *,
        key: str,
        service: str,
        include_deleted: bool = False,
    ) -> Optional[MessageText]:
        return (
            self.query(db, include_deleted=include_deleted)
            .filter(self.model.key == key, self.model.service == service)
            .first()
        )

    def upsert(self, db: Session, *, key: str, service: str, texts: Dict[str, Optional[str]]) -> MessageText:
        """存在则覆盖文本（并恢复软删除），不存在则新建。"""
        texts = {column: value for column, value in texts.items() if column in LOCALE_COLUMNS}
        existing = self.get_by_key(db, key=key, service=service, include_deleted=True)
        if existing is None:
            return self.create(db, {"key": key, "service": service, **texts})
        for column, value in texts.items():
            setattr(existing, column, value)
        existing.is_deleted = False
        return self.save(db, existing)

    def catalog_rows(self, db: Session, *, services: Iterable[str]) -> List[Dict[str, Any]]:
        """返回 ``{key, service, <locale>: text}`` 形式的行，供目录构建使用。"""
        rows = self.query(db).filter(self.model.service.in_(tuple(services))).all()
        return [
            {
                "key": row.key,
                "service": row.service,
                **{column: getattr(row, column) for column in LOCALE_COLUMNS},
            }
            for row in rows
        ]


message_crud = CRUDMessage(MessageText)
