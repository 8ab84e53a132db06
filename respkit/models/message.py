"""多语言文案模型：每行是一个文案键在各语言下的文本。"""

from typing import Optional

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from respkit.models.base import Base, SoftDeleteMixin, TimestampMixin

# 目录构建时按列名识别语言，新增语言只需新增同名列
LOCALE_COLUMNS = ("zh_CN", "zh_TW", "en", "ja")


class MessageText(TimestampMixin, SoftDeleteMixin, Base):
    """文案按 ``service`` 归属，``common`` 为所有服务共享。"""

    __tablename__ = "sys_msg_lang"
    __table_args__ = (
        UniqueConstraint("key", "service", name="uq_sys_msg_lang_key_service"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(128), index=True)
    service: Mapped[str] = mapped_column(String(64), index=True, default="common")
    zh_CN: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    zh_TW: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ja: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
