"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from respkit.models.base import Base
from respkit.models.message import LOCALE_COLUMNS, MessageText

__all__ = [
    "Base",
    "LOCALE_COLUMNS",
    "MessageText",
]
