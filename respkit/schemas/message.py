"""多语言文案相关的请求模型。"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class MessageUpsertRequest(BaseModel):
    """新增或覆盖一条文案，未提供的语言保持为空。"""

    key: str = Field(..., min_length=1, max_length=128, description="文案键")
    service: Optional[str] = Field(default=None, max_length=64, description="归属服务，缺省为当前服务")
    zh_CN: Optional[str] = None
    zh_TW: Optional[str] = None
    en: Optional[str] = None
    ja: Optional[str] = None

    @model_validator(mode="after")
    def _normalize(self) -> "MessageUpsertRequest":
        self.key = self.key.strip()
        if not self.key:
            raise ValueError("文案键不能为空")
        if self.service is not None:
            self.service = self.service.strip() or None
        return self
