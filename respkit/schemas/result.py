"""外部调用的统一结果模型。"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

# 未收到任何 HTTP 响应（DNS、连接、超时等）时使用的结果码，与任何 HTTP 状态码都不冲突
TRANSPORT_FAILURE_CODE = 600
SUCCESS_CODE = 0


class Result(BaseModel):
    """``code == 0`` 表示成功，其余取值均为业务或传输层失败码。

    ``status``/``headers`` 只在失败来自 HTTP 响应时填充。远端业务体会被原样透传，
    所以字段不做类型约束，额外字段也一并保留。
    """

    model_config = ConfigDict(extra="allow")

    code: Any
    msg: Optional[Any] = None
    data: Optional[Any] = None
    status: Optional[Any] = None
    headers: Optional[Any] = None

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE
