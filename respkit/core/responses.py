"""响应出口：把构建好的响应体交给框架输出。"""

from typing import Any, Mapping

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette import status


def respond_json(envelope: Mapping[str, Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """输出统一响应体，结束本次请求。"""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope))
