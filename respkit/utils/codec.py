"""安全 JSON 编解码：失败时记录日志并返回兜底值，从不向上抛出异常。"""

from __future__ import annotations

import json
import logging
import reprlib
from typing import Any

logger = logging.getLogger("respkit.codec")

# 嵌套过深的输入会让 json 触发 RecursionError
_CODEC_ERRORS = (TypeError, ValueError, RecursionError)


def obj_to_str(value: Any, fallback: str = "") -> str:
    """将 ``value`` 序列化为 JSON 文本，无法序列化（循环引用、不支持的类型）时返回 ``fallback``。"""
    try:
        return json.dumps(value, ensure_ascii=False)
    except _CODEC_ERRORS as exc:
        logger.error("JSON 序列化失败: value=%s error=%s", reprlib.repr(value), exc)
        return fallback


def str_to_obj(text: str | bytes | bytearray, fallback: Any = None) -> Any:
    """解析 JSON 文本，失败时返回 ``fallback``；未提供兜底值时返回新的空字典。"""
    try:
        return json.loads(text)
    except _CODEC_ERRORS as exc:
        logger.error("JSON 解析失败: text=%s error=%s", reprlib.repr(text), exc)
        return {} if fallback is None else fallback


encode = obj_to_str
decode = str_to_obj
