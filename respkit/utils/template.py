"""文案模板渲染：把 ``<%name%>`` 占位符替换为上下文中的值。"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Union

TemplateContext = Mapping[str, Union[str, int, float]]

_PLACEHOLDER = re.compile(r"<%\s*([^<>%]+?)\s*%>")


def render(template: str, context: Optional[TemplateContext] = None) -> str:
    """单遍替换模板中的占位符。

    占位符名区分大小写；上下文中不存在的名字原样输出名字本身，
    使缺失的参数在返回文案中一眼可见。替换结果不会被再次展开。
    """
    context = context or {}

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in context:
            return name
        return str(context[name])

    return _PLACEHOLDER.sub(_substitute, template)
