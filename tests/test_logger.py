"""日志上下文与格式化器的测试用例。"""

from __future__ import annotations

import json
import logging

import pytest

from respkit.core.logger import JsonFormatter, RequestContextFilter, TextFormatter, TEXT_FORMAT, set_request_id
from respkit.services.localization import set_request_locale


@pytest.fixture()
def record():
    set_request_id(None)
    yield logging.LogRecord("respkit.test", logging.INFO, __file__, 1, "hello %s", ("张三",), None)
    set_request_id(None)


def test_filter_marks_missing_context_with_dash(record):
    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"
    assert record.locale == "-"


def test_text_format_includes_request_context(record):
    set_request_id("rid-1")
    set_request_locale("en")
    RequestContextFilter().filter(record)

    line = TextFormatter(TEXT_FORMAT).format(record)

    assert "[rid-1|en]" in line
    assert line.endswith("hello 张三")


def test_json_format_is_one_object_per_record(record):
    set_request_id("rid-2")
    RequestContextFilter().filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["request_id"] == "rid-2"
    assert payload["msg"] == "hello 张三"
    assert payload["level"] == "INFO"
    assert payload["service"]
