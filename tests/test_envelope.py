"""统一响应体构建的测试用例。"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict

from starlette.requests import Request

from respkit.core.exceptions import EnvelopeError, envelope_error_handler
from respkit.schemas.result import Result
from respkit.services.envelope import EnvelopeBuilder
from respkit.services.localization import MessageResolver


def _collect(envelope: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    return {"status_code": status_code, **envelope}


def _builder(resolver: MessageResolver, **kwargs: Any) -> EnvelopeBuilder:
    return EnvelopeBuilder(resolver, finalizer=_collect, **kwargs)


def test_fail_resolves_message_and_uses_default_fields(resolver: MessageResolver):
    envelope = _builder(resolver).fail(5, "greet", {"id": 1}, {"n": "Bo"}, locale="en")

    assert envelope == {"status_code": 200, "errno": 5, "errmsg": "Hi Bo", "data": {"id": 1}}


def test_fail_without_message_uses_code_as_key(resolver: MessageResolver):
    envelope = _builder(resolver).fail(1001, locale="en")

    assert envelope["errmsg"] == "Invalid request"
    assert envelope["data"] == ""


def test_fail_with_code_missing_from_catalog_uses_code_as_text(resolver: MessageResolver):
    envelope = _builder(resolver).fail(404, locale="en")

    assert envelope["errno"] == 404
    assert envelope["errmsg"] == "404"


def test_configured_field_names(resolver: MessageResolver):
    builder = _builder(resolver, errno_field="code", errmsg_field="msg")

    assert builder.build(3, "plain text") == {"code": 3, "msg": "plain text", "data": ""}


def test_success_is_fail_with_code_zero(resolver: MessageResolver):
    builder = _builder(resolver)

    assert builder.success("x") == builder.fail(0, "", "x")
    assert builder.success("x")["errmsg"] == "成功"


def test_validate_fail_uses_configured_code(resolver: MessageResolver):
    builder = _builder(resolver, validate_errno=1001)
    envelope = builder.validate_fail(data={"field": "name"}, locale="en")

    assert envelope["errno"] == 1001
    assert envelope["errmsg"] == "Invalid request"
    assert envelope["data"] == {"field": "name"}


def test_validate_fail_with_custom_code(resolver: MessageResolver):
    builder = _builder(resolver, validate_errno=4220)

    assert builder.validate_fail("bad <%field%>", "", {"field": "age"})["errno"] == 4220
    assert builder.validate_fail("bad <%field%>", "", {"field": "age"})["errmsg"] == "bad age"


def test_handle_result_success_matches_success(resolver: MessageResolver):
    builder = _builder(resolver)

    assert builder.handle_result({"code": 0, "data": "x"}) == builder.success("x")
    assert builder.handle_result(Result(code=0, data="x", msg="")) == builder.success("x")


def test_handle_result_failure_matches_fail(resolver: MessageResolver):
    builder = _builder(resolver)

    assert builder.handle_result({"code": 5, "msg": "no"}) == builder.fail(5, "no")


def test_handle_result_transport_failure(resolver: MessageResolver):
    envelope = _builder(resolver).handle_result(Result(code=600, status=600, msg="connection refused"))

    assert envelope["errno"] == 600
    assert envelope["errmsg"] == "connection refused"


def test_handle_result_passes_params(resolver: MessageResolver):
    envelope = _builder(resolver).handle_result({"code": 0, "msg": "greet", "data": [1]}, {"n": "Bo"}, locale="en")

    assert envelope["errmsg"] == "Hi Bo"
    assert envelope["data"] == [1]


def test_envelope_error_handler_renders_fail_response():
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(b"accept-language", b"en-US,en;q=0.9")],
        "query_string": b"",
    }
    exc = EnvelopeError(4001, "Dear <%n%>", {"k": "v"}, {"n": "Ann"})

    response = asyncio.run(envelope_error_handler(Request(scope), exc))

    assert response.status_code == 200
    assert json.loads(response.body) == {"errno": 4001, "errmsg": "Dear Ann", "data": {"k": "v"}}
