"""文案管理、本地化响应与上游转发接口的集成测试。"""

from __future__ import annotations

import json
from typing import AsyncIterator, List

import httpx
from fastapi.testclient import TestClient

from respkit.core.config import get_settings
from respkit.core.dependencies import get_http_normalizer
from respkit.main import app
from respkit.services.http_client import HttpNormalizer


def test_health_check_is_localized(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"errno": 0, "errmsg": "成功", "data": {"status": "healthy"}}

    response = client.get("/health", headers={"Accept-Language": "en-US,en;q=0.9"})
    assert response.json()["errmsg"] == "success"


def test_message_upsert_reload_and_resolve(client: TestClient):
    create_resp = client.post(
        "/api/v1/messages",
        json={"key": "api_greet", "en": "Hi <%n%>", "zh_CN": "嗨 <%n%>"},
    )
    assert create_resp.status_code == 200
    created = create_resp.json()
    assert created["errno"] == 0
    assert created["data"]["service"] == get_settings().service_name

    params = {"key": "api_greet", "params": json.dumps({"n": "Bo"})}
    before = client.get("/api/v1/messages/resolve", params=params, headers={"Accept-Language": "en"})
    assert before.json()["data"]["text"] == "api_greet"

    reload_resp = client.post("/api/v1/messages/reload")
    assert reload_resp.json()["errno"] == 0
    assert reload_resp.json()["data"]["count"] >= 1

    english = client.get("/api/v1/messages/resolve", params=params, headers={"Accept-Language": "en"})
    assert english.json()["data"]["text"] == "Hi Bo"

    fallback = client.get("/api/v1/messages/resolve", params={**params, "locale": "fr"})
    assert fallback.json()["data"]["text"] == "嗨 Bo"


def test_message_upsert_overwrites_existing_texts(client: TestClient):
    client.post("/api/v1/messages", json={"key": "api_overwrite", "en": "first"})
    client.post("/api/v1/messages", json={"key": "api_overwrite", "en": "second"})

    listing = client.get("/api/v1/messages", params={"keyword": "api_overwrite"})
    payload = listing.json()["data"]
    assert payload["total"] == 1
    assert payload["items"][0]["en"] == "second"


def test_list_messages_filters_by_service(client: TestClient):
    listing = client.get("/api/v1/messages", params={"service": "common", "page_size": 200})
    items = listing.json()["data"]["items"]
    assert items
    assert all(item["service"] == "common" for item in items)
    assert any(item["key"] == "1001" for item in items)


def test_resolve_rejects_non_object_params(client: TestClient):
    response = client.get("/api/v1/messages/resolve", params={"key": "x", "params": "[1, 2]"})
    payload = response.json()
    assert payload["errno"] == get_settings().validate_default_errno
    assert payload["data"] == {"params": "[1, 2]"}


def test_request_validation_uses_validation_code(client: TestClient):
    response = client.post("/api/v1/messages", json={"en": "missing key"}, headers={"Accept-Language": "en"})
    assert response.status_code == 422
    payload = response.json()
    assert payload["errno"] == 1001
    assert payload["errmsg"] == "Invalid request parameters"
    assert isinstance(payload["data"], list)


def test_unknown_route_is_localized_by_status(client: TestClient):
    response = client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    assert response.json()["errno"] == 404
    assert response.json()["errmsg"] == "资源不存在"


def test_remote_relay_without_upstream(client: TestClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "upstream_base_url", "")
    response = client.get("/api/v1/remote/items")
    assert response.json()["errno"] == 503
    assert response.json()["errmsg"] == "UPSTREAM_NOT_CONFIGURED"


def _override_normalizer(handler) -> None:
    async def _normalizer() -> AsyncIterator[HttpNormalizer]:
        async with HttpNormalizer(transport=httpx.MockTransport(handler)) as normalizer:
            yield normalizer

    app.dependency_overrides[get_http_normalizer] = _normalizer


def test_remote_relay_success(client: TestClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "upstream_base_url", "http://upstream.test/")
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [1, 2]})

    _override_normalizer(handler)
    response = client.get("/api/v1/remote/items", params={"page": "1"}, headers={"Accept-Language": "en"})

    assert str(seen[0].url) == "http://upstream.test/items?page=1"
    assert response.json() == {"errno": 0, "errmsg": "success", "data": [1, 2]}


def test_remote_relay_upstream_failure(client: TestClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "upstream_base_url", "http://upstream.test")
    _override_normalizer(lambda request: httpx.Response(500, json={"code": "E1", "msg": "bad"}))

    response = client.get("/api/v1/remote/items")

    assert response.json() == {"errno": "E1", "errmsg": "bad", "data": ""}


def test_remote_relay_network_failure(client: TestClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "upstream_base_url", "http://upstream.test")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _override_normalizer(handler)
    response = client.get("/api/v1/remote/items")

    assert response.json()["errno"] == 600
    assert response.json()["errmsg"] == "connection refused"
