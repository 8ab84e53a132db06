"""文案目录构建、发布与数据库加载的测试用例。"""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from respkit.crud.message import message_crud
from respkit.services.catalog import CatalogRegistry, build_catalog, load_catalog


def test_build_catalog_maps_key_to_locale_texts():
    rows = [
        {"key": "greet", "service": "svc", "en": "Hi", "zh_CN": "嗨", "ja": None},
        {"key": "bye", "service": "common", "en": "Bye", "zh_CN": "再见"},
    ]
    assert build_catalog(rows, "svc") == {
        "greet": {"en": "Hi", "zh_CN": "嗨"},
        "bye": {"en": "Bye", "zh_CN": "再见"},
    }


def test_service_rows_override_common_rows_regardless_of_order():
    rows = [
        {"key": "0", "service": "svc", "en": "done"},
        {"key": "0", "service": "common", "en": "success"},
    ]
    assert build_catalog(rows, "svc")["0"] == {"en": "done"}


def test_rows_of_other_services_are_ignored():
    rows = [{"key": "x", "service": "elsewhere", "en": "nope"}]
    assert build_catalog(rows, "svc") == {}


def test_published_catalog_is_read_only():
    registry = CatalogRegistry()
    source = {"greet": {"en": "Hi"}}
    published = registry.publish("m", source)

    with pytest.raises(TypeError):
        published["greet"]["en"] = "changed"  # type: ignore[index]
    source["greet"]["en"] = "mutated source"
    assert registry.get("m")["greet"]["en"] == "Hi"


def test_publish_swaps_reference_wholesale():
    registry = CatalogRegistry()
    registry.publish("m", {"a": {"en": "1"}, "b": {"en": "1"}})
    snapshot = registry.get("m")

    registry.publish("m", {"a": {"en": "2"}})

    assert dict(snapshot["a"]) == {"en": "1"}
    assert "b" in snapshot
    assert "b" not in registry.get("m")
    registry.clear("m")
    assert registry.get("m") is None


def test_load_catalog_reads_current_service_and_common(db_session_fixture: Session):
    message_crud.upsert(db_session_fixture, key="catalog_test_key", service="catalog_svc", texts={"en": "svc text"})
    message_crud.upsert(db_session_fixture, key="catalog_test_other", service="other_svc", texts={"en": "other"})
    registry = CatalogRegistry()

    count = load_catalog(db_session_fixture, registry, service="catalog_svc", map_key="msgLangMap")

    catalog = registry.get("msgLangMap")
    assert count == len(catalog)
    assert catalog["catalog_test_key"]["en"] == "svc text"
    assert catalog["1001"]["zh_CN"] == "请求参数验证失败"
    assert "catalog_test_other" not in catalog


def test_soft_deleted_messages_are_not_loaded(db_session_fixture: Session):
    item = message_crud.upsert(db_session_fixture, key="catalog_deleted", service="catalog_svc", texts={"en": "gone"})
    message_crud.soft_delete(db_session_fixture, item)
    registry = CatalogRegistry()

    load_catalog(db_session_fixture, registry, service="catalog_svc", map_key="m")

    assert "catalog_deleted" not in registry.get("m")
