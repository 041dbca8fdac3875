from __future__ import annotations

from pathlib import Path

import pytest

from fixtures_plugins.audit_hooks import AuditHooksPlugin
from readhook.config import Settings
from readhook.framework import ReadHookFramework
from readhook.hookspecs import hookimpl
from readhook.registry import HandlerRegistry
from readhook.store import MemoryStore
from readhook.types import HookEvent, ReadRequest, ResponseStatus


def test_orders_read_carries_quantity(framework: ReadHookFramework) -> None:
    response = framework.read("Orders")

    assert response.status is ResponseStatus.SUCCESS
    assert len(response.data) == 2
    assert all(record["quantity"] == 1000 for record in response.data)
    assert response.data.records[0]["orderId"] == "A1"


def test_other_entities_are_not_augmented(framework: ReadHookFramework) -> None:
    books = framework.read("Books")
    authors = framework.read(ReadRequest(entity="Authors", where={"ID": 150}))

    assert books.ok and len(books.data) == 5
    assert all("quantity" not in record for record in books.data)
    assert authors.data.to_list() == [{"ID": 150, "name": "Edgar Allen Poe"}]


def test_projection_still_gets_quantity(framework: ReadHookFramework) -> None:
    response = framework.read(ReadRequest(entity="Orders", columns=("orderId",), top=1))

    assert response.data.to_list() == [{"orderId": "A1", "quantity": 1000}]


def test_unknown_entity_is_not_found(framework: ReadHookFramework) -> None:
    response = framework.read("Reviews")

    assert response.status is ResponseStatus.FAILURE
    assert response.code == 404


def test_reads_do_not_leak_into_store(framework: ReadHookFramework) -> None:
    store = MemoryStore({"Orders": [{"orderId": "A1", "total": 42}]})

    class SharedStorePlugin:
        @hookimpl
        def provide_store(self, settings: Settings) -> MemoryStore:
            return store

    framework.register_plugin(SharedStorePlugin(), name="shared-store")
    framework.read("Orders")
    framework.read("Orders")

    assert store.select(ReadRequest(entity="Orders")) == [{"orderId": "A1", "total": 42}]


def test_data_file_setting_seeds_store(tmp_path: Path) -> None:
    data_file = tmp_path / "orders.yaml"
    data_file.write_text("Orders:\n  - {orderId: Z9, total: 1}\n", encoding="utf-8")
    framework = ReadHookFramework(Settings(data_file=data_file, load_entrypoints=False))
    framework.load_plugins()

    response = framework.read("Orders")

    assert response.data.to_list() == [{"orderId": "Z9", "total": 1, "quantity": 1000}]
    assert framework.read("Books").code == 404


def test_store_provided_by_plugin_takes_precedence(framework: ReadHookFramework) -> None:
    class FixedStorePlugin:
        @hookimpl
        def provide_store(self, settings: Settings) -> MemoryStore:
            return MemoryStore({"Orders": [{"orderId": "P1"}]})

    framework.register_plugin(FixedStorePlugin(), name="fixed-store")

    assert framework.read("Orders").data.to_list() == [{"orderId": "P1", "quantity": 1000}]


def test_plugin_handlers_observe_reads(framework: ReadHookFramework) -> None:
    audit = AuditHooksPlugin()
    framework.register_plugin(audit, name="audit")

    framework.read("Orders")
    framework.read("Books")

    assert audit.seen == [("Orders", 2), ("Books", 5)]


def test_handler_registry_lists_builtin_bindings(framework: ReadHookFramework) -> None:
    registry = framework.service.registry

    assert len(registry.handlers_for(HookEvent.ON_READ, "Orders")) == 1
    assert [handler.__name__ for handler in registry.handlers_for(HookEvent.AFTER_READ, "Orders")] == [
        "after_read_orders"
    ]


def test_hook_report_lists_builtin_plugins(framework: ReadHookFramework) -> None:
    report = framework.hook_report()

    assert set(report["register_handlers"]) == {"readhook.builtin.catalog:plugin", "readhook.builtin.orders:plugin"}
    assert report["register_cli_commands"] == ["readhook.builtin.cli:plugin"]


@pytest.mark.parametrize("entity", ["Orders", "Books"])
def test_service_name_comes_from_settings(entity: str) -> None:
    framework = ReadHookFramework(Settings(service_name="AdminService", load_entrypoints=False))
    framework.load_plugins()

    assert framework.service.name == "AdminService"
    assert framework.read(entity).ok


def test_rejection_survives_plugin_registration(framework: ReadHookFramework) -> None:
    framework.service.reject("READ", "Orders")
    framework.register_plugin(AuditHooksPlugin(), name="audit")

    response = framework.read("Orders")

    assert response.status is ResponseStatus.FAILURE
    assert response.code == 405
    assert framework.read("Books").ok


def test_framework_reject_survives_reload(framework: ReadHookFramework) -> None:
    framework.reject("READ", "Authors")
    framework.load_plugins()

    assert framework.read("Authors").code == 405


def test_plugin_can_declare_rejection(framework: ReadHookFramework) -> None:
    class ReadOnlyBooksPlugin:
        @hookimpl
        def register_handlers(self, registry: HandlerRegistry) -> None:
            registry.reject("READ", "Books")

    framework.register_plugin(ReadOnlyBooksPlugin(), name="no-books")

    assert framework.read("Books").code == 405
    assert framework.read("Orders").ok
