from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

import pytest

import readhook.cli as cli_module
from readhook.cli import app, create_cli_app

runner = CliRunner()


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(cli_module, "configure_logging", lambda **kwargs: calls.append(kwargs))
    return calls


def test_read_orders_prints_augmented_envelope() -> None:
    result = runner.invoke(app, ["read", "Orders"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "success"
    assert [record["quantity"] for record in payload["records"]] == [1000, 1000]


def test_read_with_filters_and_projection() -> None:
    result = runner.invoke(app, ["read", "Books", "-c", "title", "--where", "author_ID=150", "--top", "1"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"status": "success", "records": [{"title": "The Raven"}]}


def test_read_with_data_file(tmp_path: Path) -> None:
    data_file = tmp_path / "seed.yaml"
    data_file.write_text("Orders:\n  - {orderId: C3}\n", encoding="utf-8")

    result = runner.invoke(app, ["read", "Orders", "--data", str(data_file)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["records"] == [{"orderId": "C3", "quantity": 1000}]


def test_read_unknown_entity_exits_non_zero() -> None:
    result = runner.invoke(app, ["read", "Reviews"])

    assert result.exit_code == 1
    assert '"failure"' in result.stdout


def test_read_rejects_malformed_where() -> None:
    result = runner.invoke(app, ["read", "Books", "--where", "oops"])

    assert result.exit_code != 0


def test_handlers_command_lists_orders_interceptor() -> None:
    result = runner.invoke(app, ["handlers"])

    assert result.exit_code == 0
    assert "after:READ Orders: after_read_orders" in result.stdout
    assert "on:READ *: StoreReader" in result.stdout


def test_hooks_and_plugins_commands() -> None:
    hooks = runner.invoke(app, ["hooks"])
    plugins = runner.invoke(app, ["plugins"])

    assert hooks.exit_code == 0
    assert "register_handlers:" in hooks.stdout
    assert "loaded readhook.builtin.orders:plugin (builtin)" in plugins.stdout


def test_logging_is_configured_when_a_command_runs(
    monkeypatch: pytest.MonkeyPatch, logging_calls: list[dict[str, object]]
) -> None:
    monkeypatch.setenv("READHOOK_LOG_LEVEL", "DEBUG")

    create_cli_app()
    assert logging_calls == []

    result = runner.invoke(app, ["hooks"])

    assert result.exit_code == 0
    assert logging_calls == [{"profile": "cli", "level": "DEBUG"}]
