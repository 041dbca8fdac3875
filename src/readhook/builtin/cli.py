"""Builtin CLI command hooks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml

from readhook.config import get_settings
from readhook.framework import ReadHookFramework
from readhook.hookspecs import hookimpl
from readhook.types import ReadRequest


class CliCorePlugin:
    @hookimpl
    def register_cli_commands(self, app: typer.Typer) -> None:
        @app.command("read")
        def read(
            entity: str = typer.Argument(..., help="Entity name, e.g. Orders"),
            column: list[str] | None = typer.Option(None, "--column", "-c", help="Project onto column"),  # noqa: B008
            where: list[str] | None = typer.Option(None, "--where", "-w", help="Equality filter key=value"),  # noqa: B008
            top: int | None = typer.Option(None, "--top", min=0, help="Maximum number of rows"),
            skip: int = typer.Option(0, "--skip", min=0, help="Rows to skip"),
            data: Path | None = typer.Option(None, "--data", help="YAML data file"),  # noqa: B008
        ) -> None:
            """Run one READ through the service pipeline and print the envelope."""

            framework = _load_framework(data)
            request = ReadRequest(
                entity=entity,
                columns=tuple(column or ()),
                where=_parse_where(where or []),
                top=top,
                skip=skip,
            )
            response = framework.read(request)
            typer.echo(json.dumps(response.to_dict(), ensure_ascii=False, indent=2, default=str))
            if not response.ok:
                raise typer.Exit(code=1)

        @app.command("handlers")
        def list_handlers(
            data: Path | None = typer.Option(None, "--data", help="YAML data file"),  # noqa: B008
        ) -> None:
            """Show entity handler bindings."""

            framework = _load_framework(data)
            report = framework.service.registry.report()
            if not report:
                typer.echo("(no handlers)")
                return
            for binding, handlers in report.items():
                typer.echo(f"{binding}: {', '.join(handlers)}")

        @app.command("plugins")
        def list_plugins() -> None:
            """Show loaded and failed plugins."""

            framework = _load_framework(None)
            for record in framework.loaded_plugins:
                typer.echo(f"loaded {record.name} ({record.source})")
            for spec, error in framework.failed_plugins.items():
                typer.echo(f"failed {spec}: {error}")

        @app.command("hooks")
        def list_hooks() -> None:
            """Show hook implementation mapping."""

            framework = _load_framework(None)
            report = framework.hook_report()
            if not report:
                typer.echo("(no hook implementations)")
                return
            for hook_name, plugins in report.items():
                typer.echo(f"{hook_name}: {', '.join(plugins)}")


plugin = CliCorePlugin()


def _load_framework(data_file: Path | None) -> ReadHookFramework:
    framework = ReadHookFramework(get_settings(data_file=data_file))
    framework.load_plugins()
    return framework


def _parse_where(items: list[str]) -> dict[str, Any]:
    where: dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got '{item}'", param_hint="--where")
        where[key.strip()] = _coerce_scalar(raw)
    return where


def _coerce_scalar(raw: str) -> Any:
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if isinstance(value, (dict, list)) or value is None:
        return raw
    return value
