"""Pluggy hook namespace and framework hook specifications."""

from __future__ import annotations

from typing import Any

import pluggy

from readhook.config import Settings
from readhook.registry import HandlerRegistry
from readhook.store import MemoryStore
from readhook.types import ReadRequest

READHOOK_NAMESPACE = "readhook"
hookspec = pluggy.HookspecMarker(READHOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(READHOOK_NAMESPACE)


class ReadHookSpecs:
    """Hook contract for readhook plugins."""

    @hookspec(firstresult=True)
    def provide_store(self, settings: Settings) -> MemoryStore | None:
        """Provide the data store backing builtin READ handlers."""

    @hookspec
    def register_handlers(self, registry: HandlerRegistry, store: MemoryStore, settings: Settings) -> None:
        """Bind entity handlers into the explicit registry at startup."""

    @hookspec
    def register_cli_commands(self, app: Any) -> None:
        """Register CLI commands onto the root Typer application."""

    @hookspec
    def on_error(self, stage: str, error: Exception, request: ReadRequest | None) -> None:
        """Observe errors raised while serving a read."""
