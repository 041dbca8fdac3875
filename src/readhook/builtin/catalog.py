"""Builtin store-backed READ handler for every entity."""

from __future__ import annotations

from typing import Any

from readhook.config import Settings
from readhook.hookspecs import hookimpl
from readhook.registry import HandlerRegistry
from readhook.store import MemoryStore
from readhook.types import WILDCARD_ENTITY, HookEvent, ReadRequest


class StoreReader:
    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def __call__(self, request: ReadRequest) -> list[dict[str, Any]]:
        return self._store.select(request)


class CatalogPlugin:
    @hookimpl
    def register_handlers(self, registry: HandlerRegistry, store: MemoryStore, settings: Settings) -> None:
        _ = settings
        registry.register(HookEvent.ON_READ, WILDCARD_ENTITY, StoreReader(store))


plugin = CatalogPlugin()
