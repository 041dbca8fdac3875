from __future__ import annotations

from readhook.hookspecs import hookimpl
from readhook.registry import HandlerRegistry
from readhook.types import HookEvent, ReadRequest, ResponseEnvelope


class AuditHooksPlugin:
    def __init__(self) -> None:
        self.seen: list[tuple[str, int]] = []
        self.errors: list[tuple[str, str]] = []

    def record(self, request: ReadRequest, response: ResponseEnvelope) -> None:
        self.seen.append((request.entity, len(response.data)))

    @hookimpl
    def register_handlers(self, registry: HandlerRegistry) -> None:
        registry.register(HookEvent.AFTER_READ, "*", self.record)

    @hookimpl
    def on_error(self, stage: str, error: Exception) -> None:
        self.errors.append((stage, str(error)))

