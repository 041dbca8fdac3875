"""Explicit (event, entity) -> handler registry."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from readhook.errors import HandlerRegistrationError
from readhook.types import WILDCARD_ENTITY, HookEvent

Handler = Callable[..., Any]

BINDINGS_ATTR = "__readhook_bindings__"


@dataclass(frozen=True)
class HandlerBinding:
    """One handler bound to an event for an entity."""

    event: HookEvent
    entity: str
    handler: Handler
    service: str | None = None

    @property
    def handler_name(self) -> str:
        name = getattr(self.handler, "__qualname__", None)
        if name is None:
            name = type(self.handler).__qualname__
        return name

    def matches(self, event: HookEvent, entity: str, service: str | None) -> bool:
        if self.event is not event:
            return False
        if self.entity not in (entity, WILDCARD_ENTITY):
            return False
        return self.service is None or self.service == service


@dataclass(frozen=True)
class Rejection:
    """One operation refused for an entity."""

    operation: str
    entity: str
    service: str | None = None

    def matches(self, operation: str, entity: str, service: str | None) -> bool:
        if self.operation != operation.upper():
            return False
        if self.entity not in (entity, WILDCARD_ENTITY):
            return False
        return self.service is None or self.service == service


def handles(event: HookEvent | str, entity: str, *, service: str | None = None) -> Callable[[Handler], Handler]:
    """Mark a function or method for registration by ``HandlerRegistry.scan``."""

    normalized = _normalize_event(event)

    def decorator(func: Handler) -> Handler:
        target = func.__func__ if inspect.ismethod(func) else func
        bindings = list(getattr(target, BINDINGS_ATTR, ()))
        bindings.append((normalized, entity, service))
        setattr(target, BINDINGS_ATTR, tuple(bindings))
        return func

    return decorator


def before_read(entity: str, *, service: str | None = None) -> Callable[[Handler], Handler]:
    return handles(HookEvent.BEFORE_READ, entity, service=service)


def on_read(entity: str, *, service: str | None = None) -> Callable[[Handler], Handler]:
    return handles(HookEvent.ON_READ, entity, service=service)


def after_read(entity: str, *, service: str | None = None) -> Callable[[Handler], Handler]:
    return handles(HookEvent.AFTER_READ, entity, service=service)


class HandlerRegistry:
    """Registry populated at startup and read by the dispatch loop."""

    def __init__(self) -> None:
        self._bindings: list[HandlerBinding] = []
        self._rejections: set[Rejection] = set()

    def register(
        self,
        event: HookEvent | str,
        entity: str,
        handler: Handler,
        *,
        service: str | None = None,
    ) -> Handler:
        """Bind ``handler`` to ``event`` for ``entity``.

        Returns:
            The same handler (for decorator usage)

        Raises:
            HandlerRegistrationError: If the handler is not callable or entity is blank
        """
        if not callable(handler):
            raise HandlerRegistrationError(f"Handler for {event}/{entity} is not callable: {handler!r}")
        if not entity or not entity.strip():
            raise HandlerRegistrationError("Entity name must not be empty")

        binding = HandlerBinding(event=_normalize_event(event), entity=entity.strip(), handler=handler, service=service)
        if binding in self._bindings:
            return handler
        self._bindings.append(binding)
        logger.debug(
            "registry.bound event={} entity={} service={} handler={}",
            binding.event.value,
            binding.entity,
            binding.service or "*",
            binding.handler_name,
        )
        return handler

    def scan(self, obj: Any) -> int:
        """Register every attribute of ``obj`` marked with ``handles``.

        Returns:
            Number of bindings added
        """
        before = len(self._bindings)
        for name in dir(obj):
            if name.startswith("__"):
                continue
            attr = getattr(obj, name, None)
            if not callable(attr):
                continue
            for event, entity, service in getattr(attr, BINDINGS_ATTR, ()):
                self.register(event, entity, attr, service=service)
        return len(self._bindings) - before

    def unregister(self, event: HookEvent | str, entity: str, handler: Handler) -> bool:
        normalized = _normalize_event(event)
        kept = [
            binding
            for binding in self._bindings
            if not (binding.event is normalized and binding.entity == entity and binding.handler == handler)
        ]
        removed = len(kept) != len(self._bindings)
        self._bindings = kept
        return removed

    def handlers_for(self, event: HookEvent | str, entity: str, *, service: str | None = None) -> list[Handler]:
        normalized = _normalize_event(event)
        return [binding.handler for binding in self._bindings if binding.matches(normalized, entity, service)]

    def reject(self, operation: str, entity: str, *, service: str | None = None) -> None:
        """Refuse every ``operation`` on ``entity``; ``service=None`` applies to all services."""

        if not entity or not entity.strip():
            raise HandlerRegistrationError("Entity name must not be empty")
        rejection = Rejection(operation=operation.strip().upper(), entity=entity.strip(), service=service)
        self._rejections.add(rejection)
        logger.debug(
            "registry.rejected operation={} entity={} service={}",
            rejection.operation,
            rejection.entity,
            rejection.service or "*",
        )

    def is_rejected(self, operation: str, entity: str, *, service: str | None = None) -> bool:
        return any(rejection.matches(operation, entity, service) for rejection in self._rejections)

    @property
    def rejections(self) -> set[Rejection]:
        return set(self._rejections)

    @property
    def bindings(self) -> list[HandlerBinding]:
        return list(self._bindings)

    def report(self) -> dict[str, list[str]]:
        """Build an ``event entity`` -> handler names mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for binding in self._bindings:
            key = f"{binding.event.value} {binding.entity}"
            if binding.service is not None:
                key = f"{key} @{binding.service}"
            report.setdefault(key, []).append(binding.handler_name)
        return report


def _normalize_event(event: HookEvent | str) -> HookEvent:
    if isinstance(event, HookEvent):
        return event
    try:
        return HookEvent(event)
    except ValueError:
        raise HandlerRegistrationError(f"Unknown hook event: {event!r}") from None
