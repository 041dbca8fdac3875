"""Application-level exception types for readhook."""

from __future__ import annotations


class ReadHookError(Exception):
    """Base exception for readhook."""


class ConfigurationError(ReadHookError):
    """Raised when settings or seed data cannot be used."""


class PluginLoadError(ConfigurationError):
    """Raised when a plugin spec cannot be imported or resolved."""

    def __init__(self, spec: str, reason: str) -> None:
        super().__init__(f"Cannot load plugin '{spec}': {reason}")
        self.spec = spec
        self.reason = reason


class HandlerRegistrationError(ReadHookError):
    """Raised when a handler binding is invalid."""


class EntityNotFoundError(ReadHookError):
    """Raised when no data source knows the requested entity."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"Entity '{entity}' not found")
        self.entity = entity


class ReadRejectedError(ReadHookError):
    """Raised by handlers to refuse a read with a status code."""

    def __init__(self, message: str, code: int = 400) -> None:
        super().__init__(message)
        self.code = code
