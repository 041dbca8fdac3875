"""readhook - hook-first entity read runtime."""

from .framework import ReadHookFramework
from .records import RecordSetBuilder
from .registry import HandlerRegistry, after_read, before_read, handles, on_read
from .service import ApplicationService
from .types import EntityRecordSet, HookEvent, ReadRequest, ResponseEnvelope, ResponseStatus

__version__ = "0.1.0"

__all__ = [
    "ApplicationService",
    "EntityRecordSet",
    "HandlerRegistry",
    "HookEvent",
    "ReadHookFramework",
    "ReadRequest",
    "RecordSetBuilder",
    "ResponseEnvelope",
    "ResponseStatus",
    "after_read",
    "before_read",
    "handles",
    "on_read",
]
