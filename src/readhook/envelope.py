"""Utilities for reading and normalizing user-supplied rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from readhook.types import EntityRecordSet, ResponseEnvelope


def normalize_record(record: Any) -> dict[str, Any]:
    """Convert arbitrary row objects to a mutable mapping."""

    if isinstance(record, Mapping):
        return dict(record)
    if hasattr(record, "__dict__"):
        return {key: value for key, value in vars(record).items() if not key.startswith("_")}
    raise TypeError(f"Cannot use {type(record).__name__} as an entity record")


def unpack_rows(entity: str, result: Any) -> EntityRecordSet:
    """Normalize one on-READ handler return value to a record set."""

    if isinstance(result, ResponseEnvelope):
        return result.data
    if isinstance(result, EntityRecordSet):
        return result
    if isinstance(result, Mapping) or not isinstance(result, Iterable) or isinstance(result, (str, bytes)):
        return EntityRecordSet.of(entity, [normalize_record(result)])
    return EntityRecordSet.of(entity, [normalize_record(row) for row in result])
