"""Framework-neutral read pipeline types."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias

Record: TypeAlias = Mapping[str, Any]

WILDCARD_ENTITY = "*"


class HookEvent(str, Enum):
    """Phases of the read pipeline a handler can bind to."""

    BEFORE_READ = "before:READ"
    ON_READ = "on:READ"
    AFTER_READ = "after:READ"

    @property
    def phase(self) -> str:
        return self.value.split(":")[0]

    @property
    def operation(self) -> str:
        return self.value.split(":")[1]


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def freeze_record(record: Mapping[str, Any]) -> Record:
    """Copy one record into a read-only mapping."""

    return MappingProxyType(dict(record))


@dataclass(frozen=True)
class EntityRecordSet:
    """Ordered, immutable rows returned for one entity."""

    entity: str
    records: tuple[Record, ...] = ()

    @classmethod
    def of(cls, entity: str, records: Iterable[Mapping[str, Any]] = ()) -> EntityRecordSet:
        return cls(entity=entity, records=tuple(freeze_record(record) for record in records))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def __hash__(self) -> int:
        return hash((self.entity, tuple(_items_key(record) for record in self.records)))

    def to_list(self) -> list[dict[str, Any]]:
        """Return mutable copies of all records."""

        return [dict(record) for record in self.records]


@dataclass(frozen=True)
class ResponseEnvelope:
    """Status plus record set handed between the runtime and handlers."""

    status: ResponseStatus
    data: EntityRecordSet
    error: str | None = None
    code: int | None = None

    @classmethod
    def success(cls, data: EntityRecordSet) -> ResponseEnvelope:
        return cls(status=ResponseStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, entity: str, error: str, code: int = 500) -> ResponseEnvelope:
        return cls(status=ResponseStatus.FAILURE, data=EntityRecordSet(entity=entity), error=error, code=code)

    @property
    def ok(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    @property
    def entity(self) -> str:
        return self.data.entity

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status.value, "records": self.data.to_list()}
        if self.error is not None:
            payload["error"] = self.error
        if self.code is not None:
            payload["code"] = self.code
        return payload


@dataclass(frozen=True)
class ReadRequest:
    """One READ against a named entity. Read-only to handlers."""

    entity: str
    service: str | None = None
    columns: tuple[str, ...] = ()
    where: Mapping[str, Any] = field(default_factory=dict)
    top: int | None = None
    skip: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "where", MappingProxyType(dict(self.where)))

    def __hash__(self) -> int:
        return hash((self.entity, self.service, self.columns, _items_key(self.where), self.top, self.skip))


def _items_key(mapping: Mapping[str, Any]) -> tuple[tuple[str, Any], ...]:
    return tuple(sorted(mapping.items(), key=lambda item: item[0]))
