"""Copy-on-write construction of derived record sets."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from readhook.envelope import normalize_record
from readhook.types import EntityRecordSet


class RecordSetBuilder:
    """Accumulate changes against copies of an existing record set.

    The source record set is never touched. Each ``add_element`` call applies
    to every record; ``build`` freezes the result under an entity name::

        RecordSetBuilder.from_record_set(data).add_element("quantity", 1000).build("Orders")
    """

    def __init__(self, records: Iterable[Any] = ()) -> None:
        self._records: list[dict[str, Any]] = [normalize_record(record) for record in records]

    @classmethod
    def from_record_set(cls, record_set: EntityRecordSet) -> RecordSetBuilder:
        return cls(record_set.records)

    def add_element(self, field: str, value: Any) -> RecordSetBuilder:
        """Set ``field`` to ``value`` on every record."""

        if not field:
            raise ValueError("field name must not be empty")
        for record in self._records:
            record[field] = value
        return self

    def add_elements(self, values: Mapping[str, Any]) -> RecordSetBuilder:
        for field, value in values.items():
            self.add_element(field, value)
        return self

    def remove_element(self, field: str) -> RecordSetBuilder:
        for record in self._records:
            record.pop(field, None)
        return self

    def append_record(self, record: Any) -> RecordSetBuilder:
        self._records.append(normalize_record(record))
        return self

    def build(self, entity: str) -> EntityRecordSet:
        return EntityRecordSet.of(entity, self._records)
