"""In-memory entity rows backing the builtin catalog handler."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from readhook.envelope import normalize_record
from readhook.errors import ConfigurationError, EntityNotFoundError
from readhook.types import ReadRequest

BOOKSHOP_RESOURCE = "bookshop.yaml"


class MemoryStore:
    """Rows per entity. Reads always return copies."""

    def __init__(self, entities: Mapping[str, Iterable[Any]] | None = None) -> None:
        self._rows: dict[str, list[dict[str, Any]]] = {}
        for entity, rows in (entities or {}).items():
            self.insert(entity, rows)

    @classmethod
    def from_yaml(cls, path: Path) -> MemoryStore:
        """Load ``{entity: [row, ...]}`` from a YAML file."""

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read data file {path}: {exc}") from exc
        return cls(_parse_entities(text, source=str(path)))

    @property
    def entities(self) -> list[str]:
        return sorted(self._rows)

    def has_entity(self, entity: str) -> bool:
        return entity in self._rows

    def insert(self, entity: str, rows: Iterable[Any]) -> int:
        bucket = self._rows.setdefault(entity, [])
        added = [normalize_record(row) for row in rows]
        bucket.extend(added)
        return len(added)

    def select(self, request: ReadRequest) -> list[dict[str, Any]]:
        """Apply filter, paging and projection of ``request``."""

        if not self.has_entity(request.entity):
            raise EntityNotFoundError(request.entity)
        rows = self._rows[request.entity]

        matched = [row for row in rows if _matches(row, request.where)]
        end = None if request.top is None else request.skip + request.top
        window = matched[request.skip : end]
        if not request.columns:
            return [dict(row) for row in window]
        return [{column: row.get(column) for column in request.columns} for row in window]


def bookshop_store() -> MemoryStore:
    """Store seeded with the bundled bookshop sample data."""

    text = resources.files("readhook.data").joinpath(BOOKSHOP_RESOURCE).read_text(encoding="utf-8")
    return MemoryStore(_parse_entities(text, source=BOOKSHOP_RESOURCE))


def _parse_entities(text: str, *, source: str) -> dict[str, list[Any]]:
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed data file {source}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Data file {source} must map entity names to row lists")

    entities: dict[str, list[Any]] = {}
    for entity, rows in payload.items():
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise ConfigurationError(f"Data file {source}: entity '{entity}' must be a list of mappings")
        entities[str(entity)] = rows
    logger.debug("store.loaded source={} entities={}", source, ",".join(entities))
    return entities


def _matches(row: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
    return all(row.get(key) == value for key, value in where.items())
