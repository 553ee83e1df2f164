"""Foreign-key domains: how to find, fetch and name secondary entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Set, Union

Namer = Callable[[Mapping[str, Any]], Optional[str]]


def name_field(key: str = "name") -> Namer:
    def _namer(entity: Mapping[str, Any]) -> Optional[str]:
        value = entity.get(key)
        return str(value) if value else None

    return _namer


def full_name(entity: Mapping[str, Any]) -> Optional[str]:
    return f"{entity.get('firstName') or ''} {entity.get('lastName') or ''}".strip() or None


@dataclass(frozen=True)
class BulkFetch:
    """Fetch the collection page by page and filter client-side."""

    path: str
    id_field: str = "id"


@dataclass(frozen=True)
class PerIdFetch:
    """Fetch one entity per ID; for endpoints that only accept a single ID."""

    path_template: str

    def path_for(self, entity_id: int) -> str:
        return self.path_template.format(id=entity_id)


FetchRule = Union[BulkFetch, PerIdFetch]


@dataclass(frozen=True)
class ForeignKeyDomain:
    name: str
    label: str
    key: str
    fetch: FetchRule
    namer: Namer = field(default=name_field(), compare=False)
    unassigned: str = "Unassigned"

    def key_of(self, record: Any) -> Optional[int]:
        """Return the referenced ID, or ``None`` when the record has no reference.

        Zero counts as "no reference": it never goes through resolution.
        """
        if isinstance(record, Mapping):
            value = record.get(self.key)
        else:
            value = getattr(record, self.key, None)
        if isinstance(value, bool) or not isinstance(value, int) or value == 0:
            return None
        return value

    def extract_ids(self, records: Iterable[Any]) -> Set[int]:
        ids = set()
        for record in records:
            entity_id = self.key_of(record)
            if entity_id is not None:
                ids.add(entity_id)
        return ids

    def fallback(self, entity_id: int) -> str:
        return f"{self.label} ID: {entity_id}"

    def display_name(self, entity: Mapping[str, Any]) -> Optional[str]:
        name = self.namer(entity)
        return name.strip() if name and name.strip() else None
