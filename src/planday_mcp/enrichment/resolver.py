"""Concurrent resolution of foreign keys into display names.

Primary records (shifts, absence records, payroll lines) carry numeric IDs
pointing into other collections. ``ReferenceResolver.resolve`` collects the
distinct IDs per domain, fetches every domain concurrently and returns one
``ResolutionMap`` per domain. Lookup problems never escape: a missing or
failed entity resolves to the domain's fallback text and the cause is kept
on the map for logging and inspection.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Set, TypeVar, Union

from ..logging import get_logger
from ..settings import PlandaySettings
from .domains import BulkFetch, ForeignKeyDomain, PerIdFetch

LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Found:
    name: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failed:
    cause: BaseException


LookupOutcome = Union[Found, NotFound, Failed]


@dataclass
class Page:
    items: List[Dict[str, Any]]
    offset: int = 0
    total: Optional[int] = None

    def is_last(self, limit: int) -> bool:
        if not self.items:
            return True
        if self.total is not None:
            return self.offset + len(self.items) >= self.total
        return len(self.items) < limit


class EntitySource(Protocol):
    async def fetch_page(self, path: str, *, limit: int, offset: int = 0) -> Page: ...

    async def fetch_entity(self, path: str) -> Optional[Dict[str, Any]]: ...


class ResolutionMap(Mapping):
    """ID to display name for one domain, built for a single ``resolve`` call."""

    def __init__(
        self,
        domain: ForeignKeyDomain,
        names: Optional[Dict[int, str]] = None,
        failures: Optional[Dict[int, LookupOutcome]] = None,
    ) -> None:
        self.domain = domain
        self._names = dict(names or {})
        self.failures = dict(failures or {})

    def __getitem__(self, entity_id: int) -> str:
        return self._names[entity_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ResolutionMap({self.domain.name!r}, {self._names!r})"

    def display(self, entity_id: Optional[int]) -> str:
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id == 0:
            return self.domain.unassigned
        name = self._names.get(entity_id)
        return name if name is not None else self.domain.fallback(entity_id)


Resolution = Dict[str, ResolutionMap]


@dataclass(frozen=True)
class EnrichedRecord:
    record: Any
    names: Dict[str, str] = field(default_factory=dict)


class ReferenceResolver:
    def __init__(
        self,
        source: EntitySource,
        *,
        settings: Optional[PlandaySettings] = None,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._source = source
        self._page_size = page_size or (settings.lookup_page_size if settings else 50)
        self._max_pages = max_pages or (settings.lookup_max_pages if settings else 20)
        self._timeout = timeout or (settings.lookup_timeout_seconds if settings else 10.0)

    async def resolve(self, records: Iterable[Any], domains: Sequence[ForeignKeyDomain]) -> Resolution:
        """Resolve every domain's foreign keys concurrently; never raises for lookups."""
        batch = list(records)
        maps = await asyncio.gather(*(self._resolve_domain(batch, domain) for domain in domains))
        return {resolved.domain.name: resolved for resolved in maps}

    async def _resolve_domain(self, records: List[Any], domain: ForeignKeyDomain) -> ResolutionMap:
        ids = domain.extract_ids(records)
        if not ids:
            return ResolutionMap(domain)

        if isinstance(domain.fetch, PerIdFetch):
            outcomes = await self._lookup_each(domain, domain.fetch, ids)
        else:
            outcomes = await self._lookup_bulk(domain, domain.fetch, ids)
        return self._finalize(domain, ids, outcomes)

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self._timeout)

    async def _lookup_bulk(
        self, domain: ForeignKeyDomain, rule: BulkFetch, ids: Set[int]
    ) -> Dict[int, LookupOutcome]:
        outcomes: Dict[int, LookupOutcome] = {}
        remaining = set(ids)
        offset = 0
        try:
            for _ in range(self._max_pages):
                page = await self._bounded(
                    self._source.fetch_page(rule.path, limit=self._page_size, offset=offset)
                )
                for entity in page.items:
                    entity_id = entity.get(rule.id_field)
                    if entity_id in remaining:
                        name = domain.display_name(entity)
                        outcomes[entity_id] = Found(name) if name else NotFound()
                        remaining.discard(entity_id)
                if not remaining or page.is_last(self._page_size):
                    break
                offset += len(page.items)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning(
                "reference_domain_unavailable",
                domain=domain.name,
                unresolved=len(remaining),
                error=repr(exc),
            )
            for entity_id in remaining:
                outcomes[entity_id] = Failed(exc)
            return outcomes

        for entity_id in remaining:
            outcomes[entity_id] = NotFound()
        return outcomes

    async def _lookup_each(
        self, domain: ForeignKeyDomain, rule: PerIdFetch, ids: Set[int]
    ) -> Dict[int, LookupOutcome]:
        ordered = sorted(ids)
        results = await asyncio.gather(*(self._lookup_one(domain, rule, entity_id) for entity_id in ordered))
        return dict(zip(ordered, results))

    async def _lookup_one(self, domain: ForeignKeyDomain, rule: PerIdFetch, entity_id: int) -> LookupOutcome:
        try:
            entity = await self._bounded(self._source.fetch_entity(rule.path_for(entity_id)))
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("reference_lookup_failed", domain=domain.name, entity_id=entity_id, error=repr(exc))
            return Failed(exc)
        if not entity:
            return NotFound()
        name = domain.display_name(entity)
        return Found(name) if name else NotFound()

    @staticmethod
    def _finalize(
        domain: ForeignKeyDomain, ids: Set[int], outcomes: Dict[int, LookupOutcome]
    ) -> ResolutionMap:
        names: Dict[int, str] = {}
        failures: Dict[int, LookupOutcome] = {}
        for entity_id in ids:
            outcome = outcomes.get(entity_id, NotFound())
            if isinstance(outcome, Found):
                names[entity_id] = outcome.name
            else:
                names[entity_id] = domain.fallback(entity_id)
                failures[entity_id] = outcome
        LOGGER.debug(
            "references_resolved",
            domain=domain.name,
            requested=len(ids),
            unresolved=len(failures),
        )
        return ResolutionMap(domain, names, failures)


def enrich(
    records: Iterable[Any],
    resolution: Resolution,
    domains: Sequence[ForeignKeyDomain],
) -> List[EnrichedRecord]:
    """Attach resolved names to each record, keeping input order and count."""
    maps = {domain.name: resolution.get(domain.name) or ResolutionMap(domain) for domain in domains}
    return [
        EnrichedRecord(
            record=record,
            names={domain.name: maps[domain.name].display(domain.key_of(record)) for domain in domains},
        )
        for record in records
    ]
