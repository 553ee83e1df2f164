"""Foreign-key resolution shared by every Planday domain."""

from .domains import BulkFetch, ForeignKeyDomain, PerIdFetch, full_name, name_field
from .resolver import (
    EnrichedRecord,
    EntitySource,
    Failed,
    Found,
    LookupOutcome,
    NotFound,
    Page,
    ReferenceResolver,
    Resolution,
    ResolutionMap,
    enrich,
)

__all__ = [
    "BulkFetch",
    "EnrichedRecord",
    "EntitySource",
    "Failed",
    "ForeignKeyDomain",
    "Found",
    "LookupOutcome",
    "NotFound",
    "Page",
    "PerIdFetch",
    "ReferenceResolver",
    "Resolution",
    "ResolutionMap",
    "enrich",
    "full_name",
    "name_field",
]
