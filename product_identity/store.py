from __future__ import annotations

"""
Store adapter contract and an in-memory implementation.

The resolver only ever needs two read-only primitives over a sorted
secondary index per field:

* equality_query(field, value)       -> entries whose field == value
* prefix_range_query(field, prefix)  -> entries whose field is within
                                        [prefix, prefix + PREFIX_RANGE_SENTINEL)

Both are coroutines so a remote store can be awaited concurrently.
"""

from bisect import bisect_left
from typing import Dict, Iterable, List, Protocol, Tuple

from loguru import logger

from .config import PREFIX_RANGE_SENTINEL, CatalogEntry
from .pipeline_types import LookupField


class CatalogStore(Protocol):
    async def equality_query(self, field: LookupField, value: str) -> List[CatalogEntry]:
        ...

    async def prefix_range_query(self, field: LookupField, prefix: str) -> List[CatalogEntry]:
        ...


def field_value(entry: CatalogEntry, field: LookupField) -> str:
    if field is LookupField.NAME:
        return entry.product_name
    return entry.product_code


class InMemoryCatalogStore:
    """
    Catalog held in memory behind sorted per-field indices.

    Useful for tests, offline evaluation and small deployments that load a
    tabular snapshot at start-up. ``calls`` counts executed queries.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()) -> None:
        self._entries: List[CatalogEntry] = list(entries)
        self._index: Dict[LookupField, List[Tuple[str, str, int]]] = {}
        self.calls = 0
        self._rebuild()

    def _rebuild(self) -> None:
        for field in LookupField:
            self._index[field] = sorted(
                (field_value(e, field), e.id, pos) for pos, e in enumerate(self._entries)
            )
        logger.debug("In-memory catalog indexed with {} entries", len(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[CatalogEntry]:
        return list(self._entries)

    def add(self, entry: CatalogEntry) -> None:
        self._entries.append(entry)
        self._rebuild()

    def _range(self, field: LookupField, low: str, high: str) -> List[CatalogEntry]:
        index = self._index[field]
        start = bisect_left(index, (low,))
        out: List[CatalogEntry] = []
        for value, _id, pos in index[start:]:
            if value >= high:
                break
            out.append(self._entries[pos])
        return out

    async def equality_query(self, field: LookupField, value: str) -> List[CatalogEntry]:
        self.calls += 1
        index = self._index[field]
        start = bisect_left(index, (value,))
        out: List[CatalogEntry] = []
        for stored, _id, pos in index[start:]:
            if stored != value:
                break
            out.append(self._entries[pos])
        return out

    async def prefix_range_query(self, field: LookupField, prefix: str) -> List[CatalogEntry]:
        self.calls += 1
        return self._range(field, prefix, prefix + PREFIX_RANGE_SENTINEL)
