from __future__ import annotations
"""
Candidate retrieval for the resolver.

Fires every planned lookup key against the store concurrently, waits for all
of them, and merges the per-key results into one candidate set.

- a failing key contributes zero candidates and never cancels its siblings
- merge is keyed by entry id, first-seen wins
"""

import asyncio
from typing import Dict, List, Sequence

from loguru import logger

from .config import CatalogEntry
from .pipeline_types import LookupKey, QueryKind
from .store import CatalogStore


async def run_lookup(store: CatalogStore, key: LookupKey) -> List[CatalogEntry]:
    """Execute one lookup key; adapter failures degrade to an empty result."""
    try:
        if key.kind is QueryKind.EQUALITY:
            rows = await store.equality_query(key.field, key.value)
        else:
            rows = await store.prefix_range_query(key.field, key.value)
    except Exception as e:
        logger.warning(
            "Lookup {} {}={!r} failed: {}",
            key.kind.value,
            key.field.value,
            key.value,
            e,
        )
        return []
    return list(rows or [])


async def fetch_candidates(
    store: CatalogStore,
    keys: Sequence[LookupKey],
) -> List[List[CatalogEntry]]:
    """Run all keys concurrently; result lists come back in key order."""
    if not keys:
        return []
    return list(await asyncio.gather(*(run_lookup(store, k) for k in keys)))


def merge_candidates(results: Sequence[Sequence[CatalogEntry]]) -> Dict[str, CatalogEntry]:
    """Collapse per-key results into one id -> entry map (first-seen wins)."""
    merged: Dict[str, CatalogEntry] = {}
    for rows in results:
        for entry in rows:
            if entry.id not in merged:
                merged[entry.id] = entry
    return merged


async def retrieve_candidates(
    store: CatalogStore,
    keys: Sequence[LookupKey],
) -> Dict[str, CatalogEntry]:
    results = await fetch_candidates(store, keys)
    merged = merge_candidates(results)
    logger.debug(
        "Retrieved {} rows over {} keys -> {} unique candidates",
        sum(len(r) for r in results),
        len(keys),
        len(merged),
    )
    return merged
