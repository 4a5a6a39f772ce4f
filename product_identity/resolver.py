from __future__ import annotations

"""
Product identity resolver.

plan -> fan-out lookups -> merge -> score -> gate -> pick max -> materials

The resolver is advisory (it feeds autofill), so it never raises: store
failures, empty queries and unmatched queries all come back as ``None``.
An empty materials list is a real answer ("matched, no size info yet") and
is returned as ``[]``.
"""

from typing import AbstractSet, List, Optional

from loguru import logger

from .config import CatalogEntry, MaterialSpec
from .normalize import upper
from .planner import plan_lookup_keys
from .retrieval import retrieve_candidates
from .scoring import score_candidates, select_best
from .store import CatalogStore


class ProductResolver:
    """
    Resolve free-text (name, code) pairs against a catalog store.

    Stateless between calls; one instance can serve concurrent resolutions.
    ``excluded`` holds entry ids never offered as a result (for example rows a
    user dismissed); a per-call set is combined with it.
    """

    def __init__(
        self,
        store: CatalogStore,
        excluded: Optional[AbstractSet[str]] = None,
    ) -> None:
        self.store = store
        self.excluded = frozenset(excluded or ())

    async def resolve_entry(
        self,
        product_name: str | None,
        product_code: str | None,
        excluded: Optional[AbstractSet[str]] = None,
    ) -> Optional[CatalogEntry]:
        name, code = upper(product_name), upper(product_code)
        if not name and not code:
            return None

        try:
            keys = plan_lookup_keys(name, code)
            if not keys:
                return None
            candidates = await retrieve_candidates(self.store, keys)
            if not candidates:
                logger.debug("No candidates for name={!r} code={!r}", name, code)
                return None

            scored = score_candidates(candidates.values(), name, code)
            skip = set(self.excluded) | set(excluded or ())
            best = select_best(scored, excluded=skip)
        except Exception as e:
            logger.exception("Resolution failed for name={!r} code={!r}: {}", name, code, e)
            return None

        if best is None:
            logger.debug(
                "No eligible candidate among {} for name={!r} code={!r}",
                len(candidates),
                name,
                code,
            )
            return None

        logger.debug(
            "Resolved name={!r} code={!r} -> {} ({} / {}) total={}",
            name,
            code,
            best.entry.id,
            best.entry.product_name,
            best.entry.product_code,
            best.total,
        )
        return best.entry

    async def resolve(
        self,
        product_name: str | None,
        product_code: str | None,
        excluded: Optional[AbstractSet[str]] = None,
    ) -> Optional[List[MaterialSpec]]:
        entry = await self.resolve_entry(product_name, product_code, excluded=excluded)
        if entry is None:
            return None
        return list(entry.materials)


async def resolve(
    store: CatalogStore,
    product_name: str | None,
    product_code: str | None,
    excluded: Optional[AbstractSet[str]] = None,
) -> Optional[List[MaterialSpec]]:
    """Convenience wrapper: one-off resolution without keeping a resolver."""
    return await ProductResolver(store).resolve(product_name, product_code, excluded=excluded)
