import asyncio

from product_identity.config import CatalogEntry
from product_identity.pipeline_types import LookupField
from product_identity.store import InMemoryCatalogStore


def _store():
    return InMemoryCatalogStore(
        [
            CatalogEntry(id="b", product_name="GMC", product_code="GMC-06-06R"),
            CatalogEntry(id="a", product_name="GMC", product_code="GMC-04-04N"),
            CatalogEntry(id="c", product_name="GME", product_code="GME-04-04"),
        ]
    )


def test_equality_query():
    store = _store()
    rows = asyncio.run(store.equality_query(LookupField.CODE, "GMC-06-06R"))
    assert [e.id for e in rows] == ["b"]
    assert asyncio.run(store.equality_query(LookupField.CODE, "GMC-06")) == []


def test_prefix_range_query_is_sorted_starts_with():
    store = _store()
    rows = asyncio.run(store.prefix_range_query(LookupField.CODE, "GMC-"))
    assert [e.product_code for e in rows] == ["GMC-04-04N", "GMC-06-06R"]

    by_name = asyncio.run(store.prefix_range_query(LookupField.NAME, "GM"))
    # value order, then id
    assert [e.id for e in by_name] == ["a", "b", "c"]


def test_calls_are_counted():
    store = _store()
    asyncio.run(store.equality_query(LookupField.NAME, "GMC"))
    asyncio.run(store.prefix_range_query(LookupField.NAME, "X"))
    assert store.calls == 2


def test_add_reindexes():
    store = _store()
    store.add(CatalogEntry(id="d", product_name="GMF", product_code="GMF-08-08"))
    assert len(store) == 4
    rows = asyncio.run(store.equality_query(LookupField.NAME, "GMF"))
    assert [e.id for e in rows] == ["d"]
