import asyncio

import pandas as pd

from product_identity.catalog_build import (
    build_memory_store,
    entries_to_frame,
    normalize_catalog_df,
    parse_material_type,
    parse_size,
)
from product_identity.config import MaterialType
from product_identity.pipeline_types import LookupField


def test_parse_material_type():
    assert parse_material_type("hex") is MaterialType.HEXA
    assert parse_material_type(" HEXA ") is MaterialType.HEXA
    assert parse_material_type("육각") is MaterialType.HEXA
    assert parse_material_type("Round") is MaterialType.ROUND
    assert parse_material_type("원형") is MaterialType.ROUND
    assert parse_material_type("square") is None
    assert parse_material_type(None) is None


def test_parse_size():
    assert parse_size("6 mm") == "6.00"
    assert parse_size(4.5) == "4.50"
    assert parse_size("12.345") == "12.35"
    assert parse_size("n/a") is None
    assert parse_size(float("nan")) is None


def test_normalize_groups_long_format_rows():
    raw = pd.DataFrame(
        {
            "Product Name": ["gmc", "gmc", "male connector", ""],
            "Product Code": ["GMC-04-04N", "GMC-04-04N", "4-4N", ""],
            "Material": ["hex", "Round", "원형", None],
            "Size": ["4", "4.5 mm", "4", None],
        }
    )

    entries = normalize_catalog_df(raw)

    assert [e.id for e in entries] == ["row-0", "row-2"]
    first = entries[0]
    assert first.product_name == "GMC"
    assert [(m.material_type, m.size) for m in first.materials] == [
        (MaterialType.HEXA, "4.00"),
        (MaterialType.ROUND, "4.50"),
    ]
    assert entries[1].product_name == "MALE CONNECTOR"


def test_normalize_groups_by_id_and_skips_incomplete_materials():
    raw = pd.DataFrame(
        {
            "id": ["d1", "d1", "d2"],
            "productName": ["GMC", "GMC", "GME"],
            "productCode": ["GMC-06-06R", "GMC-06-06R", "GME-04-04"],
            "materialType": ["Hexa", "Hexa", None],
            "size": ["6", None, None],
        }
    )

    entries = normalize_catalog_df(raw)

    assert [e.id for e in entries] == ["d1", "d2"]
    assert len(entries[0].materials) == 1
    assert entries[1].materials == []


def test_entries_to_frame_one_row_per_material():
    raw = pd.DataFrame(
        {
            "productName": ["GMC", "GMC", "GME"],
            "productCode": ["GMC-04-04N", "GMC-04-04N", "GME-04-04"],
            "materialType": ["Hexa", "Round", None],
            "size": ["4", "4", None],
        }
    )
    frame = entries_to_frame(normalize_catalog_df(raw))
    assert list(frame.columns) == ["id", "product_name", "product_code", "material_type", "size"]
    assert len(frame) == 3


def test_build_memory_store_keeps_codes_as_text(tmp_path):
    path = tmp_path / "catalog.csv"
    pd.DataFrame(
        {
            "productName": ["GMC", "GME"],
            "productCode": ["04-04", "GME-06-06"],
            "materialType": ["Hexa", "Round"],
            "size": ["4", "6"],
        }
    ).to_csv(path, index=False)

    store = build_memory_store(path)

    assert len(store) == 2
    rows = asyncio.run(store.equality_query(LookupField.CODE, "04-04"))
    assert [e.product_name for e in rows] == ["GMC"]
