import pytest
from pydantic import ValidationError

from product_identity.config import CatalogEntry, MaterialSpec, MaterialType, format_size


def test_format_size_two_decimals():
    assert format_size(6) == "6.00"
    assert format_size("4.5") == "4.50"
    assert format_size(" 12.345 ") == "12.35"
    with pytest.raises(ValueError):
        format_size("abc")
    with pytest.raises(ValueError):
        format_size(None)


def test_material_spec_accepts_store_aliases():
    spec = MaterialSpec.model_validate({"materialType": "Round", "size": 4})
    assert spec.material_type is MaterialType.ROUND
    assert spec.size == "4.00"


def test_material_spec_rejects_bad_values():
    with pytest.raises(ValidationError):
        MaterialSpec(material_type="Square", size="4")
    with pytest.raises(ValidationError):
        MaterialSpec(material_type=MaterialType.HEXA, size="-1")


def test_catalog_entry_canonical_text():
    entry = CatalogEntry.model_validate(
        {
            "id": "x",
            "productName": " gmc ",
            "productCode": "gmc-04-04n",
            "materials": [{"materialType": "Hexa", "size": "6"}],
        }
    )
    assert entry.product_name == "GMC"
    assert entry.product_code == "GMC-04-04N"
    assert entry.materials[0].size == "6.00"
    assert CatalogEntry(id="y").materials == []
