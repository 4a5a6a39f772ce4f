from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
CATALOG_SNAPSHOT_PATH = DATA_DIR / "catalog_snapshot.csv"


# ---------------------------
# Normalization
# ---------------------------

# Trailing variant letters (plating / finish) that do not change size or material.
SUFFIX_LETTERS = frozenset("NRG")

CODE_SEPARATOR = "-"

# Characters that split a product name into words.
NAME_WORD_SEPARATORS = r"[\s\-_]+"


# ---------------------------
# Planner thresholds
# ---------------------------

MIN_NAME_KEY_LEN = 3       # name equality / full-name prefix keys
MIN_NAME_INITIAL_LEN = 2   # first-character prefix key
MIN_CODE_LEN = 3           # plausible code fragment

# Upper bound of a prefix-range query: [prefix, prefix + sentinel)
PREFIX_RANGE_SENTINEL = "\uf8ff"


# ---------------------------
# Scoring
# ---------------------------

NAME_SCORE_EXACT = 100
NAME_SCORE_STORED_EXTENDS = 80   # stored name starts with query name
NAME_SCORE_QUERY_EXTENDS = 70    # query name starts with stored name
NAME_SCORE_SUBSTRING = 50
NAME_SCORE_WORD = 30

CODE_MATCH_BONUS = 100
BOTH_MATCH_BONUS = 50

MIN_WORD_PREFIX_LEN = 2
MIN_COMPACT_NAME_LEN = 3


# ---------------------------
# Document store (REST) settings
# ---------------------------

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
FIRESTORE_PROJECT = os.getenv("CATALOG_FIRESTORE_PROJECT", "")
FIRESTORE_DATABASE = os.getenv("CATALOG_FIRESTORE_DATABASE", "(default)")
CATALOG_COLLECTION = os.getenv("CATALOG_COLLECTION", "productMaterialSizes")
CATALOG_API_KEY = os.getenv("CATALOG_API_KEY") or None

HTTP_TIMEOUT = float(os.getenv("CATALOG_HTTP_TIMEOUT", "10.0"))
HTTP_CONNECT_TIMEOUT = 3.0


# ---------------------------
# Pydantic models shared around the package
# ---------------------------

class MaterialType(str, Enum):
    HEXA = "Hexa"
    ROUND = "Round"


def format_size(value) -> str:
    """
    Format a size as a decimal string with exactly two fractional digits.

    6 -> "6.00", "4.5" -> "4.50", " 12.345 " -> "12.35"
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"invalid size: {value!r}")
    text = str(value).strip()
    try:
        dec = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"invalid size: {value!r}") from None
    if not dec.is_finite() or dec < 0:
        raise ValueError(f"invalid size: {value!r}")
    return str(dec.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class MaterialSpec(BaseModel):
    """One material/size option recorded for a catalog entry."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    material_type: MaterialType = Field(alias="materialType")
    size: str

    @field_validator("size", mode="before")
    @classmethod
    def _two_decimals(cls, v) -> str:
        return format_size(v)


class CatalogEntry(BaseModel):
    """
    A catalog record as read from the store.

    The engine only reads these. Name and code are kept in their canonical
    upper-case form so comparisons never need to re-fold case.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    product_name: str = Field(default="", alias="productName")
    product_code: str = Field(default="", alias="productCode")
    materials: List[MaterialSpec] = Field(default_factory=list)

    @field_validator("product_name", "product_code", mode="before")
    @classmethod
    def _canonical_text(cls, v) -> str:
        if v is None:
            return ""
        return str(v).strip().upper()
