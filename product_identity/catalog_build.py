from __future__ import annotations

import re
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import CATALOG_SNAPSHOT_PATH, CatalogEntry, MaterialSpec, MaterialType, format_size
from .store import InMemoryCatalogStore


# ---------------------------
# Column detection / standardization
# ---------------------------

# Exports come from spreadsheets maintained by hand, so several header
# spellings (English, camelCase, Korean) are accepted.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "id": [
        "id",
        "ID",
        "doc_id",
        "Document ID",
    ],
    "product_name": [
        "productName",
        "product_name",
        "Product Name",
        "Name",
        "제품명",
    ],
    "product_code": [
        "productCode",
        "product_code",
        "Product Code",
        "Code",
        "제품코드",
    ],
    "material_type_raw": [
        "materialType",
        "material_type",
        "Material Type",
        "Material",
        "소재",
    ],
    "size_raw": [
        "size",
        "Size",
        "Material Size",
        "사이즈",
    ],
}

OUTPUT_COLUMNS = ["id", "product_name", "product_code", "material_type", "size"]


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.info("Standardizing columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)

    missing = [c for c in ("product_name", "product_code") if c not in df_std.columns]
    if missing:
        logger.warning("Raw catalog is missing columns: {}", missing)
    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

_HEXA_TOKENS = {"HEXA", "HEX", "H", "HEXAGON", "육각"}
_ROUND_TOKENS = {"ROUND", "RND", "R", "원형", "환봉"}


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_material_type(value) -> Optional[MaterialType]:
    """
    Map a free-form material label onto MaterialType.

    'hex', 'HEXA', '육각' -> Hexa; 'round', 'RND', '원형' -> Round; else None.
    """
    if _is_blank(value):
        return None
    token = re.sub(r"\s+", "", str(value)).upper()
    if token in _HEXA_TOKENS:
        return MaterialType.HEXA
    if token in _ROUND_TOKENS:
        return MaterialType.ROUND
    return None


def parse_size(value) -> Optional[str]:
    """
    Parse a size cell into a 2-decimal string.

    Units and stray text are dropped: '6 mm' -> '6.00', 4.5 -> '4.50'.
    """
    if _is_blank(value):
        return None
    if isinstance(value, (int, float)):
        return format_size(value)
    m = re.search(r"\d+(?:\.\d+)?", str(value))
    if not m:
        return None
    return format_size(m.group(0))


def _clean_text(value) -> str:
    if _is_blank(value):
        return ""
    return re.sub(r"\s+", " ", str(value)).strip().upper()


# ---------------------------
# Catalog normalization
# ---------------------------

def normalize_catalog_df(df_raw: pd.DataFrame) -> List[CatalogEntry]:
    """
    Turn a long-format table (one row per material option) into entries.

    Rows sharing an id, or (name, code) when no id column exists, are
    grouped into one entry; materials keep their row order. Rows with
    neither a name nor a code are dropped. Missing ids become 'row-<n>'
    where n is the position of the group's first row.
    """
    logger.info("Normalizing catalog dataframe with {} raw rows", len(df_raw))
    df = _standardize_columns(df_raw.copy())

    groups: "OrderedDict[object, dict]" = OrderedDict()
    dropped = 0
    for pos, row in enumerate(df.to_dict("records")):
        name = _clean_text(row.get("product_name"))
        code = _clean_text(row.get("product_code"))
        if not name and not code:
            dropped += 1
            continue

        raw_id = row.get("id")
        doc_id = None if _is_blank(raw_id) else str(raw_id).strip()
        group_key = doc_id or (name, code)
        group = groups.get(group_key)
        if group is None:
            group = {
                "id": doc_id or f"row-{pos}",
                "product_name": name,
                "product_code": code,
                "materials": [],
            }
            groups[group_key] = group

        material = parse_material_type(row.get("material_type_raw"))
        size = parse_size(row.get("size_raw"))
        if material is None and size is None:
            continue
        if material is None or size is None:
            logger.warning(
                "Row {} ({} / {}) has an incomplete material: type={!r} size={!r}",
                pos,
                name,
                code,
                row.get("material_type_raw"),
                row.get("size_raw"),
            )
            continue
        group["materials"].append(MaterialSpec(material_type=material, size=size))

    entries = [CatalogEntry(**g) for g in groups.values()]
    if dropped:
        logger.warning("Dropped {} rows without product name or code", dropped)
    logger.info("Catalog normalization complete. Entries: {}", len(entries))
    return entries


def entries_to_frame(entries: List[CatalogEntry]) -> pd.DataFrame:
    """Inverse of normalize_catalog_df: one row per material (or per entry if none)."""
    rows = []
    for e in entries:
        if not e.materials:
            rows.append([e.id, e.product_name, e.product_code, None, None])
        for m in e.materials:
            rows.append([e.id, e.product_name, e.product_code, m.material_type.value, m.size])
    return pd.DataFrame(rows, columns=OUTPUT_COLUMNS)


# ---------------------------
# IO helpers
# ---------------------------

def load_catalog_table(path: Path) -> pd.DataFrame:
    """Read a catalog export (.csv, .xlsx/.xls or .parquet)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    logger.info("Loading catalog table from {}", path)
    ext = path.suffix.lower()
    if ext in (".xlsx", ".xls"):
        df = pd.read_excel(path, dtype=str)
    elif ext == ".parquet":
        df = pd.read_parquet(path)
    else:
        # codes like "04-04" must stay strings
        df = pd.read_csv(path, encoding="utf-8", dtype=str)
    logger.info("Loaded {} rows from catalog table", len(df))
    return df


def load_catalog_entries(path: Path = CATALOG_SNAPSHOT_PATH) -> List[CatalogEntry]:
    return normalize_catalog_df(load_catalog_table(path))


def build_memory_store(path: Path = CATALOG_SNAPSHOT_PATH) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(load_catalog_entries(path))


def write_catalog_snapshot(
    raw_path: Path,
    output_path: Path = CATALOG_SNAPSHOT_PATH,
) -> Path:
    """Load a raw export, normalize it and write the canonical CSV snapshot."""
    entries = load_catalog_entries(raw_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    entries_to_frame(entries).to_csv(output_path, index=False, encoding="utf-8")
    logger.info("Catalog snapshot written to {} ({} entries)", output_path, len(entries))
    return output_path


if __name__ == "__main__":
    # python -m product_identity.catalog_build data/raw_export.xlsx
    import sys

    write_catalog_snapshot(Path(sys.argv[1]))
