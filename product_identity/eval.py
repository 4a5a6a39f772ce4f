# product_identity/eval.py
from __future__ import annotations

import argparse
import asyncio
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .catalog_build import build_memory_store
from .normalize import upper
from .resolver import ProductResolver

OUTCOMES = ("hit", "wrong", "miss", "false_positive", "correct_reject")

# ---------- IO helpers ----------

def _read_any(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    ext = path.suffix.lower()
    if ext in [".xlsx", ".xls"]:
        df = pd.read_excel(path, dtype=str)
    else:
        df = pd.read_csv(path, encoding="utf-8", dtype=str)
    cols = {c.lower(): c for c in df.columns}
    needed = {"productname": "productName", "productcode": "productCode", "expectedcode": "expectedCode"}
    missing = [v for k, v in needed.items() if k not in cols]
    if missing:
        raise ValueError(f"Expected columns {list(needed.values())}. Found: {list(df.columns)}")
    df = df.rename(columns={cols[k]: v for k, v in needed.items()})
    return df.fillna("")

def read_gold_rows(path: Path) -> List[Tuple[str, str, str]]:
    """(productName, productCode, expectedCode) triples; expectedCode may be ''."""
    df = _read_any(path)
    return [
        (str(r["productName"]), str(r["productCode"]), upper(r["expectedCode"]))
        for r in df.to_dict("records")
    ]

# ---------- metrics ----------

def classify(expected_code: str, predicted_code: Optional[str]) -> str:
    if expected_code:
        if predicted_code is None:
            return "miss"
        return "hit" if predicted_code == expected_code else "wrong"
    return "correct_reject" if predicted_code is None else "false_positive"

def summarize(outcomes: Iterable[str]) -> Dict[str, float]:
    counts = Counter(outcomes)
    n = sum(counts.values())
    summary: Dict[str, float] = {k: float(counts.get(k, 0)) for k in OUTCOMES}
    summary["total"] = float(n)
    summary["accuracy"] = (counts["hit"] + counts["correct_reject"]) / n if n else 0.0
    return summary

async def evaluate(
    resolver: ProductResolver,
    rows: Iterable[Tuple[str, str, str]],
) -> Dict[str, float]:
    outcomes: List[str] = []
    for name, code, expected in rows:
        entry = await resolver.resolve_entry(name, code)
        outcomes.append(classify(expected, entry.product_code if entry else None))
    return summarize(outcomes)

# ---------- CLI ----------

def main():
    ap = argparse.ArgumentParser(description="Offline accuracy of the product resolver")
    ap.add_argument("--catalog", type=Path, required=True,
                    help="Catalog export (.csv / .xlsx / .parquet)")
    ap.add_argument("--gold", type=Path, required=True,
                    help="CSV/XLSX with productName, productCode, expectedCode")
    args = ap.parse_args()

    resolver = ProductResolver(build_memory_store(args.catalog))
    scores = asyncio.run(evaluate(resolver, read_gold_rows(args.gold)))
    print(f"Rows: {int(scores['total'])}")
    for k in OUTCOMES:
        print(f"{k}: {int(scores[k])}")
    print(f"Accuracy: {scores['accuracy']:.4f}")

if __name__ == "__main__":
    main()
