import asyncio

import pandas as pd

from product_identity.config import CatalogEntry
from product_identity.eval import classify, evaluate, read_gold_rows, summarize
from product_identity.resolver import ProductResolver
from product_identity.store import InMemoryCatalogStore


def test_classify_outcomes():
    assert classify("GMC-04-04N", "GMC-04-04N") == "hit"
    assert classify("GMC-04-04N", "GMC-06-06R") == "wrong"
    assert classify("GMC-04-04N", None) == "miss"
    assert classify("", "GMC-04-04N") == "false_positive"
    assert classify("", None) == "correct_reject"


def test_summarize_accuracy():
    s = summarize(["hit", "hit", "miss", "correct_reject"])
    assert s["total"] == 4
    assert s["hit"] == 2
    assert abs(s["accuracy"] - 0.75) < 1e-6
    assert summarize([])["accuracy"] == 0.0


def test_evaluate_against_memory_store(tmp_path):
    gold_path = tmp_path / "gold.csv"
    pd.DataFrame(
        {
            "productName": ["GMC", "GMC", "GMC"],
            "productCode": ["4-4N", "4-4", "9-9"],
            "expectedCode": ["GMC-04-04N", "", ""],
        }
    ).to_csv(gold_path, index=False)

    store = InMemoryCatalogStore(
        [
            CatalogEntry(id="e1", product_name="GMC", product_code="GMC-04-04N"),
            CatalogEntry(id="u", product_name="UNRELATED-PRODUCT", product_code="4-4"),
        ]
    )
    rows = read_gold_rows(gold_path)
    assert rows[1] == ("GMC", "4-4", "")

    scores = asyncio.run(evaluate(ProductResolver(store), rows))

    assert scores["hit"] == 1
    # "4-4" still matches GMC-04-04N by name + normalised code
    assert scores["false_positive"] == 1
    assert scores["correct_reject"] == 1
