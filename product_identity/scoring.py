from __future__ import annotations

"""
Heuristic matcher / scorer for merged catalog candidates.

Per candidate:

* name score (0-100)
    100 exact, 80 stored extends query, 70 query extends stored,
    50 substring either way, 30 a shared word (or word-prefix), else 0.

* code match (bool)
    Both codes lose any embedded product-name prefix (stored name first,
    then query name, then the generic "<ABBREV>-<digits>" heuristic) and are
    compared by core_code. Exact after normalisation, or no match.

* total
    name score + 100 for a code match + 50 when both matched.

Acceptance gate: a code match alone is not enough, because normalised codes
are short and generic ("4-4"). The candidate also needs some name
correlation; see passes_gate.
"""

from typing import Iterable, List, Optional, Set

from . import config
from .config import CatalogEntry
from .normalize import (
    compact,
    core_code,
    name_words,
    strip_name_prefix,
    upper,
)
from .pipeline_types import ScoredCandidate


# ---------------------------------------------------------------------------
# Name score
# ---------------------------------------------------------------------------


def _words_relate(a: str, b: str) -> bool:
    if a == b:
        return True
    if min(len(a), len(b)) < config.MIN_WORD_PREFIX_LEN:
        return False
    return a.startswith(b) or b.startswith(a)


def name_score(stored_name: str, query_name: str) -> int:
    stored = upper(stored_name)
    query = upper(query_name)
    if not stored or not query:
        return 0
    if stored == query:
        return config.NAME_SCORE_EXACT
    if stored.startswith(query):
        return config.NAME_SCORE_STORED_EXTENDS
    if query.startswith(stored):
        return config.NAME_SCORE_QUERY_EXTENDS
    if query in stored or stored in query:
        return config.NAME_SCORE_SUBSTRING

    stored_words = name_words(stored)
    for qw in name_words(query):
        if any(_words_relate(qw, sw) for sw in stored_words):
            return config.NAME_SCORE_WORD
    return 0


# ---------------------------------------------------------------------------
# Code match
# ---------------------------------------------------------------------------


def comparable_code(code: str, stored_name: str, query_name: str) -> str:
    """core_code of a code after removing any embedded product-name prefix."""
    return core_code(strip_name_prefix(upper(code), upper(stored_name), upper(query_name)))


def codes_match(
    stored_code: str,
    stored_name: str,
    query_code: str,
    query_name: str,
) -> bool:
    if not upper(stored_code) or not upper(query_code):
        return False
    left = comparable_code(query_code, stored_name, query_name)
    right = comparable_code(stored_code, stored_name, query_name)
    return bool(left) and left == right


# ---------------------------------------------------------------------------
# Acceptance gate
# ---------------------------------------------------------------------------


def _compact_names_relate(stored_name: str, query_name: str) -> bool:
    a, b = compact(stored_name), compact(query_name)
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if len(shorter) < config.MIN_COMPACT_NAME_LEN:
        return False
    return shorter in longer


def _qualified_bare_code(entry: CatalogEntry, query_name: str, query_code: str) -> bool:
    """
    The query code spelled out its name ("GMC-4-4N" with name "GMC") and
    the stored code carries no product prefix of its own ("4-4N").
    """
    if not query_name or not query_code.startswith(query_name + config.CODE_SEPARATOR):
        return False
    stored_code = entry.product_code
    return strip_name_prefix(stored_code, entry.product_name) == stored_code


def passes_gate(
    entry: CatalogEntry,
    query_name: str,
    query_code: str,
    score: int,
    code_matched: bool,
) -> bool:
    if not code_matched:
        return False
    if score > 0:
        return True

    qn, qc = upper(query_name), upper(query_code)
    if qn and qn in entry.product_code:
        return True
    if qc and qc in entry.product_name:
        return True
    if qn and _compact_names_relate(entry.product_name, qn):
        return True
    return _qualified_bare_code(entry, qn, qc)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def total_score(score: int, code_matched: bool) -> int:
    total = score
    if code_matched:
        total += config.CODE_MATCH_BONUS
        if score > 0:
            total += config.BOTH_MATCH_BONUS
    return total


def score_candidate(entry: CatalogEntry, query_name: str, query_code: str) -> ScoredCandidate:
    ns = name_score(entry.product_name, query_name)
    matched = codes_match(entry.product_code, entry.product_name, query_code, query_name)
    return ScoredCandidate(
        entry=entry,
        name_score=ns,
        code_matched=matched,
        total=total_score(ns, matched),
        eligible=passes_gate(entry, query_name, query_code, ns, matched),
    )


def score_candidates(
    entries: Iterable[CatalogEntry],
    query_name: str,
    query_code: str,
) -> List[ScoredCandidate]:
    return [score_candidate(e, query_name, query_code) for e in entries]


def select_best(
    scored: Iterable[ScoredCandidate],
    excluded: Optional[Set[str]] = None,
) -> Optional[ScoredCandidate]:
    """
    Highest total among eligible, non-excluded candidates.

    Equal totals go to the lexicographically smallest entry id, so the pick
    does not depend on the order the store returned rows in.
    """
    excluded = excluded or set()
    pool = [c for c in scored if c.eligible and c.entry.id not in excluded]
    if not pool:
        return None
    return min(pool, key=lambda c: (-c.total, c.entry.id))
