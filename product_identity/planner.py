from __future__ import annotations
"""
Candidate key planner.

The catalog has no single canonical key, so instead of one clever index we
issue many cheap, narrow lookups and let the merger / scorer reconcile the
overlap. Each kind of lookup is one row of PLANNER_RULES; a new catalog quirk
is handled by adding a row, not by touching the scorer.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, NamedTuple, Set, Tuple

from loguru import logger

from . import config
from .normalize import (
    core_code,
    has_suffix_letter,
    is_plausible_code,
    pad_single_digits,
    strip_leading_zeros,
    strip_name_prefix,
    strip_suffix_letter,
    upper,
)
from .pipeline_types import LookupField, LookupKey, QueryKind


@dataclass(frozen=True)
class QueryForms:
    """Normalised views of one raw (name, code) query."""

    name: str
    code: str
    code_valid: bool
    bare_code: str  # code with an embedded name / abbreviation removed

    @classmethod
    def from_raw(cls, product_name: str | None, product_code: str | None) -> "QueryForms":
        name = upper(product_name)
        code = upper(product_code)
        bare = strip_name_prefix(code, name) if code else ""
        return cls(
            name=name,
            code=code,
            code_valid=is_plausible_code(code),
            bare_code=bare,
        )

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.code


class PlannerRule(NamedTuple):
    name: str
    field: LookupField
    kind: QueryKind
    transform: Callable[[QueryForms], Iterable[str]]


# ---------------------------
# Rule transforms
# ---------------------------

def _name_exact(q: QueryForms) -> Iterable[str]:
    if len(q.name) >= config.MIN_NAME_KEY_LEN:
        yield q.name


def _name_initial(q: QueryForms) -> Iterable[str]:
    if len(q.name) >= config.MIN_NAME_INITIAL_LEN:
        yield q.name[0]


def _code_exact(q: QueryForms) -> Iterable[str]:
    if q.code_valid:
        yield q.code


def _code_core(q: QueryForms) -> Iterable[str]:
    if q.code_valid:
        yield core_code(q.code)


def _code_padded(q: QueryForms) -> Iterable[str]:
    if q.code_valid:
        yield pad_single_digits(q.code)


def _code_unsuffixed(q: QueryForms) -> Iterable[str]:
    if q.code_valid and has_suffix_letter(q.code):
        base = strip_suffix_letter(q.code)
        yield base
        yield strip_leading_zeros(base)


def _code_unprefixed(q: QueryForms) -> Iterable[str]:
    # "GMC-4-4N" typed against rows that store the bare "4-4N"
    if q.code_valid and q.bare_code != q.code:
        yield q.bare_code
        yield core_code(q.bare_code)
        yield pad_single_digits(q.bare_code)


def _code_embedded(q: QueryForms) -> Iterable[str]:
    if q.code_valid:
        base = strip_suffix_letter(q.code)
        yield base
        # stored codes ending in "-<base>" sort under the leading-hyphen prefix
        yield config.CODE_SEPARATOR + base


def _compound(q: QueryForms) -> Iterable[str]:
    if not q.name or not q.code_valid:
        return
    bare = q.bare_code
    unsuffixed = strip_suffix_letter(bare)
    variants = (
        bare,
        pad_single_digits(bare),
        unsuffixed,
        pad_single_digits(unsuffixed),
        strip_leading_zeros(bare),
        core_code(bare),
    )
    for variant in variants:
        yield f"{q.name}{config.CODE_SEPARATOR}{variant}"


PLANNER_RULES: Tuple[PlannerRule, ...] = (
    PlannerRule("name_exact", LookupField.NAME, QueryKind.EQUALITY, _name_exact),
    PlannerRule("name_prefix", LookupField.NAME, QueryKind.PREFIX_RANGE, _name_exact),
    PlannerRule("name_initial", LookupField.NAME, QueryKind.PREFIX_RANGE, _name_initial),
    PlannerRule("code_exact", LookupField.CODE, QueryKind.EQUALITY, _code_exact),
    PlannerRule("code_core", LookupField.CODE, QueryKind.EQUALITY, _code_core),
    PlannerRule("code_padded", LookupField.CODE, QueryKind.EQUALITY, _code_padded),
    PlannerRule("code_unsuffixed", LookupField.CODE, QueryKind.EQUALITY, _code_unsuffixed),
    PlannerRule("code_unprefixed", LookupField.CODE, QueryKind.EQUALITY, _code_unprefixed),
    PlannerRule("code_embedded", LookupField.CODE, QueryKind.PREFIX_RANGE, _code_embedded),
    PlannerRule("compound", LookupField.CODE, QueryKind.EQUALITY, _compound),
)


# ---------------------------
# Public API
# ---------------------------

def plan_lookup_keys(
    product_name: str | None,
    product_code: str | None,
    rules: Iterable[PlannerRule] = PLANNER_RULES,
) -> List[LookupKey]:
    """
    Turn a raw (name, code) query into an ordered, de-duplicated key list.

    Every rule that applies fires; keys come out in rule order and the first
    occurrence of a (field, kind, value) triple wins.
    """
    forms = QueryForms.from_raw(product_name, product_code)
    if forms.is_empty:
        return []

    keys: List[LookupKey] = []
    seen: Set[LookupKey] = set()
    for rule in rules:
        for value in rule.transform(forms):
            if not value:
                continue
            key = LookupKey(field=rule.field, kind=rule.kind, value=value)
            if key in seen:
                continue
            seen.add(key)
            keys.append(key)

    logger.debug(
        "Planned {} lookup keys for name={!r} code={!r}",
        len(keys),
        forms.name,
        forms.code,
    )
    return keys
