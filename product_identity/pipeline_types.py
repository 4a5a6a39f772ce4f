"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import CatalogEntry


class LookupField(str, Enum):
    NAME = "productName"
    CODE = "productCode"


class QueryKind(str, Enum):
    EQUALITY = "equality"
    PREFIX_RANGE = "prefix_range"


@dataclass(frozen=True)
class LookupKey:
    """One concrete store query planned for a single resolution."""

    field: LookupField
    kind: QueryKind
    value: str


@dataclass
class ScoredCandidate:
    """A merged catalog entry with its match scores."""

    entry: CatalogEntry
    name_score: int
    code_matched: bool
    total: int
    eligible: bool

    @property
    def name_matched(self) -> bool:
        return self.name_score > 0
