from __future__ import annotations

"""
String normalisation helpers shared by the key planner and the scorer.

Catalog rows record the same product under many superficially different
strings: inconsistent zero-padding ("04-04" vs "4-4"), an optional finish
letter ("4-4N", "4-4R"), and product-name abbreviations baked into the code
field ("GMC-04-04N"). Everything here is a pure function over str so the
planner and the scorer always see the same view of a code.

Public helpers:

* upper(s) -> str
    Case-fold to upper case and trim.

* strip_leading_zeros(s) -> str
    "GMC-04-04N" -> "GMC-4-4N"

* strip_suffix_letter(s) -> str
    "4-4N" -> "4-4"

* core_code(s) -> str
    Canonical comparison form of a code (all of the above).

* strip_name_prefix(code, *names) -> str
    Remove an embedded product-name segment from a code.
"""

import re
from typing import List

from . import config

_LEADING_ZEROS_RE = re.compile(r"(?<!\d)0+(?=\d)")
_SINGLE_DIGIT_RE = re.compile(r"(?<!\d)(\d)(?!\d)")
_WORD_SPLIT_RE = re.compile(config.NAME_WORD_SEPARATORS)
_COMPACT_RE = re.compile(r"[\s\-_]+")


# ---------------------------------------------------------------------------
# Case / padding / suffix
# ---------------------------------------------------------------------------


def upper(s: str | None) -> str:
    if s is None:
        return ""
    if not isinstance(s, str):
        s = str(s)
    return s.strip().upper()


def strip_leading_zeros(s: str) -> str:
    """Drop leading zeros from every digit run, keeping at least one digit."""
    return _LEADING_ZEROS_RE.sub("", s)


def pad_single_digits(s: str) -> str:
    """Inverse of strip_leading_zeros for one-digit runs: "4-4N" -> "04-04N"."""
    return _SINGLE_DIGIT_RE.sub(r"0\1", s)


def has_suffix_letter(s: str) -> bool:
    # Only a letter directly after a digit is a finish suffix; "RING" keeps its G.
    return len(s) >= 2 and s[-1] in config.SUFFIX_LETTERS and s[-2].isdigit()


def strip_suffix_letter(s: str) -> str:
    if has_suffix_letter(s):
        return s[:-1]
    return s


def core_code(s: str | None) -> str:
    """
    Canonical comparison form of a code.

    Idempotent: the suffix is only removed after a digit, so the result
    always ends in a digit or in a non-suffix character.
    """
    return strip_suffix_letter(strip_leading_zeros(upper(s)))


def is_plausible_code(s: str) -> bool:
    """A code fragment worth querying: >= 3 chars and a digit or a hyphen."""
    if len(s) < config.MIN_CODE_LEN:
        return False
    return any(ch.isdigit() for ch in s) or config.CODE_SEPARATOR in s


# ---------------------------------------------------------------------------
# Name-prefix handling
# ---------------------------------------------------------------------------


def _strip_literal_prefix(code: str, name: str) -> str | None:
    if not name or not code.startswith(name):
        return None
    rest = code[len(name):]
    # the name must end on a segment boundary: "GM" does not strip "GMC-4-4"
    if rest and not (rest.startswith(config.CODE_SEPARATOR) or rest[0].isdigit()):
        return None
    if rest.startswith(config.CODE_SEPARATOR):
        rest = rest[len(config.CODE_SEPARATOR):]
    return rest or None


def _strip_abbreviation(code: str) -> str | None:
    parts = code.split(config.CODE_SEPARATOR)
    if len(parts) < 2:
        return None
    head, second = parts[0], parts[1]
    if len(head) >= 2 and head.isalpha() and second[:1].isdigit():
        return config.CODE_SEPARATOR.join(parts[1:])
    return None


def has_abbreviation_prefix(code: str) -> bool:
    """True when the code looks like "<ABBREV>-<digits...>"."""
    return _strip_abbreviation(code) is not None


def strip_name_prefix(code: str, *names: str) -> str:
    """
    Remove a leading name-like segment from ``code``.

    Each of ``names`` is tried in order as a literal prefix; it must be
    followed by "-", a digit or nothing, so "GM" never strips "GMC-4-4".
    If none applies, an alphabetic first segment followed by a segment
    starting with a digit is treated as an embedded product-name
    abbreviation: "GMC-04-04N" -> "04-04N".

    A code that is nothing but the name is returned unchanged.
    """
    for name in names:
        stripped = _strip_literal_prefix(code, name)
        if stripped is not None:
            return stripped
    stripped = _strip_abbreviation(code)
    return stripped if stripped is not None else code


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


def name_words(s: str) -> List[str]:
    return [w for w in _WORD_SPLIT_RE.split(upper(s)) if w]


def compact(s: str) -> str:
    """Upper form without whitespace, hyphens or underscores."""
    return _COMPACT_RE.sub("", upper(s))
