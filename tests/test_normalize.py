from product_identity.normalize import (
    compact,
    core_code,
    has_abbreviation_prefix,
    is_plausible_code,
    name_words,
    pad_single_digits,
    strip_leading_zeros,
    strip_name_prefix,
    strip_suffix_letter,
    upper,
)


def test_upper_trims_and_folds_case():
    assert upper("  gmc-04 ") == "GMC-04"
    assert upper(None) == ""


def test_strip_leading_zeros_keeps_single_zero():
    assert strip_leading_zeros("GMC-04-04N") == "GMC-4-4N"
    assert strip_leading_zeros("100-007") == "100-7"
    assert strip_leading_zeros("0") == "0"
    assert strip_leading_zeros("A00") == "A0"


def test_pad_single_digits_only_touches_lone_digits():
    assert pad_single_digits("4-4N") == "04-04N"
    assert pad_single_digits("12-4") == "12-04"


def test_strip_suffix_letter_after_digit_only():
    assert strip_suffix_letter("4-4N") == "4-4"
    assert strip_suffix_letter("04-04R") == "04-04"
    assert strip_suffix_letter("S45123G") == "S45123"
    assert strip_suffix_letter("RING") == "RING"
    assert strip_suffix_letter("4-4") == "4-4"


def test_core_code_case_insensitive():
    assert core_code("s45123") == core_code("S45123") == "S45123"
    assert core_code(" gmc-06-06r ") == "GMC-6-6"


def test_core_code_idempotent():
    for raw in ["GMC-04-04N", "4NN", "0-0G", "  s0450r ", "ABC", "", "-04-"]:
        once = core_code(raw)
        assert core_code(once) == once


def test_is_plausible_code():
    assert is_plausible_code("4-4")
    assert is_plausible_code("AB1")
    assert is_plausible_code("A-B")
    assert not is_plausible_code("AB")
    assert not is_plausible_code("ABC")


def test_strip_name_prefix_literal_and_abbreviation():
    assert strip_name_prefix("GMC-04-04N", "GMC") == "04-04N"
    assert strip_name_prefix("GMC04-04N", "GMC") == "04-04N"
    # generic "<ABBREV>-<digits>" heuristic
    assert strip_name_prefix("GMC-4-4N") == "4-4N"
    assert strip_name_prefix("4-4N", "MALE CONNECTOR") == "4-4N"


def test_strip_name_prefix_leaves_non_prefixed_codes():
    assert strip_name_prefix("GMC", "GMC") == "GMC"
    assert strip_name_prefix("A-4") == "A-4"
    assert strip_name_prefix("GMC-A4") == "GMC-A4"
    assert has_abbreviation_prefix("GME-04-04")
    assert not has_abbreviation_prefix("04-04")


def test_strip_name_prefix_tries_names_in_order():
    assert strip_name_prefix("MALE-4-4", "", "MALE") == "4-4"
    # "GM" ends mid-segment, so the next name is tried
    assert strip_name_prefix("GMC-4-4", "GM", "GMC") == "4-4"
    assert strip_name_prefix("GMCX4", "GMC") == "GMCX4"


def test_name_words_and_compact():
    assert name_words("male connector_x-1") == ["MALE", "CONNECTOR", "X", "1"]
    assert name_words("") == []
    assert compact("male - connector") == "MALECONNECTOR"
