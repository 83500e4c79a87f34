import pytest

from core.human_ids import (
    derive_item_human_id,
    derive_location_human_id,
    ensure_item_human_id,
    ensure_location_human_id,
    extract_item_sequence,
    extract_location_sequence,
    generate_next_item_human_id,
    generate_next_location_human_id,
    generate_next_sub_location_human_id,
    is_item_human_id,
    is_location_human_id,
    letters_to_number,
    number_to_letters,
)


@pytest.mark.parametrize(
    "value, letters",
    [(1, "A"), (26, "Z"), (27, "AA"), (52, "AZ"), (53, "BA"), (702, "ZZ"), (703, "AAA")],
)
def test_number_to_letters(value, letters):
    assert number_to_letters(value) == letters
    assert letters_to_number(letters) == value


def test_number_to_letters_non_positive():
    assert number_to_letters(0) == "A"
    assert number_to_letters(-5) == "A"


def test_next_item_human_id():
    assert generate_next_item_human_id([]) == "ITM-0001"
    assert generate_next_item_human_id(["ITM-0009", "ITM-0010", None, "misc"]) == "ITM-0011"
    assert generate_next_item_human_id(["ITM-9999"]) == "ITM-10000"


def test_item_sequence_uses_trailing_digits():
    assert extract_item_sequence("ITM-0042") == 42
    assert extract_item_sequence("legacy-7") == 7
    assert extract_item_sequence("ITM-AUCE") is None


def test_is_item_human_id():
    assert is_item_human_id("ITM-0001")
    assert is_item_human_id(" itm-0001 ")
    assert not is_item_human_id("ITM-01")
    assert not is_item_human_id(None)


def test_item_ids_only_count_ascii_digits():
    assert not is_item_human_id("ITM-١٢٣٤")
    assert extract_item_sequence("ITM-١٢") is None
    assert generate_next_item_human_id(["ITM-١٢", "ITM-0003"]) == "ITM-0004"


def test_derived_item_human_id():
    assert derive_item_human_id("item-soysauce") == "ITM-AUCE"
    assert derive_item_human_id("ab") == "ITM-00AB"
    assert ensure_item_human_id("item-soysauce", "  ITM-0003 ") == "ITM-0003"
    assert ensure_item_human_id("item-soysauce", "") == "ITM-AUCE"


def test_next_location_human_id():
    assert generate_next_location_human_id([]) == "A"
    assert generate_next_location_human_id(["A", "B", "E"]) == "F"
    assert generate_next_location_human_id(["BK", "FL", "KT"]) == "KU"
    assert generate_next_location_human_id(["Z"]) == "AA"
    # non-letter IDs do not take part
    assert generate_next_location_human_id(["A", "LOC-0001", None, "3"]) == "B"


def test_location_sequence():
    assert extract_location_sequence("ab") == 28
    assert is_location_human_id("KT")
    assert not is_location_human_id("A1")
    assert not is_location_human_id("")


def test_derived_location_human_id():
    assert derive_location_human_id("loc-gion-register") == "LOC-STER"
    assert derive_location_human_id("") == "LOC-0001"
    assert ensure_location_human_id("loc-x", " ab ") == "AB"


def test_next_sub_location_human_id():
    assert generate_next_sub_location_human_id([]) == "01"
    assert generate_next_sub_location_human_id(["01", "02"]) == "03"
    assert generate_next_sub_location_human_id(["09", "shelf"]) == "10"
