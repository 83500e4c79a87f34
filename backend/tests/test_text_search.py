import pytest

from core.text_search import create_search_terms, fold_item_name, matches_search, normalize_search_text


def test_normalize_folds_width_and_case():
    assert normalize_search_text("ＣＯＦＦＥＥ") == "coffee"
    assert normalize_search_text("Coffee") == "coffee"


def test_normalize_katakana_to_hiragana():
    assert normalize_search_text("コーヒー") == "こーひー"
    # half-width katakana goes through NFKC first
    assert normalize_search_text("ｺｰﾋｰ") == "こーひー"


def test_normalize_kanji_numerals():
    assert normalize_search_text("三階") == "3階"
    assert normalize_search_text("弐番") == "2番"


@pytest.mark.parametrize(
    "text",
    ["コーヒー豆", "ＡＢＣ１２３", "ｺｰﾋｰ", "三階", "ヴァ", "mixed カナ 弐", "ガラス　ケース"],
)
def test_normalize_is_idempotent(text):
    once = normalize_search_text(text)
    assert normalize_search_text(once) == once


def test_normalize_small_kana_and_full_width_digits():
    assert normalize_search_text("ァ") == normalize_search_text("ぁ")
    assert normalize_search_text("３") == normalize_search_text("3")


def test_normalize_empty():
    assert normalize_search_text(None) == ""
    assert normalize_search_text("") == ""


def test_create_search_terms_splits_on_whitespace():
    assert create_search_terms("  Coffee   豆 ") == ["coffee", "豆"]
    assert create_search_terms("コーヒー　ブラジル") == ["こーひー", "ぶらじる"]
    assert create_search_terms(None) == []


def test_matches_search_requires_every_term():
    values = ["コーヒー豆（ブラジル）", "Coffee Beans (Brazil)", None]
    assert matches_search(values, create_search_terms("こーひー ぶらじる"))
    assert matches_search(values, create_search_terms("COFFEE brazil"))
    assert not matches_search(values, create_search_terms("こーひー えちおぴあ"))


def test_matches_search_empty_cases():
    assert matches_search([], [])
    assert matches_search([None], [])
    assert not matches_search([None, ""], ["a"])


def test_fold_item_name():
    assert fold_item_name("Coffee  Beans") == "coffee_beans"
    assert fold_item_name(" Tea\tBag ") == "_tea_bag_"
    assert fold_item_name(None) == ""
