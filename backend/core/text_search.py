"""
Search text normalization.

Folds width, case, katakana/hiragana and Japanese numeral variants so that a
query typed on any keyboard matches the stored names.
"""
import re
import unicodedata
from typing import Iterable, List, Optional

_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6
_KANA_OFFSET = 0x60

_NUMERAL_DIGITS = {
    "〇": "0", "零": "0",
    "一": "1", "壱": "1", "弌": "1",
    "二": "2", "弐": "2", "貳": "2",
    "三": "3", "参": "3", "參": "3",
    "四": "4", "肆": "4",
    "五": "5", "伍": "5",
    "六": "6", "陸": "6",
    "七": "7", "柒": "7",
    "八": "8", "捌": "8",
    "九": "9", "玖": "9",
}


def _fold_char(ch: str) -> str:
    code = ord(ch)
    if _KATAKANA_START <= code <= _KATAKANA_END:
        return chr(code - _KANA_OFFSET)
    return _NUMERAL_DIGITS.get(ch, ch)


def normalize_search_text(text: Optional[str]) -> str:
    if not text:
        return ""
    folded = unicodedata.normalize("NFKC", text).lower()
    return "".join(_fold_char(ch) for ch in folded)


def create_search_terms(query: Optional[str]) -> List[str]:
    return normalize_search_text(query).split()


def matches_search(values: Iterable[Optional[str]], terms: List[str]) -> bool:
    """True when every term is a substring of the joined, normalized values.

    An empty term list matches everything; a candidate with no text never
    matches a non-empty query.
    """
    if not terms:
        return True
    haystack = " ".join(
        normalize_search_text(v) for v in values if isinstance(v, str) and v
    )
    if not haystack:
        return False
    return all(term in haystack for term in terms)


def fold_item_name(name: Optional[str]) -> str:
    """Lowercase, whitespace-folded item name used for duplicate detection."""
    return re.sub(r"\s+", "_", (name or "").lower())
