"""
Human-readable identifiers.

Three independent sequence spaces:

- items: ``ITM-0001``, ``ITM-0002``, ... (numeric suffix, 4 digits)
- locations: ``A`` .. ``Z``, ``AA``, ``AB``, ... (bijective base-26, unique per store)
- sub-locations: ``01``, ``02``, ... (2 digits, numbered per parent location)

The ``generate_next_*`` helpers only propose the next free slot for a snapshot;
storing it is up to the caller.
"""
import re
from typing import Iterable, Optional

ITEM_PREFIX = "ITM-"
ITEM_PAD = 4
LOCATION_FALLBACK_PREFIX = "LOC-"
LOCATION_FALLBACK_PAD = 4
SUB_LOCATION_PAD = 2

_ITEM_PATTERN = re.compile(r"^ITM-[0-9]{4}$")
_TRAILING_DIGITS = re.compile(r"([0-9]+)$")
_LETTERS = re.compile(r"[A-Z]+")
_DIGITS = re.compile(r"[0-9]+")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def _key_tail(key: str, width: int) -> str:
    cleaned = _NON_ALNUM.sub("", str(key or "")).upper()
    return cleaned[-width:]


# --- items ---

def is_item_human_id(value: Optional[str]) -> bool:
    return bool(value) and bool(_ITEM_PATTERN.match(value.strip().upper()))


def extract_item_sequence(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    m = _TRAILING_DIGITS.search(value.strip())
    if not m:
        return None
    return int(m.group(1))


def format_item_human_id(sequence: int) -> str:
    return f"{ITEM_PREFIX}{str(sequence).zfill(ITEM_PAD)}"


def generate_next_item_human_id(existing: Iterable[Optional[str]]) -> str:
    sequences = [s for s in (extract_item_sequence(v) for v in existing) if s is not None]
    return format_item_human_id(max(sequences, default=0) + 1)


def derive_item_human_id(key: str) -> str:
    """Fallback for stored items that never got a human ID."""
    return f"{ITEM_PREFIX}{_key_tail(key, ITEM_PAD).rjust(ITEM_PAD, '0')}"


def ensure_item_human_id(key: str, human_id: Optional[str]) -> str:
    if human_id and human_id.strip():
        return human_id.strip()
    return derive_item_human_id(key)


# --- locations ---

def letters_to_number(letters: str) -> int:
    result = 0
    for ch in letters:
        result = result * 26 + (ord(ch) - ord("A") + 1)
    return result


def number_to_letters(value: int) -> str:
    # bijective base-26: there is no zero digit, 26 -> Z, 27 -> AA
    if value <= 0:
        return "A"
    out = []
    n = value
    while n > 0:
        n -= 1
        out.append(chr(ord("A") + n % 26))
        n //= 26
    return "".join(reversed(out))


def extract_location_sequence(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    candidate = value.strip().upper()
    if not _LETTERS.fullmatch(candidate):
        return None
    return letters_to_number(candidate)


def is_location_human_id(value: Optional[str]) -> bool:
    return extract_location_sequence(value) is not None


def generate_next_location_human_id(existing: Iterable[Optional[str]]) -> str:
    sequences = [s for s in (extract_location_sequence(v) for v in existing) if s is not None]
    return number_to_letters(max(sequences, default=0) + 1)


def derive_location_human_id(key: str) -> str:
    tail = _key_tail(key, LOCATION_FALLBACK_PAD) or "0001"
    return f"{LOCATION_FALLBACK_PREFIX}{tail.rjust(LOCATION_FALLBACK_PAD, '0')}"


def ensure_location_human_id(key: str, human_id: Optional[str]) -> str:
    if human_id and human_id.strip():
        return human_id.strip().upper()
    return derive_location_human_id(key)


# --- sub-locations ---

def extract_sub_location_sequence(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    candidate = value.strip()
    if not _DIGITS.fullmatch(candidate):
        return None
    return int(candidate)


def is_sub_location_human_id(value: Optional[str]) -> bool:
    return extract_sub_location_sequence(value) is not None


def generate_next_sub_location_human_id(siblings: Iterable[Optional[str]]) -> str:
    """Next ID among the sub-locations of a single parent location."""
    sequences = [s for s in (extract_sub_location_sequence(v) for v in siblings) if s is not None]
    return str(max(sequences, default=0) + 1).zfill(SUB_LOCATION_PAD)
