"""
CSV reading for bulk imports and CSV writing for exports.

Lines are split first (CRLF or LF), blank lines dropped, then each line is
split into fields. A field may be wrapped in double quotes to carry a comma,
which is how ``write_csv`` emits such values; a quoted value spanning several
lines is not supported.
"""
import csv
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

_LINE_BREAK = re.compile(r"\r?\n")
_NEEDS_QUOTES = re.compile(r'[",\r\n]')
_BOM = "\ufeff"

Row = Dict[str, Optional[str]]


@dataclass
class ParsedCsv:
    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)


def _trim(value: str) -> str:
    return value.strip().strip(_BOM).strip()


def _split_line(line: str) -> List[str]:
    # csv.reader gives plain comma splitting for unquoted lines
    try:
        fields = next(csv.reader([line], skipinitialspace=True), [])
    except csv.Error:
        # stray carriage return inside a field
        return [_trim(f) for f in line.split(",")]
    return [_trim(f) for f in fields]


def parse_csv(text: Optional[str]) -> ParsedCsv:
    lines = [line for line in _LINE_BREAK.split((text or "").lstrip(_BOM)) if _trim(line)]
    if not lines:
        return ParsedCsv()

    headers = _split_line(lines[0])
    rows: List[Row] = []
    for line in lines[1:]:
        values = _split_line(line)
        rows.append({
            header: values[i] if i < len(values) else None
            for i, header in enumerate(headers)
        })
    return ParsedCsv(headers=headers, rows=rows)


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    text = str(value)
    if _NEEDS_QUOTES.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def write_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    lines = [",".join(_cell(h) for h in headers)]
    for row in rows:
        lines.append(",".join(_cell(v) for v in row))
    return "\r\n".join(lines)
