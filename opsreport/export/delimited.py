"""
Delimited Text Export

Serializes report tables (headers + rows) into CSV-style text for download.
Values are human-entered (names, notes) and may legally contain the
delimiter, quotes or line breaks. Such fields are quoted and internal quotes
doubled; every other field, including an empty one, is written as is. A bare
carriage return counts as a line break.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Sequence, Tuple

from opsreport.aggregation.engine import GroupRollup

Table = Tuple[List[str], List[List[str]]]

QUOTE = '"'


def format_cell(value: Any) -> str:
    """
    Render one value as export text.

    Integral numbers drop the trailing .0, other floats keep at most two
    decimals, dates are ISO, enums use their value and None is empty.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def quote_field(text: str, delimiter: str = ",") -> str:
    """Quote a field that holds the delimiter, a quote, CR or LF; others pass through"""
    if any(ch in text for ch in (delimiter, QUOTE, "\r", "\n")):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def to_delimited_text(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    delimiter: str = ",",
) -> str:
    """
    Serialize a table to delimited text.

    Row order is kept as given. The output ends with exactly one newline
    after the last row (after the header line when there are no rows).
    Empty cells are never quoted, so a one-column row with an empty cell
    is an empty line.
    """
    lines = [delimiter.join(quote_field(format_cell(h), delimiter) for h in headers)]
    for row in rows:
        lines.append(delimiter.join(quote_field(format_cell(v), delimiter) for v in row))
    return "\n".join(lines) + "\n"


def rollup_table(
    rollups: Sequence[GroupRollup],
    key_header: str,
    columns: Sequence[Tuple[str, str]],
) -> Table:
    """
    Lay rollups out as an export table.

    Args:
        rollups: Rollups in display order
        key_header: Header of the first (group key) column
        columns: (header, value name) pairs; names resolve like
            GroupRollup.value, so totals, ratios and "count" all work
    """
    headers = [key_header] + [header for header, _ in columns]
    rows = [
        [rollup.key] + [format_cell(rollup.value(name)) for _, name in columns]
        for rollup in rollups
    ]
    return headers, rows
