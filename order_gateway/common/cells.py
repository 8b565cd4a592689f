"""Helpers for reading and writing positional spreadsheet rows.

Rows come back from the Sheets API as lists of strings with trailing empty
cells trimmed, so every accessor tolerates short rows.
"""
import math
import re
from typing import Any, Mapping, Optional, Sequence

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def cell(row: Sequence[Any], index: int) -> Optional[str]:
    if index < len(row):
        return row[index]
    return None


def parse_float(value: Any, default: float = math.nan) -> float:
    """Parse the leading decimal number of a cell, or return ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return default
    m = _FLOAT_PREFIX.match(str(value))
    if not m:
        return default
    return float(m.group(0))


def parse_int(value: Any, default: int = 0) -> int:
    """Parse the leading integer of a cell ("2.5" -> 2), or return ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if value is None:
        return default
    m = _INT_PREFIX.match(str(value))
    if not m:
        return default
    return int(m.group(0))


def to_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def json_float(value: float) -> Optional[float]:
    # NaN/inf are not valid JSON
    if value is None or not math.isfinite(value):
        return None
    return value


def decode_row(row: Sequence[Any], columns: Mapping[str, int]) -> dict:
    return {name: cell(row, index) for name, index in columns.items()}


def encode_row(record: Mapping[str, Any], columns: Mapping[str, int]) -> list:
    width = max(columns.values()) + 1
    out = [""] * width
    for name, index in columns.items():
        out[index] = to_cell(record.get(name))
    return out
