"""
Converters - Move property tables to and from JSON and CSV.

Every format goes both ways:
  - to_json / from_json
  - to_csv / from_csv

Only the table's own pairs are exported unless ``resolved=True``, which
flattens the defaults chain into the output.
"""

from __future__ import annotations

import csv
import io
import json

from proptab.table import PropertyTable


def _pairs(table: PropertyTable, resolved: bool) -> list[tuple[str, str]]:
    if not resolved:
        return table.local_items()
    return [(key, table.get(key)) for key in sorted(table.keys())]


# =============================================================================
# JSON
# =============================================================================

def to_json(table: PropertyTable, indent: int = 2, resolved: bool = False) -> str:
    """Convert a table to a JSON object of string values."""
    return json.dumps(dict(_pairs(table, resolved)), indent=indent, ensure_ascii=False)


def from_json(json_str: str) -> PropertyTable:
    """Create a table from a JSON object.

    Scalar values are stored as their text; nested arrays and objects are
    rejected since properties have no nesting.
    """
    data = json.loads(json_str)
    if not isinstance(data, dict):
        raise ValueError("Invalid properties JSON: expected a JSON object at top level")

    table = PropertyTable()
    for key, val in data.items():
        if isinstance(val, (dict, list)):
            raise ValueError(f"Invalid properties JSON: value of {key!r} is not a scalar")
        if val is None:
            val = ""
        elif isinstance(val, bool):
            val = "true" if val else "false"
        elif not isinstance(val, str):
            val = str(val)
        table.set(key, val)
    return table


# =============================================================================
# CSV
# =============================================================================

def to_csv(table: PropertyTable, resolved: bool = False) -> str:
    """Convert a table to CSV with a ``key,value`` header row."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["key", "value"])
    for key, val in _pairs(table, resolved):
        writer.writerow([key, val])
    return buf.getvalue()


def from_csv(csv_str: str) -> PropertyTable:
    """Create a table from CSV written by to_csv (header row required)."""
    reader = csv.reader(io.StringIO(csv_str))
    header = next(reader, None)
    if header is None or [h.strip().lower() for h in header[:2]] != ["key", "value"]:
        raise ValueError("Invalid properties CSV: expected a 'key,value' header row")

    table = PropertyTable()
    for row in reader:
        if not row:
            continue
        if len(row) < 2:
            raise ValueError(f"Invalid properties CSV row: {row!r}")
        table.set(row[0], row[1])
    return table


# =============================================================================
# Dispatch
# =============================================================================

CONVERTERS_TO = {
    "json": to_json,
    "csv": to_csv,
}

CONVERTERS_FROM = {
    "json": from_json,
    "csv": from_csv,
}


def convert_to(table: PropertyTable, fmt: str, resolved: bool = False) -> str:
    """Convert a table to the specified format."""
    converter = CONVERTERS_TO.get(fmt.lower())
    if converter is None:
        raise ValueError(f"Unknown format: {fmt}. Supported: {list(CONVERTERS_TO.keys())}")
    return converter(table, resolved=resolved)


def convert_from(data: str, fmt: str) -> PropertyTable:
    """Create a table from data in the specified format."""
    converter = CONVERTERS_FROM.get(fmt.lower())
    if converter is None:
        raise ValueError(f"Unknown format: {fmt}. Supported: {list(CONVERTERS_FROM.keys())}")
    return converter(data)
