"""
Ingestion: raw upload bytes -> typed, row-oriented Table.

Delimited files (csv, txt) are split on line feeds and commas; each cell is
trimmed, stripped of one layer of surrounding quotes and coerced to a number
when it is a strict numeric literal. JSON files keep the decoder's typing.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Union

from insights.table import (
    ROW_INDEX_KEY,
    EmptyOrMalformed,
    Row,
    Table,
    UnsupportedFormat,
    coerce_number,
    is_blank,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "txt", "json")
DELIMITED_EXTENSIONS = ("csv", "txt")

_SURROUNDING_QUOTE = re.compile(r"^[\"']|[\"']$")
_FINAL_EXTENSION = re.compile(r"\.[^/.]+$")


def extension_of(filename: str) -> str:
    """Lower-cased text after the last dot (the whole name when there is none)."""
    return (filename or "").rsplit(".", 1)[-1].strip().lower()


def dataset_name_of(filename: str) -> str:
    """File name without its final extension."""
    return _FINAL_EXTENSION.sub("", filename or "")


def parse(raw: Union[bytes, str], extension: str) -> Table:
    """
    Parse an uploaded file into a Table.

    Raises UnsupportedFormat for extensions other than csv/txt/json and
    EmptyOrMalformed when no usable rows can be produced.
    """
    ext = (extension or "").strip().lower().lstrip(".")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(
            f"Unsupported file format '{extension}'. Please upload CSV, TXT or JSON files."
        )

    text = _decode(raw)
    if ext in DELIMITED_EXTENSIONS:
        table = _parse_delimited(text)
    else:
        table = _parse_json(text)

    logger.debug("Parsed %s upload: %d rows, %d columns", ext, table.row_count, table.column_count)
    return table


def _decode(raw: Union[bytes, str]) -> str:
    if isinstance(raw, str):
        text = raw
    else:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = raw.decode("latin-1")
    return text.lstrip("\ufeff")


def _clean_cell(value: str) -> str:
    return _SURROUNDING_QUOTE.sub("", value.strip())


def _parse_delimited(text: str) -> Table:
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        raise EmptyOrMalformed("CSV file must have at least a header row and one data row.")

    header = [_clean_cell(h) for h in lines[0].split(",")]
    columns: List[str] = []
    for name in header:
        if name != ROW_INDEX_KEY and name not in columns:
            columns.append(name)

    rows: List[Row] = []
    dropped = 0
    for index, line in enumerate(lines[1:], start=1):
        values = [_clean_cell(v) for v in line.split(",")]
        row: Row = {ROW_INDEX_KEY: index}
        for position, name in enumerate(header):
            if name == ROW_INDEX_KEY:
                continue
            cell = values[position] if position < len(values) else ""
            row[name] = coerce_number(cell)
        if all(is_blank(row[c]) for c in columns):
            dropped += 1
            continue
        rows.append(row)

    if dropped:
        logger.debug("Dropped %d blank rows", dropped)
    if not rows:
        raise EmptyOrMalformed("No valid data found in file.")
    return Table(columns=columns, rows=rows)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"'{token}' is not valid JSON")


def _parse_json(text: str) -> Table:
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise EmptyOrMalformed(f"Invalid JSON: {exc.msg} (line {exc.lineno})") from exc
    except ValueError as exc:
        # NaN/Infinity tokens, or integers past the interpreter's digit limit.
        raise EmptyOrMalformed(f"Invalid JSON: {exc}") from exc

    records: List[Dict[str, Any]]
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict):
        records = [data]
    else:
        raise EmptyOrMalformed("JSON must be an object or an array of objects.")

    if not records:
        raise EmptyOrMalformed("No valid data found in file.")
    if not all(isinstance(r, dict) for r in records):
        raise EmptyOrMalformed("JSON array must contain only objects.")
    return Table.from_records(records)
