from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

# Synthetic, 1-based row position assigned at parse time.
ROW_INDEX_KEY = "rowIndex"

# A delimited cell is a float or a str. JSON rows keep whatever the decoder
# produced (None, bool, int, nested list/dict), hence Row values are Any.
Row = Dict[str, Any]

# Whole-string float literal, no hex, no underscores, no "nan" words.
_FLOAT_LITERAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
# "Infinity" as written in source data, "inf" as str(float("inf")) writes it back.
_INFINITY_LITERAL = re.compile(r"^[+-]?(?:Infinity|inf)$")


class IngestionError(ValueError):
    """Base class for a failed ingestion attempt."""


class UnsupportedFormat(IngestionError):
    """The declared file extension is not one of csv, txt or json."""


class EmptyOrMalformed(IngestionError):
    """No usable header + data, every row blank, or undecodable JSON."""


def coerce_number(text: str) -> Union[float, str]:
    """
    Best-effort numeric coercion of a delimited cell.

    The text becomes a float only when it is non-empty and the whole string is
    a strict floating-point literal (or a signed "Infinity") that yields a
    number. Anything else (blank, "12abc", "0x1F", "1_000", "NaN") is returned
    untouched.
    """
    if not text:
        return text
    if _INFINITY_LITERAL.match(text):
        return float("-inf") if text.startswith("-") else float("inf")
    if not _FLOAT_LITERAL.match(text):
        return text
    try:
        value = float(text)
    except ValueError:
        return text
    if math.isnan(value):
        return text
    return value


def to_number(value: Any) -> Optional[float]:
    """Return the finite float behind a cell, or None when it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # JSON integers are unbounded; past float range they are not charted.
            return None
    elif isinstance(value, str):
        coerced = coerce_number(value.strip())
        if isinstance(coerced, str):
            return None
        number = coerced
    else:
        return None
    return number if math.isfinite(number) else None


def is_blank(value: Any) -> bool:
    return value is None or value == ""


def json_safe(value: Any) -> Any:
    """Copy of a cell, row or row list with infinite floats replaced by None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [json_safe(item) for item in value]
    return value


@dataclass
class Table:
    """
    Row-oriented dataset produced by ingestion.

    `columns` is the header in declaration order and never contains
    `rowIndex`; every row carries exactly those columns plus `rowIndex`.
    """

    columns: List[str]
    rows: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def head(self, n: int) -> List[Row]:
        """Copies of the first n rows, safe to hand to other owners."""
        return [dict(r) for r in self.rows[:n]]

    def column_values(self, column: str, limit: int | None = None) -> List[Any]:
        rows = self.rows if limit is None else self.rows[:limit]
        return [r.get(column) for r in rows]

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> "Table":
        """
        Wrap already-decoded records (JSON rows, API payloads) as a Table.

        Columns are the ordered union of keys; rows missing a column get null.
        An incoming `rowIndex` key is replaced by the positional index.
        """
        columns: List[str] = []
        seen: set[str] = set()
        for record in records:
            for key in record:
                col = str(key)
                if col == ROW_INDEX_KEY or col in seen:
                    continue
                seen.add(col)
                columns.append(col)

        rows: List[Row] = []
        for position, record in enumerate(records, start=1):
            normalized = {str(k): v for k, v in record.items()}
            row: Row = {ROW_INDEX_KEY: position}
            for col in columns:
                row[col] = normalized.get(col)
            rows.append(row)
        return cls(columns=columns, rows=rows)
