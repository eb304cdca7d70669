"""Column classification and automatic chart selection.

Design Notes:
-------------
Column roles are inferred from a small fixed window (the first
CLASSIFICATION_SAMPLE_SIZE rows), evaluated in this order:
  - numeric: at least NUMERIC_MIN_COUNT sampled values are finite numbers.
  - categorical: distinct sampled values <= min(10, 0.7 * total rows).
  - temporal: at least one sampled value parses as a calendar date.
  - unclassified: everything else, never charted.

Charts (additive, each built from the first column of the needed role):
  - bar: sum of the numeric column per category, top 10 groups.
  - line: numeric column against dates, chronological, first 50 points.
  - pie: category frequencies, top 8.
  - scatter: first two numeric columns, first 100 rows.

Every descriptor carries its own finished data slice; nothing refers back to
the Table, which is never mutated.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from insights import config
from insights.dates import DateParser, parse_date
from insights.table import Table, is_blank, json_safe, to_number

logger = logging.getLogger(__name__)


class ColumnRole(Enum):
    """Semantic role of a column, recomputed on every classification pass."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    TEMPORAL = "temporal"
    UNCLASSIFIED = "unclassified"


@dataclass
class ColumnProfile:
    """Classification result for a single column."""

    name: str
    role: ColumnRole
    numeric_count: int
    unique_count: int


@dataclass(frozen=True)
class ChartDescriptor:
    """Renderer-ready chart: kind, title, axis bindings and its own data."""

    id: str
    kind: str
    title: str
    data: List[Dict[str, Any]] = field(default_factory=list)
    xField: Optional[str] = None
    yField: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # Strict JSON has no Infinity; infinite category labels go out as null.
        return json_safe(_drop_none(asdict(self)))


def _drop_none(payload: Any) -> Any:
    if isinstance(payload, dict):
        return {key: _drop_none(value) for key, value in payload.items() if value is not None}
    if isinstance(payload, list):
        return [_drop_none(item) for item in payload]
    return payload


def _distinct_key(value: Any) -> Any:
    """Hashable identity of a cell; JSON containers are compared by content."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    # 1 and 1.0 are one value; True, "1" and 1 are three.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return ("number", float(value))
        except OverflowError:
            return ("number", value)
    return (type(value).__name__, value)


def _category_label(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return value


def classify_column(
    table: Table,
    column: str,
    sample_size: int = config.CLASSIFICATION_SAMPLE_SIZE,
    date_parser: DateParser = parse_date,
) -> ColumnProfile:
    """Classify one column from its first `sample_size` values."""
    sample = table.column_values(column, limit=sample_size)
    numeric_count = sum(1 for v in sample if to_number(v) is not None)
    unique_count = len({_distinct_key(v) for v in sample})
    categorical_limit = min(config.CATEGORICAL_MAX_UNIQUE, config.CATEGORICAL_MAX_RATIO * table.row_count)

    if numeric_count >= config.NUMERIC_MIN_COUNT:
        role = ColumnRole.NUMERIC
    elif unique_count <= categorical_limit:
        role = ColumnRole.CATEGORICAL
    elif any(date_parser(v) is not None for v in sample):
        role = ColumnRole.TEMPORAL
    else:
        role = ColumnRole.UNCLASSIFIED

    return ColumnProfile(name=column, role=role, numeric_count=numeric_count, unique_count=unique_count)


def classify_columns(
    table: Table,
    sample_size: int = config.CLASSIFICATION_SAMPLE_SIZE,
    date_parser: DateParser = parse_date,
) -> List[ColumnProfile]:
    """Classify every header column, in header order."""
    if not table.columns or not table.rows[:sample_size]:
        return []
    return [classify_column(table, col, sample_size, date_parser) for col in table.columns]


def profile(
    table: Table,
    sample_size: int = config.CLASSIFICATION_SAMPLE_SIZE,
    date_parser: DateParser = parse_date,
) -> List[ChartDescriptor]:
    """
    Pick and build charts for a table.

    Deterministic for a given table and never raises for data-shape reasons:
    a missing column role just means the matching chart is skipped.
    """
    columns = classify_columns(table, sample_size, date_parser)
    if not columns:
        return []

    numeric = [c.name for c in columns if c.role is ColumnRole.NUMERIC]
    categorical = [c.name for c in columns if c.role is ColumnRole.CATEGORICAL]
    temporal = [c.name for c in columns if c.role is ColumnRole.TEMPORAL]

    charts: List[ChartDescriptor] = []
    if categorical and numeric:
        charts.append(bar_chart(table, categorical[0], numeric[0]))
    if temporal and numeric:
        line = line_chart(table, temporal[0], numeric[0], date_parser)
        if line is not None:
            charts.append(line)
    if categorical:
        charts.append(pie_chart(table, categorical[0]))
    if len(numeric) >= 2:
        charts.append(scatter_chart(table, numeric[0], numeric[1]))

    logger.debug(
        "Profiled %d columns (%d numeric, %d categorical, %d temporal) into %d charts",
        len(columns),
        len(numeric),
        len(categorical),
        len(temporal),
        len(charts),
    )
    return charts


def bar_chart(table: Table, category: str, measure: str) -> ChartDescriptor:
    totals: Dict[Any, float] = {}
    labels: Dict[Any, Any] = {}
    for row in table.rows:
        value = row.get(category)
        key = _distinct_key(value)
        if key not in totals:
            totals[key] = 0.0
            labels[key] = _category_label(value)
        totals[key] += to_number(row.get(measure)) or 0.0

    # sorted() is stable: ties keep first-seen order.
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[: config.BAR_TOP_N]
    return ChartDescriptor(
        id="bar-chart",
        kind="bar",
        title=f"{measure} by {category}",
        data=[{category: labels[key], measure: total} for key, total in ranked],
        xField=category,
        yField=measure,
    )


def line_chart(
    table: Table,
    temporal: str,
    measure: str,
    date_parser: DateParser = parse_date,
) -> Optional[ChartDescriptor]:
    points = []
    for row in table.rows:
        when, amount = row.get(temporal), row.get(measure)
        if is_blank(when) or is_blank(amount):
            continue
        points.append((date_parser(when), {temporal: when, measure: to_number(amount) or 0.0}))

    # Unparseable dates sort after every real date.
    points.sort(key=lambda p: (p[0] is None, p[0] or datetime.min))
    data = [point for _, point in points[: config.LINE_MAX_POINTS]]
    if len(data) < config.LINE_MIN_POINTS:
        return None
    return ChartDescriptor(
        id="line-chart",
        kind="line",
        title=f"{measure} Over Time",
        data=data,
        xField=temporal,
        yField=measure,
    )


def pie_chart(table: Table, category: str) -> ChartDescriptor:
    counts: Counter = Counter()
    labels: Dict[Any, Any] = {}
    for row in table.rows:
        value = row.get(category)
        key = _distinct_key(value)
        labels.setdefault(key, _category_label(value))
        counts[key] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[: config.PIE_TOP_N]
    return ChartDescriptor(
        id="pie-chart",
        kind="pie",
        title=f"Distribution of {category}",
        data=[{"name": labels[key], "value": count} for key, count in ranked],
    )


def scatter_chart(table: Table, x_field: str, y_field: str) -> ChartDescriptor:
    data = []
    for row in table.rows:
        x, y = row.get(x_field), row.get(y_field)
        if not x or not y:
            continue
        data.append({x_field: to_number(x) or 0.0, y_field: to_number(y) or 0.0})
        if len(data) == config.SCATTER_MAX_POINTS:
            break
    return ChartDescriptor(
        id="scatter-chart",
        kind="scatter",
        title=f"{x_field} vs {y_field}",
        data=data,
        xField=x_field,
        yField=y_field,
    )
