"""
Calendar-date recognition used by column classification and line charts.

Profiling takes a `DateParser` argument so the accepted formats can be tested
in isolation and swapped (e.g. for a strict ISO-only parser) without touching
the classification code.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from dateutil import parser as dateutil_parser

DateParser = Callable[[Any], Optional[datetime]]


def parse_date(value: Any) -> Optional[datetime]:
    """
    Default parser backed by `dateutil`.

    Accepts datetime/date objects and non-empty strings. Numbers are never
    dates here (a bare "3" would otherwise become the 3rd of this month).
    Aware results are converted to naive UTC so every parsed value compares.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text or _looks_numeric(text):
            return None
        try:
            parsed = dateutil_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def iso_date_only(value: Any) -> Optional[datetime]:
    """Strict alternative: only YYYY-MM-DD with an optional ISO time part."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _looks_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True
