"""
Effective-date parsing for company registry rows.

Registry rows arrive with dates in several encodings (ISO strings from the
database, day-first strings typed into the dashboards, native date values
from dataframes). Parsers are tried in a fixed order; the first one that
returns a date wins.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from backoffice.ops.logger import service_logger

DateParser = Callable[[Any], Optional[date]]

_ISO_PREFIX = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)
_DAY_FIRST = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_FREE_FORM_FORMATS = (
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_native(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def parse_iso(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    match = _ISO_PREFIX.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    return _safe_date(year, month, day)


def parse_day_first(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    match = _DAY_FIRST.match(value)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    return _safe_date(year, month, day)


def parse_free_form(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    for fmt in _FREE_FORM_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


DEFAULT_PARSERS: Sequence[DateParser] = (
    parse_native,
    parse_iso,
    parse_day_first,
    parse_free_form,
)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_effective_date(
    value: Any,
    field: Optional[str] = None,
    parsers: Sequence[DateParser] = DEFAULT_PARSERS,
) -> Optional[date]:
    """
    Parse a registry date value into a calendar date.

    Returns None for blank values. Values that no parser accepts also return
    None and are reported through the structured logger; nothing is raised.
    """
    if is_blank(value):
        return None

    candidate = value.strip() if isinstance(value, str) else value
    for parser in parsers:
        parsed = parser(candidate)
        if parsed is not None:
            return parsed

    service_logger.log_parse_failure(value, field=field)
    return None
