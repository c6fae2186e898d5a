"""
Entity IDs - Date Parts and Reset Periods
===========================================
Date helpers for preview rendering.

Time is always passed in explicitly. Nothing here reads the system clock.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

from entity_ids.display_format.models import PERIOD_FINANCIAL_YEAR, CounterResetPolicy

_MONTH_ABBR = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

# Longest patterns first so "YYYY" is not read as two "YY".
_DATE_PATTERN = re.compile(r"YYYY|YY|MON|MM|M|DD|D")


def coerce_date(value: Any) -> Optional[date]:
    """Accept a date, a datetime or an ISO-8601 string. Anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def format_date_part(value: date, date_format: str) -> str:
    """
    Render `value` with a token-style pattern.

    Supported: YYYY, YY, MM, M, DD, D, MON. Other characters are copied
    as they are, so "YYYY/MM" -> "2024/01".
    """

    def _replace(match: re.Match) -> str:
        part = match.group(0)
        if part == "YYYY":
            return f"{value.year:04d}"
        if part == "YY":
            return f"{value.year % 100:02d}"
        if part == "MON":
            return _MONTH_ABBR[value.month - 1]
        if part == "MM":
            return f"{value.month:02d}"
        if part == "M":
            return str(value.month)
        if part == "DD":
            return f"{value.day:02d}"
        return str(value.day)

    return _DATE_PATTERN.sub(_replace, date_format)


def period_identifier(policy: CounterResetPolicy, value: date) -> str:
    """
    Identify the reset period `value` falls into.

    CALENDAR_YEAR  -> "2024"
    FINANCIAL_YEAR -> "FY2024" for the fiscal year that starts in 2024,
                      e.g. April 2024 .. March 2025 with start month 4.
    """
    if policy.period == PERIOD_FINANCIAL_YEAR and policy.fiscal_year_start_month:
        start_year = value.year
        if value.month < policy.fiscal_year_start_month:
            start_year -= 1
        return f"FY{start_year:04d}"
    return f"{value.year:04d}"
