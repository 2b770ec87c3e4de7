"""
Reporting periods and response-date filtering.

Period specifiers follow the dashboard query parameter: "thisMonth",
"last3Months" or "yearYYYY" (e.g. "year2026"). All filtering is on the
month-granularity response date; a record that has not been responded to,
or whose response date cannot be read, never falls inside a period.
"""

import logging
import re
from datetime import date
from typing import NamedTuple

import pandas as pd

from .config import (
    PERIOD_LAST_3_MONTHS,
    PERIOD_THIS_MONTH,
    PERIOD_YEAR_PREFIX,
    TRAILING_MONTHS,
)
from .dates import YearMonth

logger = logging.getLogger(__name__)

THIS_MONTH = "THIS_MONTH"
LAST_3_MONTHS = "LAST_3_MONTHS"
YEAR = "YEAR"

_YEAR_PATTERN = re.compile(rf"^{PERIOD_YEAR_PREFIX}(\d{{4}})$")


class Period(NamedTuple):
    kind: str
    year: int | None = None


def parse_period(text: str) -> Period:
    """Parse a period specifier string; raises ValueError if unknown."""
    if text == PERIOD_THIS_MONTH:
        return Period(THIS_MONTH)
    if text == PERIOD_LAST_3_MONTHS:
        return Period(LAST_3_MONTHS)
    match = _YEAR_PATTERN.match(text or "")
    if match:
        return Period(YEAR, int(match.group(1)))
    raise ValueError(f"Unknown period '{text}'")


def _as_period(period: Period | str) -> Period:
    return parse_period(period) if isinstance(period, str) else period


def resolve_today(today: date | None = None) -> date:
    """Reference date for period arithmetic; defaults to the local date."""
    if today is None:
        return pd.Timestamp.today().date()
    if isinstance(today, pd.Timestamp):
        return today.date()
    return today


def trailing_month_keys(today: date | None = None, months: int = TRAILING_MONTHS) -> list[str]:
    """Month tags for the current month and the `months - 1` preceding it,
    oldest first."""
    current = YearMonth.of(resolve_today(today))
    return [current.shift(-offset).key for offset in range(months - 1, -1, -1)]


def period_mask(
    months: pd.Series,
    period: Period | str,
    today: date | None = None,
) -> pd.Series:
    """Boolean mask over a series of "YYYY-MM" tags (None for unparseable)."""
    period = _as_period(period)
    today = resolve_today(today)

    if period.kind == THIS_MONTH:
        return months == YearMonth.of(today).key
    if period.kind == LAST_3_MONTHS:
        return months.isin(trailing_month_keys(today))
    if period.kind == YEAR:
        prefix = f"{period.year:04d}-"
        return months.map(lambda m: isinstance(m, str) and m.startswith(prefix)).astype(bool)
    raise ValueError(f"Unknown period kind '{period.kind}'")


def filter_by_period(
    records: pd.DataFrame,
    period: Period | str,
    today: date | None = None,
) -> pd.DataFrame:
    """Return the records whose response month falls inside `period`.

    Parameters
    ----------
    records : fact_recruitment DataFrame (needs a response_month column).
    period : Period or specifier string.
    today : Reference date; defaults to today.

    Returns
    -------
    A filtered copy; the input is not modified.
    """
    if records.empty:
        return records.copy()

    mask = period_mask(records["response_month"], period, today)
    result = records[mask.fillna(False).astype(bool)].copy()
    logger.debug("Period %s kept %d of %d records", period, len(result), len(records))
    return result


def period_label(period: Period | str, today: date | None = None) -> str:
    """Human-readable label for a period."""
    period = _as_period(period)
    if period.kind == THIS_MONTH:
        return YearMonth.of(resolve_today(today)).key
    if period.kind == LAST_3_MONTHS:
        return "Last 3 months"
    return f"{period.year} full year"
