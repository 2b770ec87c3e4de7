"""
Date normalisation for free-form log values.

Two shapes are recognised, tried in this order and searched anywhere in
the string:

    dotted  "2026. 3. 5", "2026.03.05", "2026. 3."
    dashed  "2026-03-05", "2026-3"

Bare numbers are Excel serial days (1899-12-30 epoch), as openpyxl returns
them for date cells without a date format.

Both normalisers return None for anything they cannot read; callers
exclude such values from the metric at hand.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, NamedTuple

import pandas as pd

logger = logging.getLogger(__name__)

_DOTTED = re.compile(r"(\d{4})\.\s*(\d{1,2})(?:\.\s*(\d{1,2}))?")
_DASHED = re.compile(r"(\d{4})-(\d{1,2})(?:-(\d{1,2}))?")


class YearMonth(NamedTuple):
    """Month-granularity date value."""

    year: int
    month: int

    @property
    def key(self) -> str:
        """Zero-padded "YYYY-MM" tag; sorts chronologically as a string."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def index(self) -> int:
        return self.year * 12 + self.month - 1

    def shift(self, months: int) -> "YearMonth":
        idx = self.index + months
        return YearMonth(idx // 12, idx % 12 + 1)

    @classmethod
    def of(cls, value: date) -> "YearMonth":
        return cls(value.year, value.month)


def _split(raw: Any) -> tuple[int, int, int | None] | None:
    """Return (year, month, day-or-None) for a raw value, or None."""
    if raw is None:
        return None
    if isinstance(raw, (pd.Timestamp, datetime, date)):
        if pd.isna(raw):
            return None
        return raw.year, raw.month, raw.day
    if isinstance(raw, float) and pd.isna(raw):
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        # Excel serial number, 1899-12-30 epoch
        if raw < 1:
            return None
        try:
            day = (pd.Timestamp("1899-12-30") + pd.Timedelta(days=int(raw))).date()
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", raw)
            return None
        return day.year, day.month, day.day

    text = str(raw).strip()
    if not text:
        return None

    match = _DOTTED.search(text) or _DASHED.search(text)
    if match is None:
        return None

    year, month = int(match.group(1)), int(match.group(2))
    day = int(match.group(3)) if match.group(3) else None

    if not 1 <= month <= 12:
        return None
    if day is not None:
        try:
            date(year, month, day)
        except ValueError:
            return None
    return year, month, day


def normalize_month(raw: Any) -> YearMonth | None:
    """Normalise a raw value to (year, month); None when unparseable."""
    parts = _split(raw)
    if parts is None:
        return None
    return YearMonth(parts[0], parts[1])


def normalize_day(raw: Any) -> date | None:
    """Normalise a raw value to a calendar day.

    Month-only input ("2026. 3") has no day and is treated as unparseable,
    since elapsed-day arithmetic needs an exact date.
    """
    parts = _split(raw)
    if parts is None or parts[2] is None:
        return None
    return date(parts[0], parts[1], parts[2])


def month_key(raw: Any) -> str | None:
    """Return the "YYYY-MM" tag for a raw value, or None."""
    parsed = normalize_month(raw)
    return parsed.key if parsed is not None else None
