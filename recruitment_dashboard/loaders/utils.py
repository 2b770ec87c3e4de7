"""
Shared utilities for data ingestion: header detection, cell cleaning,
multi-valued email cells, instructor join keys.
"""

import logging
import re
from typing import Any, Iterable

import pandas as pd

logger = logging.getLogger(__name__)

_EMAIL_SEPARATORS = re.compile(r"[,;]")


class RecordStoreError(RuntimeError):
    """Raised when a source feed cannot supply a snapshot."""


def safe_str(val: Any) -> str | None:
    """Coerce a cell to a trimmed string, returning None for blanks."""
    if val is None:
        return None
    if isinstance(val, float) and pd.isna(val):
        return None
    if val is pd.NA or val is pd.NaT:
        return None
    s = str(val).strip()
    return s or None


def safe_bool(val: Any) -> bool:
    """Coerce a spreadsheet flag ("TRUE", "yes", 1, "Y") to bool."""
    if isinstance(val, bool):
        return val
    s = safe_str(val)
    if s is None:
        return False
    return s.lower() in ("true", "yes", "y", "1", "internal")


def normalise_name(name: Any) -> str:
    """Trim and collapse internal whitespace of a display name."""
    s = safe_str(name)
    if s is None:
        return ""
    return re.sub(r"\s+", " ", s)


def instructor_key(name: Any) -> str:
    """Join key for an instructor across feeds.

    Exact match on the whitespace-normalised display name. Every join in
    the package goes through here, so swapping in a stable identifier only
    touches this function and the transforms that populate it.
    """
    return normalise_name(name)


def split_email_cell(cell: Any) -> frozenset[str]:
    """Split a multi-valued email cell into normalised addresses.

    Separators are comma and semicolon; each address is trimmed and
    lower-cased, blanks are dropped. Lists/sets of addresses are accepted
    too (calendar attendees arrive that way).
    """
    if cell is None:
        return frozenset()
    if isinstance(cell, (list, tuple, set, frozenset)):
        parts: Iterable[Any] = cell
    else:
        s = safe_str(cell)
        if s is None:
            return frozenset()
        parts = _EMAIL_SEPARATORS.split(s)

    emails = set()
    for part in parts:
        s = safe_str(part)
        if s is None:
            continue
        # A list element may itself hold several addresses
        for piece in _EMAIL_SEPARATORS.split(s):
            piece = piece.strip().lower()
            if piece:
                emails.add(piece)
    return frozenset(emails)


def to_snake_case(name: str) -> str:
    """Convert a column header to snake_case.

    Handles spaces, parentheses, slashes and CamelCase.
    """
    s = str(name).strip()
    s = s.replace("(", "").replace(")", "")
    s = s.replace("-", "_").replace(".", "_").replace("/", "_")
    s = re.sub(r"([a-z])([A-Z])", r"\1_\2", s)
    # Keep non-ASCII letters (Korean headers) intact
    s = re.sub(r"[^\w]+", "_", s)
    s = s.lower().strip("_")
    s = re.sub(r"_+", "_", s)
    return s


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the header row.

    Returns the 1-based row index where at least two cells, once
    snake_cased, appear in `signature`, or None if not found within
    `max_rows`.
    """
    for row_idx in range(1, max_rows + 1):
        matches = 0
        for cell in sheet[row_idx]:
            if cell.value is not None and to_snake_case(cell.value) in signature:
                matches += 1
        if matches >= 2:
            return row_idx
    return None


def map_headers(headers: list[Any], aliases: dict[str, str]) -> dict[int, str]:
    """Map 0-based column positions to canonical names via `aliases`.

    Unknown headers are ignored; the first occurrence of a canonical name
    wins.
    """
    mapping: dict[int, str] = {}
    seen: set[str] = set()
    for idx, header in enumerate(headers):
        if header is None:
            continue
        canonical = aliases.get(to_snake_case(header))
        if canonical is None or canonical in seen:
            continue
        mapping[idx] = canonical
        seen.add(canonical)
    return mapping
