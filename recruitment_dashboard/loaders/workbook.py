"""
Loader for the exported recruitment workbook.

One sheet per feed (names in config): recruitment_log, instructors,
calendar_events, personal_events. Each sheet carries a single header row
somewhere in its first 20 rows; headers are matched through
config.HEADER_ALIASES, so column order and extra columns do not matter.

Cells are returned as-is (strings, datetimes, numbers); cleaning happens
in the transforms.
"""

import logging

import openpyxl
import pandas as pd

from ..config import (
    CALENDAR_COLUMNS,
    CALENDAR_SHEET,
    HEADER_ALIASES,
    PERSONAL_EVENT_COLUMNS,
    PERSONAL_EVENTS_SHEET,
    RECRUITMENT_LOG_COLUMNS,
    RECRUITMENT_LOG_SHEET,
    ROSTER_COLUMNS,
    ROSTER_SHEET,
)
from .utils import RecordStoreError, find_header_row, map_headers

logger = logging.getLogger(__name__)


def _open_workbook(path: str):
    try:
        return openpyxl.load_workbook(path, data_only=True, read_only=False)
    except Exception as exc:
        logger.exception("Failed to open recruitment workbook: %s", path)
        raise RecordStoreError(f"Cannot read workbook {path}") from exc


def _load_sheet(
    path: str,
    sheet_name: str,
    columns: list[str],
    required: bool,
) -> pd.DataFrame:
    """Read one feed sheet into a frame with the canonical `columns`.

    Assumptions
    -----------
    - The header row is the first row (within 20) where at least two
      headers match known aliases for this sheet.
    - Data runs from the row after the header to the last used row;
      fully blank rows are skipped.

    A missing sheet raises RecordStoreError when `required`, otherwise
    yields an empty frame.
    """
    wb = _open_workbook(path)
    try:
        if sheet_name not in wb.sheetnames:
            if required:
                raise RecordStoreError(f"Sheet '{sheet_name}' not found in {path}")
            logger.warning("Sheet '%s' not found in %s; treating as empty", sheet_name, path)
            return pd.DataFrame(columns=columns)

        ws = wb[sheet_name]
        aliases = HEADER_ALIASES[sheet_name]
        header_row = find_header_row(ws, set(aliases))
        if header_row is None:
            if required:
                raise RecordStoreError(f"No header row found in sheet '{sheet_name}'")
            logger.warning("No header row in sheet '%s'; treating as empty", sheet_name)
            return pd.DataFrame(columns=columns)

        headers = [cell.value for cell in ws[header_row]]
        col_map = map_headers(headers, aliases)

        rows = []
        for values in ws.iter_rows(min_row=header_row + 1, values_only=True):
            if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
                continue
            record = {col: None for col in columns}
            for idx, name in col_map.items():
                if idx < len(values) and name in record:
                    record[name] = values[idx]
            rows.append(record)
    finally:
        wb.close()

    df = pd.DataFrame(rows, columns=columns)
    logger.info("Loaded %d rows from %s [%s]", len(df), path, sheet_name)
    return df


def load_recruitment_log(path: str) -> pd.DataFrame:
    """Load the recruitment log sheet. The sheet is mandatory."""
    return _load_sheet(path, RECRUITMENT_LOG_SHEET, RECRUITMENT_LOG_COLUMNS, required=True)


def load_instructor_roster(path: str) -> pd.DataFrame:
    """Load the instructor roster sheet. The sheet is mandatory."""
    return _load_sheet(path, ROSTER_SHEET, ROSTER_COLUMNS, required=True)


def load_calendar_events(path: str) -> pd.DataFrame:
    """Load calendar events. The attendees column holds comma/semicolon
    separated addresses."""
    return _load_sheet(path, CALENDAR_SHEET, CALENDAR_COLUMNS, required=True)


def load_personal_events(path: str) -> pd.DataFrame:
    """Load declared availability; an absent sheet means no declarations."""
    return _load_sheet(path, PERSONAL_EVENTS_SHEET, PERSONAL_EVENT_COLUMNS, required=False)


def load_snapshot(path: str) -> dict[str, pd.DataFrame]:
    """Load every feed from the workbook.

    Mandatory feeds propagate RecordStoreError. A calendar failure is
    logged and reported as None so downstream consumers can tell
    "unavailable" from "nobody taught".
    """
    snapshot: dict[str, pd.DataFrame | None] = {
        "recruitment_log": load_recruitment_log(path),
        "roster": load_instructor_roster(path),
        "personal_events": load_personal_events(path),
    }

    try:
        snapshot["calendar_events"] = load_calendar_events(path)
    except RecordStoreError:
        logger.exception("Calendar feed unavailable; class counts will be omitted")
        snapshot["calendar_events"] = None

    return snapshot
