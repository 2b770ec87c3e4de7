"""
In-memory row feeds.

Collaborators that already hold the rows (API clients, tests, the
simulator) hand them over as lists of string-keyed dicts; these helpers
give them the same frame shape the workbook loaders produce.
"""

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from ..config import (
    CALENDAR_COLUMNS,
    PERSONAL_EVENT_COLUMNS,
    RECRUITMENT_LOG_COLUMNS,
    ROSTER_COLUMNS,
)

logger = logging.getLogger(__name__)


def rows_to_frame(
    rows: Iterable[Mapping[str, Any]] | None,
    columns: list[str],
) -> pd.DataFrame:
    """Build a DataFrame with exactly `columns` from string-keyed rows.

    Missing keys become None; extra keys are dropped.
    """
    if rows is None:
        return pd.DataFrame(columns=columns)
    records = [{col: row.get(col) for col in columns} for row in rows]
    return pd.DataFrame(records, columns=columns)


def recruitment_log_from_rows(rows: Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    df = rows_to_frame(rows, RECRUITMENT_LOG_COLUMNS)
    logger.info("Received %d recruitment log rows", len(df))
    return df


def roster_from_rows(rows: Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    df = rows_to_frame(rows, ROSTER_COLUMNS)
    logger.info("Received %d roster rows", len(df))
    return df


def calendar_from_rows(rows: Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    df = rows_to_frame(rows, CALENDAR_COLUMNS)
    logger.info("Received %d calendar event rows", len(df))
    return df


def personal_events_from_rows(rows: Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    df = rows_to_frame(rows, PERSONAL_EVENT_COLUMNS)
    logger.info("Received %d personal event rows", len(df))
    return df
