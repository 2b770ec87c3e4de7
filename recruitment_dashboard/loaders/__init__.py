"""Data ingestion loaders for the recruitment feeds."""

from .rows import (
    calendar_from_rows,
    personal_events_from_rows,
    recruitment_log_from_rows,
    roster_from_rows,
    rows_to_frame,
)
from .utils import RecordStoreError, instructor_key, split_email_cell
from .workbook import load_calendar_events, load_instructor_roster
from .workbook import load_personal_events, load_recruitment_log
from .workbook import load_snapshot

__all__ = [
    "RecordStoreError",
    "instructor_key",
    "split_email_cell",
    "rows_to_frame",
    "recruitment_log_from_rows",
    "roster_from_rows",
    "calendar_from_rows",
    "personal_events_from_rows",
    "load_recruitment_log",
    "load_instructor_roster",
    "load_calendar_events",
    "load_personal_events",
    "load_snapshot",
]
