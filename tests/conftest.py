"""Shared helpers for building small fact tables from raw rows."""

from datetime import date

import pytest

from recruitment_dashboard.loaders.rows import (
    calendar_from_rows,
    personal_events_from_rows,
    recruitment_log_from_rows,
    roster_from_rows,
)
from recruitment_dashboard.transforms import (
    build_dim_instructor,
    build_fact_calendar,
    build_fact_personal_events,
    build_fact_recruitment,
)

TODAY = date(2026, 1, 20)


def make_fact(rows):
    """fact_recruitment from partial rows; request ids are filled in."""
    filled = []
    for i, row in enumerate(rows):
        row = dict(row)
        row.setdefault("request_id", f"REQ-{i:03d}")
        row.setdefault("education_name", "Workshop")
        filled.append(row)
    return build_fact_recruitment(recruitment_log_from_rows(filled))


def make_roster(*entries):
    """dim_instructor from (name, email) pairs or bare names."""
    rows = []
    for entry in entries:
        if isinstance(entry, tuple):
            rows.append({"name": entry[0], "email": entry[1]})
        else:
            rows.append({"name": entry})
    return build_dim_instructor(roster_from_rows(rows))


def make_calendar(rows):
    return build_fact_calendar(calendar_from_rows(rows))


def make_personal(rows):
    return build_fact_personal_events(personal_events_from_rows(rows))


@pytest.fixture
def today():
    return TODAY
