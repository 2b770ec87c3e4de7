"""Unit tests for period parsing and response-date filtering."""

from datetime import date

import pytest

from conftest import make_fact
from recruitment_dashboard.periods import (
    LAST_3_MONTHS,
    THIS_MONTH,
    YEAR,
    Period,
    filter_by_period,
    parse_period,
    period_label,
    trailing_month_keys,
)


def _ids(df):
    return sorted(df["request_id"])


@pytest.fixture
def records():
    return make_fact([
        {"request_id": "jan", "instructor_name": "A", "result": "APPROVED", "response_date": "2026-01-10"},
        {"request_id": "dec", "instructor_name": "A", "result": "DECLINED", "response_date": "2025. 12. 3"},
        {"request_id": "nov", "instructor_name": "B", "result": "APPROVED", "response_date": "2025-11-30"},
        {"request_id": "oct", "instructor_name": "B", "result": "APPROVED", "response_date": "2025-10-31"},
        {"request_id": "feb", "instructor_name": "B", "result": "APPROVED", "response_date": "2026-02-01"},
        {"request_id": "open", "instructor_name": "A", "result": "REQUESTED"},
        {"request_id": "junk", "instructor_name": "A", "result": "APPROVED", "response_date": "soon"},
    ])


def test_parse_period():
    """Query-string specifiers map to period kinds."""
    assert parse_period("thisMonth") == Period(THIS_MONTH)
    assert parse_period("last3Months") == Period(LAST_3_MONTHS)
    assert parse_period("year2026") == Period(YEAR, 2026)
    with pytest.raises(ValueError):
        parse_period("lastWeek")
    with pytest.raises(ValueError):
        parse_period("year26")


def test_this_month(records, today):
    """Only responses in the current calendar month."""
    assert _ids(filter_by_period(records, "thisMonth", today)) == ["jan"]


def test_last_3_months_crosses_year_boundary(records, today):
    """Current month plus the two preceding months, inclusive."""
    assert trailing_month_keys(today) == ["2025-11", "2025-12", "2026-01"]
    assert _ids(filter_by_period(records, "last3Months", today)) == ["dec", "jan", "nov"]


def test_year(records, today):
    """Year filter uses the response year, not the reference date."""
    assert _ids(filter_by_period(records, "year2025", today)) == ["dec", "nov", "oct"]
    assert _ids(filter_by_period(records, Period(YEAR, 2026), today)) == ["feb", "jan"]


def test_missing_or_unparseable_response_never_matches(records, today):
    """Open requests and garbage response dates are excluded from every period."""
    for period in ("thisMonth", "last3Months", "year2025", "year2026"):
        ids = _ids(filter_by_period(records, period, today))
        assert "open" not in ids
        assert "junk" not in ids


def test_filter_does_not_mutate_input(records, today):
    """The input frame is left untouched."""
    before = len(records)
    filter_by_period(records, "thisMonth", today)
    assert len(records) == before


def test_empty_records(today):
    """Filtering an empty frame gives an empty frame."""
    empty = make_fact([])
    assert filter_by_period(empty, "last3Months", today).empty


def test_period_label():
    """Labels for display."""
    assert period_label("thisMonth", date(2026, 3, 9)) == "2026-03"
    assert period_label("last3Months") == "Last 3 months"
    assert period_label("year2026") == "2026 full year"
