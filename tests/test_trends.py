"""Unit tests for monthly trend series."""

import pytest

from conftest import make_fact
from recruitment_dashboard.trends import build_trend


@pytest.fixture
def records():
    return make_fact([
        {"result": "APPROVED", "education_date": "2026. 2. 3", "response_date": "2026-01-10"},
        {"result": "DECLINED", "education_date": "2026-02-20", "response_date": "2026-01-11"},
        {"result": "APPROVED", "education_date": "2025-11-05", "response_date": "2025-10-20"},
        {"result": "REQUESTED", "education_date": "2025-09-01"},
        {"result": "CANCELLED", "education_date": "2025-09-02"},
        {"result": "APPROVED", "education_date": "someday", "response_date": "2025-08-01"},
    ])


def test_education_basis(records):
    """Buckets by session month; sparse, ascending, cancelled excluded."""
    assert build_trend(records, basis="education") == [
        {"month": "2025-09", "total": 1, "approved": 0, "declined": 0},
        {"month": "2025-11", "total": 1, "approved": 1, "declined": 0},
        {"month": "2026-02", "total": 2, "approved": 1, "declined": 1},
    ]


def test_response_basis(records):
    """Buckets by response month; unanswered requests have no month."""
    trend = build_trend(records, basis="response")
    assert [row["month"] for row in trend] == ["2025-08", "2025-10", "2026-01"]
    assert trend[-1] == {"month": "2026-01", "total": 2, "approved": 1, "declined": 1}


def test_window_keeps_most_recent_months(records):
    """Only the last N months present in the data are kept."""
    trend = build_trend(records, basis="education", window_months=2)
    assert [row["month"] for row in trend] == ["2025-11", "2026-02"]


def test_gaps_are_not_zero_filled(records):
    """October 2025 has no sessions and does not appear."""
    months = [row["month"] for row in build_trend(records, basis="education")]
    assert "2025-10" not in months


def test_unknown_basis(records):
    with pytest.raises(ValueError):
        build_trend(records, basis="request")


def test_empty():
    assert build_trend(make_fact([]), basis="education") == []
