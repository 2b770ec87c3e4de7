"""Unit tests for overload risk classification."""

from conftest import make_fact
from recruitment_dashboard.kpis import build_instructor_breakdown
from recruitment_dashboard.overload import (
    approved_by_month,
    build_overload_analysis,
    classify_overload_risk,
    select_alternates,
)


def test_classify_overload_risk():
    """Bands on average monthly approvals over 3 months."""
    # High risk: avg >= 5
    assert classify_overload_risk(15) == "HIGH"
    assert classify_overload_risk(30) == "HIGH"

    # Medium risk: 3 <= avg < 5
    assert classify_overload_risk(9) == "MEDIUM"
    assert classify_overload_risk(14) == "MEDIUM"

    # Low risk
    assert classify_overload_risk(8) == "LOW"
    assert classify_overload_risk(0) == "LOW"


def test_select_alternates_roster_order_and_cap():
    """Stable roster order, loaded instructors skipped, list capped."""
    roster = ["E", "D", "C", "B", "A"]
    assert select_alternates(roster, {"D", "B"}) == ["E", "C", "A"]
    assert select_alternates(roster, [], limit=2) == ["E", "D"]


def test_build_overload_analysis():
    """Loaded instructors get a risk level and the first alternates."""
    fact = make_fact(
        [{"instructor_name": "Kim", "result": "APPROVED", "response_date": "2026-01-05"}] * 15
        + [{"instructor_name": "Lee", "result": "APPROVED", "response_date": "2025-12-05"}] * 9
        + [{"instructor_name": "Park", "result": "APPROVED", "response_date": "2025-11-05"}]
        + [{"instructor_name": "Choi", "result": "DECLINED", "response_date": "2026-01-05"}]
    )
    roster = ["Kim", "Lee", "Park", "Choi", "Jung", "Kang", "Yoon"]
    breakdown = build_instructor_breakdown(fact, roster)

    analysis = build_overload_analysis(breakdown, roster, approved_by_month(fact))
    per = analysis["per_instructor"]

    assert list(per) == ["Kim", "Lee", "Park"]
    assert per["Kim"]["risk_level"] == "HIGH"
    assert per["Kim"]["avg_monthly_approved"] == 5.0
    assert per["Kim"]["monthly_breakdown"] == {"2026-01": 15}
    assert per["Lee"]["risk_level"] == "MEDIUM"
    assert per["Park"]["risk_level"] == "LOW"
    assert per["Park"]["avg_monthly_approved"] == 0.3

    # Choi declined only, so is not loaded and is the first alternate
    assert analysis["alternates_pool"] == ["Choi", "Jung", "Kang", "Yoon"]
    assert per["Kim"]["alternates"] == ["Choi", "Jung", "Kang"]


def test_build_overload_analysis_top_k():
    """Only the top-K busiest are analysed; the others join the alternates pool."""
    fact = make_fact(
        [{"instructor_name": "A", "result": "APPROVED"}] * 3
        + [{"instructor_name": "B", "result": "APPROVED"}] * 2
        + [{"instructor_name": "C", "result": "APPROVED"}]
    )
    breakdown = build_instructor_breakdown(fact, ["A", "B", "C", "D"])
    analysis = build_overload_analysis(breakdown, ["A", "B", "C", "D"], top_k=2)

    assert list(analysis["per_instructor"]) == ["A", "B"]
    assert analysis["alternates_pool"] == ["C", "D"]


def test_build_overload_analysis_nobody_loaded():
    breakdown = build_instructor_breakdown(make_fact([]), ["A", "B"])
    analysis = build_overload_analysis(breakdown, ["A", "B"])
    assert analysis["per_instructor"] == {}
    assert analysis["alternates_pool"] == ["A", "B"]
