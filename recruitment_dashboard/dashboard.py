"""
Dashboard-ready output functions.

These are the primary entry points for the coordinator views. Each takes
the cleaned fact/dimension frames of one snapshot and returns plain dicts
and lists suitable for rendering cards, rankings, trend charts and tables.
Nothing here mutates its inputs or keeps state between calls.
"""

import logging
from datetime import date

import pandas as pd

from .attendance import (
    availability_summary,
    count_sessions,
    events_in_month,
    rank_class_counts,
)
from .config import (
    PERIOD_LAST_3_MONTHS,
    PERIOD_THIS_MONTH,
    PERIOD_YEAR_PREFIX,
    TOP_N,
    TREND_WINDOW_MONTHS,
)
from .dates import YearMonth
from .kpis import (
    avg_response_days,
    breakdown_to_dict,
    build_instructor_breakdown,
    build_recruitment_stats,
    decline_reason_details,
    known_instructor_names,
    overall_monthly_stats,
    predict_next_month,
    rank_decline_reasons,
    summarise_results,
    top_by_count,
    top_n,
)
from .loaders.utils import instructor_key
from .overload import approved_by_month, build_overload_analysis
from .periods import LAST_3_MONTHS, Period, filter_by_period, parse_period, period_label, resolve_today
from .trends import build_trend

logger = logging.getLogger(__name__)

_LAST_3 = Period(LAST_3_MONTHS)


def _counts(stats: dict) -> dict:
    return {k: stats[k] for k in ("approved", "declined", "total")}


def _instructor_records(fact_recruitment: pd.DataFrame, name: str) -> pd.DataFrame:
    if fact_recruitment.empty:
        return fact_recruitment
    return fact_recruitment[fact_recruitment["instructor_key"] == instructor_key(name)]


def _detail(
    name: str,
    records: pd.DataFrame,
    period: Period,
    today: date,
) -> dict:
    """Detail block for one instructor from that instructor's records."""
    period_records = filter_by_period(records, period, today)
    last3_records = filter_by_period(records, _LAST_3, today)
    last3 = summarise_results(last3_records)

    return {
        "name": name,
        "this_period": summarise_results(period_records),
        "last_3_months": last3,
        "monthly_trend": build_trend(records, basis="response"),
        "predicted_next_month": predict_next_month(last3),
        "decline_reasons": decline_reason_details(last3_records),
        "avg_response_days": avg_response_days(period_records),
    }


def get_instructor_detail(
    fact_recruitment: pd.DataFrame,
    name: str,
    period: str = PERIOD_THIS_MONTH,
    today: date | None = None,
    dim_instructor: pd.DataFrame | None = None,
    fact_personal: pd.DataFrame | None = None,
) -> dict:
    """Single-instructor detail view.

    Parameters
    ----------
    fact_recruitment : fact_recruitment DataFrame.
    name : Instructor display name.
    period : Period for this_period and avg_response_days.
    dim_instructor, fact_personal : When both are given, the declared
        availability is attached.

    Returns
    -------
    Dict with keys:
        name, this_period, last_3_months, monthly_trend (response basis,
        all months), predicted_next_month, decline_reasons (trailing 3
        months, with request context), avg_response_days, availability
    """
    today = resolve_today(today)
    key = instructor_key(name)
    detail = _detail(key, _instructor_records(fact_recruitment, key), parse_period(period), today)

    if dim_instructor is not None and fact_personal is not None:
        detail["availability"] = availability_summary(fact_personal, dim_instructor, key)
    else:
        detail["availability"] = None
    return detail


def get_dashboard(
    fact_recruitment: pd.DataFrame,
    dim_instructor: pd.DataFrame,
    period: str = PERIOD_THIS_MONTH,
    fact_calendar: pd.DataFrame | None = None,
    today: date | None = None,
) -> dict:
    """Single entry point for the recruitment dashboard.

    Parameters
    ----------
    fact_recruitment : fact_recruitment DataFrame.
    dim_instructor : dim_instructor DataFrame.
    period : "thisMonth", "last3Months" or "yearYYYY".
    fact_calendar : fact_calendar DataFrame, or None when the calendar
        feed is unavailable (class_counts is then None, not empty).
    today : Reference date; defaults to today.

    Returns
    -------
    Dict with keys:
        period, period_label, current_month, this_period, per_instructor,
        top_approval_rate, top_decline_rate, top_approved_instructor,
        top_declined_instructor, monthly_trend, decline_reasons,
        class_counts, instructor_details
    """
    today = resolve_today(today)
    parsed = parse_period(period)

    filtered = filter_by_period(fact_recruitment, parsed, today)
    names = known_instructor_names(dim_instructor, fact_recruitment)
    breakdown = build_instructor_breakdown(filtered, names)

    class_counts = None
    if fact_calendar is not None:
        month_events = events_in_month(fact_calendar, today)
        class_counts = rank_class_counts(count_sessions(month_events, dim_instructor))

    grouped = (
        dict(tuple(fact_recruitment.groupby("instructor_key", sort=False)))
        if not fact_recruitment.empty else {}
    )
    empty = fact_recruitment.iloc[0:0]
    details = [
        _detail(name, grouped.get(name, empty), parsed, today)
        for name in breakdown.index
    ]
    details.sort(key=lambda d: (-d["this_period"]["total"], d["name"]))

    result = {
        "period": period,
        "period_label": period_label(parsed, today),
        "current_month": YearMonth.of(today).key,
        "this_period": summarise_results(filtered),
        "per_instructor": breakdown_to_dict(breakdown),
        "top_approval_rate": top_n(breakdown, "approval_rate", TOP_N),
        "top_decline_rate": top_n(breakdown, "decline_rate", TOP_N),
        "top_approved_instructor": top_by_count(breakdown, "approved"),
        "top_declined_instructor": top_by_count(breakdown, "declined"),
        "monthly_trend": build_trend(fact_recruitment, basis="education", window_months=TREND_WINDOW_MONTHS),
        "decline_reasons": rank_decline_reasons(filtered),
        "class_counts": class_counts,
        "instructor_details": details,
    }

    logger.info(
        "Dashboard for %s: %d records in period, %d instructors",
        period, result["this_period"]["total"], len(breakdown),
    )
    return result


def get_overload_analysis(
    fact_recruitment: pd.DataFrame,
    dim_instructor: pd.DataFrame,
    today: date | None = None,
) -> dict:
    """Overload risk for the busiest instructors over the trailing 3 months.

    Returns
    -------
    {"generated_for": "YYYY-MM", "per_instructor": {...}, "alternates_pool": [...]}
    """
    today = resolve_today(today)
    last3 = filter_by_period(fact_recruitment, _LAST_3, today)
    names = known_instructor_names(dim_instructor, fact_recruitment)
    breakdown = build_instructor_breakdown(last3, names)
    roster_names = list(dim_instructor["instructor_key"]) if not dim_instructor.empty else []

    analysis = build_overload_analysis(breakdown, roster_names, approved_by_month(last3))
    analysis["generated_for"] = YearMonth.of(today).key
    return analysis


def get_recruitment_stats(fact_recruitment: pd.DataFrame) -> dict:
    """All-time statistics per instructor plus overall monthly totals."""
    return {
        "stats": build_recruitment_stats(fact_recruitment),
        "overall_monthly_stats": overall_monthly_stats(fact_recruitment),
    }


def find_requests(
    fact_recruitment: pd.DataFrame,
    request_id: str | None = None,
    instructor: str | None = None,
) -> pd.DataFrame:
    """Raw audit lookup by request id and/or instructor; CANCELLED included."""
    result = fact_recruitment
    if request_id is not None:
        result = result[result["request_id"] == request_id.strip()]
    if instructor is not None:
        result = result[result["instructor_key"] == instructor_key(instructor)]
    return result.copy()


def get_available_periods(fact_recruitment: pd.DataFrame) -> list[str]:
    """Period specifiers for UI dropdowns: the rolling periods plus every
    year with at least one parseable response date, newest first."""
    periods = [PERIOD_THIS_MONTH, PERIOD_LAST_3_MONTHS]
    if fact_recruitment.empty:
        return periods
    years = {m[:4] for m in fact_recruitment["response_month"] if isinstance(m, str)}
    periods.extend(f"{PERIOD_YEAR_PREFIX}{y}" for y in sorted(years, reverse=True))
    return periods
