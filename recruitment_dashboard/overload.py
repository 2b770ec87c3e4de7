"""
Overload risk: trailing approved volume per instructor, bucketed into
HIGH / MEDIUM / LOW, with under-used roster instructors proposed as
alternates.
"""

import logging

import pandas as pd

from .config import (
    ALTERNATES_PER_INSTRUCTOR,
    ALTERNATES_POOL_LIMIT,
    DEFAULT_RISK_LEVEL,
    OVERLOAD_TOP_K,
    RISK_BANDS,
    TRAILING_MONTHS,
)
from .kpis import active_records, round_half_up

logger = logging.getLogger(__name__)


def classify_overload_risk(approved_last_3_months: int) -> str:
    """Return 'HIGH', 'MEDIUM' or 'LOW'.

    Logic
    -----
    avg = approved_last_3_months / 3
        HIGH    if avg >= 5
        MEDIUM  if avg >= 3
        LOW     otherwise
    """
    avg_monthly = approved_last_3_months / TRAILING_MONTHS
    for level, minimum in RISK_BANDS:
        if avg_monthly >= minimum:
            return level
    return DEFAULT_RISK_LEVEL


def select_alternates(
    roster_names: list[str],
    loaded_names: set[str] | list[str],
    limit: int = ALTERNATES_POOL_LIMIT,
) -> list[str]:
    """Roster instructors outside the loaded set, in roster order, capped."""
    loaded = set(loaded_names)
    return [name for name in roster_names if name not in loaded][:limit]


def approved_by_month(records: pd.DataFrame) -> dict[str, dict[str, int]]:
    """{instructor: {response_month: approved}} for approved records."""
    active = active_records(records)
    result: dict[str, dict[str, int]] = {}
    if active.empty:
        return result
    approved = active[active["result"] == "APPROVED"]
    for name, month in zip(approved["instructor_key"], approved["response_month"]):
        if not name or not isinstance(month, str):
            continue
        months = result.setdefault(name, {})
        months[month] = months.get(month, 0) + 1
    return {name: dict(sorted(months.items())) for name, months in result.items()}


def build_overload_analysis(
    last3_breakdown: pd.DataFrame,
    roster_names: list[str],
    monthly_approved: dict[str, dict[str, int]] | None = None,
    top_k: int = OVERLOAD_TOP_K,
    alternates_per_instructor: int = ALTERNATES_PER_INSTRUCTOR,
    pool_limit: int = ALTERNATES_POOL_LIMIT,
) -> dict:
    """Classify the busiest instructors and propose alternates.

    Parameters
    ----------
    last3_breakdown : Instructor breakdown over the trailing 3 months
        (see kpis.build_instructor_breakdown).
    roster_names : Roster order used for alternate selection.
    monthly_approved : Optional per-month approvals for display.
    top_k : How many loaded instructors to analyse.

    Returns
    -------
    {
        "per_instructor": {
            name: {"risk_level", "approved_last_3_months",
                   "avg_monthly_approved", "monthly_breakdown", "alternates"},
        },
        "alternates_pool": [...],
    }
    """
    monthly_approved = monthly_approved or {}

    loaded = last3_breakdown[last3_breakdown["approved"] > 0].reset_index()
    if not loaded.empty:
        name_col = loaded.columns[0]
        loaded = loaded.sort_values(
            ["approved", name_col], ascending=[False, True], kind="mergesort"
        ).head(top_k)
        loaded_names = list(loaded[name_col])
        approved_counts = [int(v) for v in loaded["approved"]]
    else:
        loaded_names, approved_counts = [], []

    pool = select_alternates(roster_names, loaded_names, pool_limit)

    per_instructor = {}
    for name, approved in zip(loaded_names, approved_counts):
        per_instructor[name] = {
            "risk_level": classify_overload_risk(approved),
            "approved_last_3_months": approved,
            "avg_monthly_approved": round_half_up(approved / TRAILING_MONTHS, 1),
            "monthly_breakdown": monthly_approved.get(name, {}),
            "alternates": pool[:alternates_per_instructor],
        }

    high = sum(1 for v in per_instructor.values() if v["risk_level"] == "HIGH")
    logger.info(
        "Overload analysis: %d loaded instructors, %d high risk, %d alternates",
        len(per_instructor), high, len(pool),
    )
    return {"per_instructor": per_instructor, "alternates_pool": pool}
