"""
KPI computation functions — pure functions with no side effects.

Provides result counting and rates, the per-instructor breakdown and its
rankings, response latency, decline-reason ranking and the next-month
prediction.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from .config import ELLIPSIS, REASON_DISPLAY_LIMIT, REASON_LIMIT, TOP_N
from .loaders.utils import safe_str

logger = logging.getLogger(__name__)

_COUNT_COLUMNS = ["total", "approved", "declined"]
_BREAKDOWN_COLUMNS = _COUNT_COLUMNS + ["approval_rate", "decline_rate"]
_RATE_METRICS = {"approval_rate", "decline_rate"}


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from zero (Python's round() rounds half to even)."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calc_rate(count: int, total: int) -> float:
    """Return count/total as a percentage with one decimal; 0.0 if total == 0."""
    if total == 0:
        return 0.0
    exact = Decimal(int(count)) * 100 / Decimal(int(total))
    return float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def active_records(records: pd.DataFrame) -> pd.DataFrame:
    """Drop CANCELLED records; they never count towards rates or rankings."""
    if records.empty:
        return records
    return records[records["result"] != "CANCELLED"]


def summarise_results(records: pd.DataFrame) -> dict:
    """Return counts and rates for a record set.

    Returns
    -------
    {"total", "approved", "declined", "approval_rate", "decline_rate"}
    where total counts non-CANCELLED records.
    """
    active = active_records(records)
    total = len(active)
    approved = int((active["result"] == "APPROVED").sum()) if total else 0
    declined = int((active["result"] == "DECLINED").sum()) if total else 0

    return {
        "total": total,
        "approved": approved,
        "declined": declined,
        "approval_rate": calc_rate(approved, total),
        "decline_rate": calc_rate(declined, total),
    }


def known_instructor_names(
    dim_instructor: pd.DataFrame,
    fact_recruitment: pd.DataFrame,
) -> list[str]:
    """Every instructor the dashboards report on.

    Roster names first (roster order), then names that only appear in the
    log, sorted. Blank log names are ignored.
    """
    names = list(dim_instructor["instructor_key"]) if not dim_instructor.empty else []
    on_roster = set(names)

    if not fact_recruitment.empty:
        log_only = {
            key for key in fact_recruitment["instructor_key"].dropna()
            if key and key not in on_roster
        }
        names.extend(sorted(log_only))
    return names


def build_instructor_breakdown(
    records: pd.DataFrame,
    instructor_names: list[str],
) -> pd.DataFrame:
    """Per-instructor counts and rates for a (filtered) record set.

    Parameters
    ----------
    records : fact_recruitment rows, usually already period-filtered.
    instructor_names : Every known instructor; all of them appear in the
        result, zero-filled when they have no records.

    Returns
    -------
    DataFrame indexed by instructor name with columns:
        total, approved, declined, approval_rate, decline_rate
    Names present in `records` but missing from `instructor_names` are
    appended after them.
    """
    active = active_records(records)
    active = active[active["instructor_key"].fillna("") != ""] if not active.empty else active

    if active.empty:
        counts = pd.DataFrame(columns=_COUNT_COLUMNS, dtype="int64")
    else:
        flags = pd.DataFrame({
            "instructor_key": active["instructor_key"],
            "total": 1,
            "approved": (active["result"] == "APPROVED").astype(int),
            "declined": (active["result"] == "DECLINED").astype(int),
        })
        counts = flags.groupby("instructor_key")[_COUNT_COLUMNS].sum()

    extra = sorted(set(counts.index) - set(instructor_names))
    index = list(dict.fromkeys(instructor_names)) + extra

    breakdown = counts.reindex(index, fill_value=0).astype("int64")
    breakdown.index.name = "instructor"
    breakdown["approval_rate"] = [
        calc_rate(a, t) for a, t in zip(breakdown["approved"], breakdown["total"])
    ]
    breakdown["decline_rate"] = [
        calc_rate(d, t) for d, t in zip(breakdown["declined"], breakdown["total"])
    ]
    return breakdown[_BREAKDOWN_COLUMNS]


def breakdown_to_dict(breakdown: pd.DataFrame) -> dict[str, dict]:
    """Convert a breakdown frame into {name: {total, approved, declined, ...}}."""
    result = {}
    for name, row in breakdown.iterrows():
        result[name] = {
            "total": int(row["total"]),
            "approved": int(row["approved"]),
            "declined": int(row["declined"]),
            "approval_rate": float(row["approval_rate"]),
            "decline_rate": float(row["decline_rate"]),
        }
    return result


def top_n(breakdown: pd.DataFrame, metric: str, n: int = TOP_N) -> list[dict]:
    """Rank instructors by a rate metric.

    Only instructors with total > 0 are eligible. Sort order: metric
    descending, total descending, name ascending.

    Returns
    -------
    List of {"name", "rate", "approved", "declined", "total"}.
    """
    if metric not in _RATE_METRICS:
        raise ValueError(f"Unknown ranking metric '{metric}'")

    eligible = breakdown[breakdown["total"] > 0].reset_index()
    if eligible.empty:
        return []

    name_col = eligible.columns[0]
    ranked = eligible.sort_values(
        [metric, "total", name_col],
        ascending=[False, False, True],
        kind="mergesort",
    ).head(n)

    return [
        {
            "name": row[name_col],
            "rate": float(row[metric]),
            "approved": int(row["approved"]),
            "declined": int(row["declined"]),
            "total": int(row["total"]),
        }
        for _, row in ranked.iterrows()
    ]


def top_by_count(breakdown: pd.DataFrame, column: str) -> dict | None:
    """Instructor with the highest raw count in `column` (name asc on ties).

    None when nobody has a non-zero count.
    """
    candidates = breakdown[breakdown[column] > 0].reset_index()
    if candidates.empty:
        return None
    name_col = candidates.columns[0]
    best = candidates.sort_values(
        [column, name_col], ascending=[False, True], kind="mergesort"
    ).iloc[0]
    return {"name": best[name_col], "count": int(best[column])}


def avg_response_days(records: pd.DataFrame) -> int | None:
    """Average days between response and education date, approved requests only.

    Samples need both day-granularity dates; negative samples (response
    after the session) are discarded. Returns the mean rounded half up,
    or None if no valid sample exists.
    """
    if records.empty:
        return None

    approved = records[records["result"] == "APPROVED"]
    samples = []
    for education_day, response_day in zip(approved["education_day"], approved["response_day"]):
        if education_day is None or response_day is None:
            continue
        if pd.isna(education_day) or pd.isna(response_day):
            continue
        days = (education_day - response_day).days
        if days >= 0:
            samples.append(days)

    if not samples:
        return None
    return int(round_half_up(sum(samples) / len(samples)))


def _declined_with_reason(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return records
    declined = records[records["result"] == "DECLINED"]
    return declined[declined["decline_reason"].fillna("").str.strip() != ""]


def truncate_reason(reason: str, limit: int = REASON_DISPLAY_LIMIT) -> str:
    if len(reason) <= limit:
        return reason
    return reason[:limit] + ELLIPSIS


def rank_decline_reasons(
    records: pd.DataFrame,
    limit: int = REASON_LIMIT,
    display_limit: int = REASON_DISPLAY_LIMIT,
) -> list[dict]:
    """Most frequent decline reasons.

    Returns
    -------
    Up to `limit` dicts {"reason", "label", "count"} ordered by count
    descending then reason ascending. `reason` is the full text, `label`
    the display version truncated to `display_limit` characters.
    """
    declined = _declined_with_reason(records)
    if declined.empty:
        return []

    counts = declined["decline_reason"].str.strip().value_counts()
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:limit]
    return [
        {"reason": reason, "label": truncate_reason(reason, display_limit), "count": int(count)}
        for reason, count in ranked
    ]


def decline_reason_details(records: pd.DataFrame) -> list[dict]:
    """Every decline reason with its request context, in record order."""
    declined = _declined_with_reason(records)
    return [
        {
            "reason": row["decline_reason"],
            "education_name": safe_str(row["education_name"]) or "",
            "education_date": safe_str(row["education_date"]) or "",
            "response_date": safe_str(row["response_date"]) or "",
        }
        for _, row in declined.iterrows()
    ]


def predict_next_month(stats: dict) -> int:
    """Expected approvals next month from trailing 3-month stats.

    avg_monthly = total / 3; approval_rate = approved / total (0 if no
    requests); prediction = avg_monthly * approval_rate rounded half up.
    A plain linear heuristic, kept exactly as such.
    """
    total = stats.get("total", 0)
    if total == 0:
        return 0
    avg_monthly = total / 3
    approval_rate = stats.get("approved", 0) / total
    return int(round_half_up(avg_monthly * approval_rate))


def _monthly_counts(
    records: pd.DataFrame,
    month_column: str,
    keep_untagged: bool = False,
) -> dict[str, dict]:
    stats: dict[str, dict] = {}
    for month, result in zip(records[month_column], records["result"]):
        if not isinstance(month, str) or not month:
            if not keep_untagged:
                continue
            month = ""
        entry = stats.setdefault(month, {"approved": 0, "declined": 0, "total": 0})
        entry["total"] += 1
        if result == "APPROVED":
            entry["approved"] += 1
        elif result == "DECLINED":
            entry["declined"] += 1
    return dict(sorted(stats.items()))


def overall_monthly_stats(records: pd.DataFrame) -> dict[str, dict]:
    """{request_month: {approved, declined, total}} over non-CANCELLED records.

    Uses the precomputed request_month tag; records without one are skipped.
    """
    active = active_records(records)
    if active.empty:
        return {}
    return _monthly_counts(active, "request_month")


def build_recruitment_stats(records: pd.DataFrame) -> list[dict]:
    """All-time statistics per instructor, sorted by instructor name.

    Returns
    -------
    List of dicts with keys:
        instructor_name, total, approved, declined, approval_rate,
        decline_rate, education_dates, decline_reasons, monthly_stats
    """
    active = active_records(records)
    if active.empty:
        return []
    active = active[active["instructor_key"].fillna("") != ""]

    stats = []
    for name, group in active.groupby("instructor_key", sort=True):
        summary = summarise_results(group)
        education_dates = sorted({d for d in group["education_date"] if isinstance(d, str) and d})
        reasons = [
            {
                "education_name": safe_str(row["education_name"]) or "",
                "education_date": safe_str(row["education_date"]) or "",
                "decline_reason": row["decline_reason"],
                "request_month": safe_str(row["request_month"]) or "",
            }
            for _, row in _declined_with_reason(group).iterrows()
        ]
        # Records missing a request_month tag are grouped under ""
        monthly = _monthly_counts(group, "request_month", keep_untagged=True)

        stats.append({
            "instructor_name": name,
            "total": summary["total"],
            "approved": summary["approved"],
            "declined": summary["declined"],
            "approval_rate": summary["approval_rate"],
            "decline_rate": summary["decline_rate"],
            "education_dates": education_dates,
            "decline_reasons": reasons,
            "monthly_stats": monthly,
        })

    logger.info("Computed recruitment stats for %d instructors", len(stats))
    return stats
