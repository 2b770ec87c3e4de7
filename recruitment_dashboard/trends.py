"""
Monthly trend series.

Two bases exist and are not interchangeable: "education" buckets requests
by the month of the session (intake), "response" by the month the
instructor answered (completion). Only months with at least one record
appear; gaps are not zero-filled.
"""

import logging

import pandas as pd

from .kpis import active_records

logger = logging.getLogger(__name__)

_BASIS_COLUMNS = {
    "education": "education_month",
    "response": "response_month",
}


def build_trend(
    records: pd.DataFrame,
    basis: str,
    window_months: int | None = None,
) -> list[dict]:
    """Build an ordered monthly series of request outcomes.

    Parameters
    ----------
    records : fact_recruitment rows.
    basis : "education" or "response".
    window_months : Keep only the most recent N months present in the
        data; None keeps every month.

    Returns
    -------
    List of {"month", "total", "approved", "declined"} sorted by month
    ascending. CANCELLED records are not counted.
    """
    if basis not in _BASIS_COLUMNS:
        raise ValueError(f"Unknown trend basis '{basis}'")

    active = active_records(records)
    if active.empty:
        return []

    month_col = _BASIS_COLUMNS[basis]
    dated = active[active[month_col].map(lambda m: isinstance(m, str) and bool(m)).astype(bool)]
    if dated.empty:
        return []

    grouped = pd.DataFrame({
        "month": dated[month_col],
        "total": 1,
        "approved": (dated["result"] == "APPROVED").astype(int),
        "declined": (dated["result"] == "DECLINED").astype(int),
    }).groupby("month")[["total", "approved", "declined"]].sum().sort_index()

    if window_months is not None:
        grouped = grouped.tail(window_months)

    trend = [
        {
            "month": month,
            "total": int(row["total"]),
            "approved": int(row["approved"]),
            "declined": int(row["declined"]),
        }
        for month, row in grouped.iterrows()
    ]
    logger.debug("Built %s-basis trend with %d months", basis, len(trend))
    return trend
