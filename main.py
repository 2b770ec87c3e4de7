"""
Instructor Recruitment — End-to-end analytics pipeline.

Runs the full pipeline from the exported workbook (or simulated feeds when
no workbook is present) to dashboard-ready outputs and prints smoke-test
summaries.

Usage:
    python main.py [period]

    period: thisMonth (default), last3Months or yearYYYY
"""

import logging
import sys

import pandas as pd

from recruitment_dashboard.config import PERIOD_THIS_MONTH, RECRUITMENT_WORKBOOK_FILE
from recruitment_dashboard.dashboard import (
    get_available_periods,
    get_dashboard,
    get_instructor_detail,
    get_overload_analysis,
    get_recruitment_stats,
)
from recruitment_dashboard.loaders import RecordStoreError, load_snapshot
from recruitment_dashboard.simulator import generate_snapshot
from recruitment_dashboard.transforms import (
    build_dim_instructor,
    build_fact_calendar,
    build_fact_personal_events,
    build_fact_recruitment,
)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main(period: str = PERIOD_THIS_MONTH) -> int:
    """Run the full analytics pipeline and print smoke-test outputs."""

    today = pd.Timestamp.today().date()

    print("=" * 70)
    print("  INSTRUCTOR RECRUITMENT — Coordinator Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    if RECRUITMENT_WORKBOOK_FILE.exists():
        try:
            snapshot = load_snapshot(str(RECRUITMENT_WORKBOOK_FILE))
        except RecordStoreError as e:
            logger.error("Could not load recruitment snapshot: %s", e)
            return 1
        print(f"\nWorkbook: {RECRUITMENT_WORKBOOK_FILE}")
    else:
        logger.warning("%s not found; using simulated feeds", RECRUITMENT_WORKBOOK_FILE)
        snapshot = generate_snapshot(today)
        print("\nWorkbook not found — using simulated feeds")

    for feed, df in snapshot.items():
        rows = "unavailable" if df is None else f"{len(df)} rows"
        print(f"  {feed:18s} {rows}")

    # ------------------------------------------------------------------
    # 2. Build fact & dimension tables
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] BUILDING FACT & DIMENSION TABLES")
    print("-" * 40)

    fact_recruitment = build_fact_recruitment(snapshot["recruitment_log"])
    dim_instructor = build_dim_instructor(snapshot["roster"])
    fact_personal = build_fact_personal_events(snapshot["personal_events"])
    fact_calendar = None
    if snapshot["calendar_events"] is not None:
        fact_calendar = build_fact_calendar(snapshot["calendar_events"])

    print(f"\nfact_recruitment: {len(fact_recruitment)} rows")
    if not fact_recruitment.empty:
        cols = ["request_id", "instructor_name", "result", "response_date", "response_month"]
        print(fact_recruitment[cols].head(10).to_string(index=False))
    print(f"\ndim_instructor: {len(dim_instructor)} rows")
    if not dim_instructor.empty:
        print(dim_instructor[["name", "email", "affiliation"]].to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    print(f"\nAvailable periods: {get_available_periods(fact_recruitment)}")

    dashboard = get_dashboard(fact_recruitment, dim_instructor, period, fact_calendar, today)
    print(f"\nDashboard — {dashboard['period_label']}:")
    print(f"  This period: {dashboard['this_period']}")
    print(f"  Top approval rate: {[(r['name'], r['rate']) for r in dashboard['top_approval_rate']]}")
    print(f"  Top decline rate:  {[(r['name'], r['rate']) for r in dashboard['top_decline_rate']]}")
    print(f"  Decline reasons:   {[(r['label'], r['count']) for r in dashboard['decline_reasons']]}")
    print(f"  Class counts:      {dashboard['class_counts']}")
    print("\n  Monthly trend (education date):")
    for row in dashboard["monthly_trend"]:
        print(f"    {row['month']} | total {row['total']:3d} | approved {row['approved']:3d} | declined {row['declined']:3d}")

    print("\n  Per instructor:")
    for name, stats in dashboard["per_instructor"].items():
        print(f"    {name:14s} | {stats}")

    if dashboard["instructor_details"]:
        busiest = dashboard["instructor_details"][0]["name"]
        detail = get_instructor_detail(
            fact_recruitment, busiest, period, today, dim_instructor, fact_personal
        )
        print(f"\nInstructor detail — {busiest}:")
        for key in ("this_period", "last_3_months", "predicted_next_month", "avg_response_days", "availability"):
            print(f"  {key:22s} {detail[key]}")

    overload = get_overload_analysis(fact_recruitment, dim_instructor, today)
    print(f"\nOverload analysis — {overload['generated_for']}:")
    for name, info in overload["per_instructor"].items():
        print(f"  {name:14s} | {info['risk_level']:6s} | avg {info['avg_monthly_approved']}/month | alternates {info['alternates']}")

    stats = get_recruitment_stats(fact_recruitment)
    print(f"\nAll-time stats: {len(stats['stats'])} instructors, "
          f"{len(stats['overall_monthly_stats'])} request months")

    # ------------------------------------------------------------------
    # 4. Consistency checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] CONSISTENCY CHECKS")
    print("-" * 40)

    this_period = dashboard["this_period"]
    check1 = this_period["approved"] + this_period["declined"] <= this_period["total"]
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] approved + declined <= total")

    check2 = this_period["approval_rate"] + this_period["decline_rate"] <= 100.1 + 1e-9
    print(f"  [{'PASS' if check2 else 'FAIL'}] approval_rate + decline_rate <= 100 (+0.1 rounding)")

    roster = set(dim_instructor["instructor_key"])
    check3 = roster.issubset(dashboard["per_instructor"])
    print(f"  [{'PASS' if check3 else 'FAIL'}] every roster instructor present in breakdown")

    summed = sum(s["total"] for s in dashboard["per_instructor"].values())
    check4 = summed == this_period["total"]
    print(f"  [{'PASS' if check4 else 'FAIL'}] per-instructor totals sum to {summed} (expect {this_period['total']})")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else PERIOD_THIS_MONTH))
