"""
Instructor Recruitment — Coordinator Analytics Dashboard

Analytics backend that turns the recruitment log, instructor roster,
calendar attendance and personal availability feeds into dashboard-ready
statistics, rankings, trends and overload risk.

To swap the workbook export for a live feed:
    Hand the rows to the functions in recruitment_dashboard.loaders.rows
    (lists of string-keyed dicts). The fact-table schemas built by
    recruitment_dashboard.transforms remain unchanged.

To connect a front end:
    Call dashboard.get_dashboard(fact_recruitment, dim_instructor, period)
    for the overview, dashboard.get_instructor_detail(...) for one
    instructor and dashboard.get_overload_analysis(...) for risk tiers.
    All return plain dicts.

To tune thresholds:
    Ranking size, trend window, reason truncation and risk bands live in
    recruitment_dashboard.config.
"""
