"""
Calendar attendance and personal availability, joined to the roster by email.

Roster email cells may hold several addresses; the lookup is built with
loaders.utils.split_email_cell, the same helper the calendar and personal
event transforms use, so all three sides compare identical normalised
addresses.
"""

import logging
from datetime import date

import pandas as pd

from .dates import YearMonth
from .loaders.utils import split_email_cell
from .periods import resolve_today

logger = logging.getLogger(__name__)


def build_email_lookup(dim_instructor: pd.DataFrame) -> dict[str, str]:
    """Map every normalised roster address to its instructor.

    When two roster rows claim the same address the earlier row wins.
    """
    lookup: dict[str, str] = {}
    for name, emails in zip(dim_instructor["instructor_key"], dim_instructor["emails"]):
        for email in emails:
            owner = lookup.get(email)
            if owner is not None and owner != name:
                logger.warning(
                    "Address %s is listed for both '%s' and '%s'; keeping '%s'",
                    email, owner, name, owner,
                )
                continue
            lookup[email] = name
    return lookup


def events_in_month(fact_calendar: pd.DataFrame, today: date | None = None) -> pd.DataFrame:
    """Calendar events starting in the calendar month of `today`."""
    if fact_calendar.empty:
        return fact_calendar.copy()
    current = YearMonth.of(resolve_today(today))
    mask = fact_calendar["start_day"].map(
        lambda d: isinstance(d, date) and YearMonth.of(d) == current
    ).astype(bool)
    return fact_calendar[mask].copy()


def count_sessions(
    fact_calendar: pd.DataFrame,
    dim_instructor: pd.DataFrame,
) -> dict[str, int]:
    """Number of events each instructor attended.

    An instructor is counted once per event even if several of their
    addresses are on the attendee list. Instructors without attendance
    are omitted.
    """
    if fact_calendar.empty or dim_instructor.empty:
        return {}

    lookup = build_email_lookup(dim_instructor)
    counts: dict[str, int] = {}
    unmatched = 0

    for attendees in fact_calendar["attendee_emails"]:
        owners = set()
        for email in split_email_cell(attendees):
            owner = lookup.get(email)
            if owner is None:
                unmatched += 1
            else:
                owners.add(owner)
        for owner in owners:
            counts[owner] = counts.get(owner, 0) + 1

    logger.debug("%d attendee addresses did not match the roster", unmatched)
    logger.info("Counted sessions for %d instructors over %d events", len(counts), len(fact_calendar))
    return counts


def rank_class_counts(counts: dict[str, int]) -> list[dict]:
    """[{"name", "count"}] sorted by count descending, then name."""
    return [
        {"name": name, "count": count}
        for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def personal_events_for(fact_personal: pd.DataFrame, emails: frozenset[str]) -> pd.DataFrame:
    """Personal events declared under any of `emails`."""
    if fact_personal.empty or not emails:
        return fact_personal.iloc[0:0].copy()
    mask = fact_personal["emails"].map(lambda cell: bool(cell & emails)).astype(bool)
    return fact_personal[mask].copy()


def availability_summary(
    fact_personal: pd.DataFrame,
    dim_instructor: pd.DataFrame,
    name: str,
) -> dict:
    """Declared preferred and unavailable days for one instructor.

    Returns
    -------
    {"preferred": [...], "unavailable": [...]} where each entry is
    {"date": "YYYY-MM-DD", "summary": ...}, sorted by date. Empty lists
    when the instructor is not on the roster or declared nothing.
    """
    summary = {"preferred": [], "unavailable": []}
    if dim_instructor.empty:
        return summary

    match = dim_instructor[dim_instructor["instructor_key"] == name]
    if match.empty:
        return summary

    events = personal_events_for(fact_personal, match.iloc[0]["emails"])
    for _, row in events.sort_values("day", kind="mergesort").iterrows():
        entry = {"date": row["day"].isoformat(), "summary": row["summary"]}
        summary[row["kind"].lower()].append(entry)
    return summary
