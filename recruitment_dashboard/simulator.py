"""
Simulated feed generator for the recruitment dashboard.

Produces raw rows shaped like the exported sheets, including the messy
parts: both date styles, multi-address email cells, internal instructors,
cancelled requests and the odd unreadable response date. All values are
synthetic.
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd

from .loaders.rows import (
    calendar_from_rows,
    personal_events_from_rows,
    recruitment_log_from_rows,
    roster_from_rows,
)

# Seed for reproducibility
_RNG = np.random.default_rng(42)

# name, affiliation, email cell, approval propensity
_INSTRUCTORS = [
    ("Kim Minji", "external", "minji.kim@example.com", 0.85),
    ("Lee Junho", "external", "junho@example.com; j.lee@lab.example.org", 0.70),
    ("Park Seoyeon", "external", "seoyeon.park@example.com", 0.55),
    ("Choi Hyun", "external", "hyun.choi@example.com, choi.h@example.net", 0.90),
    ("Jung Daeun", "external", "daeun@example.com", 0.40),
    ("Kang Taeho", "external", "taeho.kang@example.com", 0.65),
    ("Yoon Sora", "external", "sora.yoon@example.com", 0.75),
    ("Han Jisoo", "internal", "jisoo.han@example.com", 0.95),
]

_EDUCATIONS = [
    ("Acme Corp", "Data literacy bootcamp"),
    ("Globex", "Intro to machine learning"),
    ("Initech", "Cloud fundamentals"),
    ("Umbrella", "Python for analysts"),
    ("Hooli", "Generative AI workshop"),
]

_DECLINE_REASONS = [
    "Schedule conflict",
    "Schedule conflict",
    "Already booked for another client that week",
    "Topic outside my expertise",
    "Personal reasons",
    "Fee below my usual rate for full-day sessions",
]


def _fmt(day: date, dotted: bool) -> str:
    if dotted:
        return f"{day.year}. {day.month}. {day.day}"
    return day.isoformat()


def generate_roster() -> pd.DataFrame:
    """Roster rows for the simulated instructors."""
    rows = [
        {"name": name, "affiliation": affiliation, "email": email}
        for name, affiliation, email, _ in _INSTRUCTORS
    ]
    return roster_from_rows(rows)


def generate_recruitment_log(
    today: date,
    n_months: int = 8,
    requests_per_month: int = 14,
) -> pd.DataFrame:
    """Recruitment log rows spanning the `n_months` up to `today`."""
    rows = []
    seq = 0
    month_start = date(today.year, today.month, 1)

    for m in range(n_months - 1, -1, -1):
        start = (pd.Timestamp(month_start) - pd.DateOffset(months=m)).date()
        for _ in range(requests_per_month):
            seq += 1
            name, _, _, propensity = _INSTRUCTORS[_RNG.integers(len(_INSTRUCTORS))]
            company, education = _EDUCATIONS[_RNG.integers(len(_EDUCATIONS))]

            response_day = start + timedelta(days=int(_RNG.integers(0, 27)))
            if response_day > today:
                response_day = today
            education_day = response_day + timedelta(days=int(_RNG.integers(3, 40)))

            roll = _RNG.random()
            if roll < 0.05:
                result, responded = "CANCELLED", False
            elif roll < 0.12:
                result, responded = "REQUESTED", False
            elif _RNG.random() < propensity:
                result, responded = ("ACCEPTED" if _RNG.random() < 0.2 else "APPROVED"), True
            else:
                result, responded = "DECLINED", True

            dotted = bool(_RNG.random() < 0.5)
            response = _fmt(response_day, dotted) if responded else None
            if responded and _RNG.random() < 0.02:
                response = "pending sync"

            rows.append({
                "request_id": f"REQ-{today.year}-{seq:04d}",
                "company_name": company,
                "education_name": education,
                "education_date": _fmt(education_day, not dotted),
                "instructor_name": name,
                "result": result,
                "decline_reason": (
                    _DECLINE_REASONS[_RNG.integers(len(_DECLINE_REASONS))]
                    if result == "DECLINED" else None
                ),
                "response_date": response,
                "request_month": start.strftime("%Y-%m"),
            })

    return recruitment_log_from_rows(rows)


def generate_calendar_events(today: date, n_events: int = 20) -> pd.DataFrame:
    """Calendar events in the current month with instructor attendees."""
    rows = []
    month_start = date(today.year, today.month, 1)
    for i in range(n_events):
        name, _, email_cell, _ = _INSTRUCTORS[_RNG.integers(len(_INSTRUCTORS))]
        # Some invitations go to a secondary address, some list both
        addresses = [e.strip() for e in email_cell.replace(";", ",").split(",")]
        picked = addresses if _RNG.random() < 0.2 else [addresses[_RNG.integers(len(addresses))]]
        attendees = ["coordinator@example.com"] + [a.upper() if _RNG.random() < 0.1 else a for a in picked]
        start = month_start + timedelta(days=int(_RNG.integers(0, 27)))
        rows.append({
            "event_id": f"evt{i:03d}",
            "summary": _EDUCATIONS[_RNG.integers(len(_EDUCATIONS))][1],
            "start": f"{start.isoformat()}T09:00:00",
            "attendees": ", ".join(attendees),
        })
    return calendar_from_rows(rows)


def generate_personal_events(today: date, per_instructor: int = 3) -> pd.DataFrame:
    """Declared preferred/unavailable days for the coming weeks."""
    rows = []
    for name, _, email_cell, _ in _INSTRUCTORS:
        primary = email_cell.replace(";", ",").split(",")[0].strip()
        for _ in range(per_instructor):
            day = today + timedelta(days=int(_RNG.integers(1, 45)))
            kind = "preferred" if _RNG.random() < 0.4 else "unavailable"
            rows.append({
                "email": primary,
                "summary": "Available for sessions" if kind == "preferred" else "Personal schedule",
                "date": _fmt(day, bool(_RNG.random() < 0.5)),
                "kind": kind,
            })
    return personal_events_from_rows(rows)


def generate_snapshot(today: date) -> dict[str, pd.DataFrame]:
    """All four raw feeds, keyed like loaders.workbook.load_snapshot()."""
    return {
        "recruitment_log": generate_recruitment_log(today),
        "roster": generate_roster(),
        "calendar_events": generate_calendar_events(today),
        "personal_events": generate_personal_events(today),
    }
