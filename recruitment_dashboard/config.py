"""
Configuration: file paths, sheet layout, thresholds, constants.

Header aliases map the (snake_cased) column headers found in exported
workbooks to the canonical column names used by the fact tables.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: override with the RECRUITMENT_WORKBOOK environment variable
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

RECRUITMENT_WORKBOOK_FILE = Path(
    os.environ.get("RECRUITMENT_WORKBOOK", DATA_DIR / "recruitment_snapshot.xlsx")
)

# ---------------------------------------------------------------------------
# Sheet layout
# ---------------------------------------------------------------------------
RECRUITMENT_LOG_SHEET = "recruitment_log"
ROSTER_SHEET = "instructors"
CALENDAR_SHEET = "calendar_events"
PERSONAL_EVENTS_SHEET = "personal_events"

# Canonical columns per feed
RECRUITMENT_LOG_COLUMNS = [
    "request_id",
    "company_name",
    "education_name",
    "education_date",
    "instructor_name",
    "result",
    "decline_reason",
    "response_date",
    "request_month",
    "event_id",
]
ROSTER_COLUMNS = ["name", "affiliation", "email", "mobile", "fee", "notes", "is_internal"]
CALENDAR_COLUMNS = ["event_id", "summary", "start", "attendees"]
PERSONAL_EVENT_COLUMNS = ["email", "summary", "date", "kind"]

# snake_cased header -> canonical column name
HEADER_ALIASES: dict[str, dict[str, str]] = {
    RECRUITMENT_LOG_SHEET: {
        "request_id": "request_id",
        "requestid": "request_id",
        "company": "company_name",
        "company_name": "company_name",
        "education": "education_name",
        "education_name": "education_name",
        "class_name": "education_name",
        "education_date": "education_date",
        "class_date": "education_date",
        "instructor": "instructor_name",
        "instructor_name": "instructor_name",
        "mentor": "instructor_name",
        "mentor_name": "instructor_name",
        "result": "result",
        "status": "result",
        "decline_reason": "decline_reason",
        "reason": "decline_reason",
        "response_date": "response_date",
        "response_date_time": "response_date",
        "responded_at": "response_date",
        "request_month": "request_month",
        "event_id": "event_id",
    },
    ROSTER_SHEET: {
        "name": "name",
        "instructor": "name",
        "instructor_name": "name",
        "affiliation": "affiliation",
        "email": "email",
        "emails": "email",
        "mobile": "mobile",
        "phone": "mobile",
        "fee": "fee",
        "notes": "notes",
        "is_internal": "is_internal",
        "internal": "is_internal",
    },
    CALENDAR_SHEET: {
        "event_id": "event_id",
        "id": "event_id",
        "summary": "summary",
        "title": "summary",
        "start": "start",
        "start_date_time": "start",
        "start_time": "start",
        "attendees": "attendees",
        "attendee_emails": "attendees",
    },
    PERSONAL_EVENTS_SHEET: {
        "email": "email",
        "instructor_email": "email",
        "summary": "summary",
        "title": "summary",
        "date": "date",
        "kind": "kind",
        "type": "kind",
    },
}

# ---------------------------------------------------------------------------
# Value normalisation
# ---------------------------------------------------------------------------
# Raw status -> canonical result; anything else is treated as REQUESTED
RESULT_ALIASES: dict[str, str] = {
    "APPROVED": "APPROVED",
    "ACCEPTED": "APPROVED",
    "DECLINED": "DECLINED",
    "REJECTED": "DECLINED",
    "CANCELLED": "CANCELLED",
    "CANCELED": "CANCELLED",
    "REQUESTED": "REQUESTED",
}

PERSONAL_EVENT_KINDS = ("PREFERRED", "UNAVAILABLE")
PERSONAL_EVENT_KIND_ALIASES: dict[str, str] = {
    "preferred": "PREFERRED",
    "prefer": "PREFERRED",
    "available": "PREFERRED",
    "선호": "PREFERRED",
    "unavailable": "UNAVAILABLE",
    "busy": "UNAVAILABLE",
    "blocked": "UNAVAILABLE",
    "불가": "UNAVAILABLE",
}
DEFAULT_PERSONAL_EVENT_KIND = "UNAVAILABLE"

# Affiliation values marking an in-house instructor
INTERNAL_AFFILIATIONS = {"내부", "internal"}

# ---------------------------------------------------------------------------
# Analytics thresholds
# ---------------------------------------------------------------------------
TOP_N = 5
TREND_WINDOW_MONTHS = 6
REASON_LIMIT = 5
REASON_DISPLAY_LIMIT = 25
ELLIPSIS = "..."

# Trailing window used by detail view, prediction and overload analysis
TRAILING_MONTHS = 3

# Minimum average monthly approvals (trailing 3 months) per risk level,
# checked from the top down
RISK_BANDS: list[tuple[str, float]] = [
    ("HIGH", 5.0),
    ("MEDIUM", 3.0),
]
DEFAULT_RISK_LEVEL = "LOW"

OVERLOAD_TOP_K = 10
ALTERNATES_POOL_LIMIT = 20
ALTERNATES_PER_INSTRUCTOR = 3

# ---------------------------------------------------------------------------
# Period specifiers
# ---------------------------------------------------------------------------
PERIOD_THIS_MONTH = "thisMonth"
PERIOD_LAST_3_MONTHS = "last3Months"
PERIOD_YEAR_PREFIX = "year"
