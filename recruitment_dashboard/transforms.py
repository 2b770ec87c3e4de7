"""
Data transforms: clean raw feed frames into fact and dimension tables.

Every date-bearing field is normalised exactly once here, so the
aggregators downstream only ever compare "YYYY-MM" tags and
datetime.date values.
"""

import logging

import pandas as pd

from .config import (
    DEFAULT_PERSONAL_EVENT_KIND,
    INTERNAL_AFFILIATIONS,
    PERSONAL_EVENT_KIND_ALIASES,
    PERSONAL_EVENT_KINDS,
    RESULT_ALIASES,
)
from .dates import month_key, normalize_day
from .loaders.utils import (
    instructor_key,
    normalise_name,
    safe_bool,
    safe_str,
    split_email_cell,
)

logger = logging.getLogger(__name__)

FACT_RECRUITMENT_COLUMNS = [
    "request_id",
    "company_name",
    "education_name",
    "education_date",
    "instructor_name",
    "instructor_key",
    "result",
    "decline_reason",
    "response_date",
    "request_month",
    "event_id",
    "education_month",
    "education_day",
    "response_month",
    "response_day",
]

DIM_INSTRUCTOR_COLUMNS = [
    "name",
    "instructor_key",
    "email",
    "emails",
    "affiliation",
    "is_internal",
    "mobile",
    "fee",
    "notes",
    "roster_order",
]

FACT_CALENDAR_COLUMNS = ["event_id", "summary", "start", "start_day", "attendee_emails"]

FACT_PERSONAL_COLUMNS = ["emails", "summary", "date", "day", "kind"]


def normalise_result(raw) -> str:
    """Map a raw status cell to REQUESTED/APPROVED/DECLINED/CANCELLED."""
    s = safe_str(raw)
    if s is None:
        return "REQUESTED"
    return RESULT_ALIASES.get(s.upper(), "REQUESTED")


def build_fact_recruitment(log_df: pd.DataFrame) -> pd.DataFrame:
    """Clean the raw recruitment log into fact_recruitment.

    Parameters
    ----------
    log_df : Raw rows from load_recruitment_log() or recruitment_log_from_rows().

    Returns
    -------
    fact_recruitment DataFrame with columns FACT_RECRUITMENT_COLUMNS.
    Rows without a request id are dropped; unparseable dates leave the
    derived month/day columns as None.
    """
    rows = []
    skipped = 0

    for _, raw in log_df.iterrows():
        request_id = safe_str(raw.get("request_id"))
        if request_id is None:
            skipped += 1
            continue

        company_name = safe_str(raw.get("company_name"))
        education_name = safe_str(raw.get("education_name")) or company_name
        education_date = raw.get("education_date")
        response_date = raw.get("response_date")
        result = normalise_result(raw.get("result"))
        name = normalise_name(raw.get("instructor_name"))

        decline_reason = safe_str(raw.get("decline_reason"))
        if result != "DECLINED":
            decline_reason = None

        rows.append({
            "request_id": request_id,
            "company_name": company_name,
            "education_name": education_name,
            "education_date": safe_str(education_date),
            "instructor_name": name,
            "instructor_key": instructor_key(name),
            "result": result,
            "decline_reason": decline_reason,
            "response_date": safe_str(response_date),
            "request_month": safe_str(raw.get("request_month")),
            "event_id": safe_str(raw.get("event_id")),
            "education_month": month_key(education_date),
            "education_day": normalize_day(education_date),
            "response_month": month_key(response_date),
            "response_day": normalize_day(response_date),
        })

    if skipped:
        logger.debug("Dropped %d log rows without a request id", skipped)

    df = pd.DataFrame(rows, columns=FACT_RECRUITMENT_COLUMNS, dtype=object)
    unparsed = int((df["response_date"].notna() & df["response_month"].isna()).sum())
    if unparsed:
        logger.warning("%d responded rows have an unparseable response date", unparsed)

    logger.info("Built fact_recruitment with %d rows", len(df))
    return df


def build_dim_instructor(
    roster_df: pd.DataFrame,
    exclude_internal: bool = True,
) -> pd.DataFrame:
    """Build the instructor dimension from roster rows.

    Parameters
    ----------
    roster_df : Raw rows from load_instructor_roster() or roster_from_rows().
    exclude_internal : Drop in-house instructors (the dashboards report
        external instructors only).

    Returns
    -------
    dim_instructor DataFrame with columns DIM_INSTRUCTOR_COLUMNS, in roster
    order, one row per distinct instructor key (first row wins).
    """
    rows = []
    seen: set[str] = set()

    for _, raw in roster_df.iterrows():
        name = normalise_name(raw.get("name"))
        if not name:
            continue

        affiliation = safe_str(raw.get("affiliation"))
        is_internal = safe_bool(raw.get("is_internal")) or (
            affiliation is not None and affiliation.lower() in INTERNAL_AFFILIATIONS
        )
        if exclude_internal and is_internal:
            continue

        key = instructor_key(name)
        if key in seen:
            logger.warning("Duplicate roster entry for '%s'; keeping the first", name)
            continue
        seen.add(key)

        email = safe_str(raw.get("email"))
        rows.append({
            "name": name,
            "instructor_key": key,
            "email": email,
            "emails": split_email_cell(email),
            "affiliation": affiliation,
            "is_internal": is_internal,
            "mobile": safe_str(raw.get("mobile")),
            "fee": safe_str(raw.get("fee")),
            "notes": safe_str(raw.get("notes")),
            "roster_order": len(rows),
        })

    df = pd.DataFrame(rows, columns=DIM_INSTRUCTOR_COLUMNS, dtype=object)
    logger.info("Built dim_instructor with %d rows", len(df))
    return df


def build_fact_calendar(events_df: pd.DataFrame) -> pd.DataFrame:
    """Build the calendar attendance fact table.

    Returns
    -------
    fact_calendar DataFrame with columns:
        event_id, summary, start, start_day, attendee_emails
    """
    rows = []
    for _, raw in events_df.iterrows():
        start = raw.get("start")
        rows.append({
            "event_id": safe_str(raw.get("event_id")),
            "summary": safe_str(raw.get("summary")),
            "start": safe_str(start),
            "start_day": normalize_day(start),
            "attendee_emails": split_email_cell(raw.get("attendees")),
        })

    df = pd.DataFrame(rows, columns=FACT_CALENDAR_COLUMNS, dtype=object)
    logger.info("Built fact_calendar with %d rows", len(df))
    return df


def normalise_kind(raw) -> str | None:
    """Map a raw personal-event kind to PREFERRED/UNAVAILABLE.

    Blank means UNAVAILABLE; an unknown value yields None.
    """
    s = safe_str(raw)
    if s is None:
        return DEFAULT_PERSONAL_EVENT_KIND
    if s.upper() in PERSONAL_EVENT_KINDS:
        return s.upper()
    return PERSONAL_EVENT_KIND_ALIASES.get(s.lower())


def build_fact_personal_events(personal_df: pd.DataFrame) -> pd.DataFrame:
    """Build the personal availability fact table.

    Rows without an email, without a parseable day, or with an unknown
    kind are dropped.

    Returns
    -------
    fact_personal_events DataFrame with columns:
        emails, summary, date, day, kind
    """
    rows = []
    dropped = 0
    for _, raw in personal_df.iterrows():
        emails = split_email_cell(raw.get("email"))
        day = normalize_day(raw.get("date"))
        kind = normalise_kind(raw.get("kind"))
        if not emails or day is None or kind is None:
            dropped += 1
            continue
        rows.append({
            "emails": emails,
            "summary": safe_str(raw.get("summary")),
            "date": safe_str(raw.get("date")),
            "day": day,
            "kind": kind,
        })

    if dropped:
        logger.debug("Dropped %d unusable personal event rows", dropped)

    df = pd.DataFrame(rows, columns=FACT_PERSONAL_COLUMNS, dtype=object)
    logger.info("Built fact_personal_events with %d rows", len(df))
    return df
