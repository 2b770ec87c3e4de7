"""Unit tests for the workbook and in-memory row loaders."""

from datetime import datetime

import openpyxl
import pytest

from recruitment_dashboard.config import (
    CALENDAR_SHEET,
    PERSONAL_EVENTS_SHEET,
    RECRUITMENT_LOG_COLUMNS,
    RECRUITMENT_LOG_SHEET,
    ROSTER_SHEET,
)
from recruitment_dashboard.loaders import (
    RecordStoreError,
    load_instructor_roster,
    load_personal_events,
    load_recruitment_log,
    load_snapshot,
    rows_to_frame,
)
from recruitment_dashboard.loaders.utils import find_header_row, map_headers, to_snake_case


def _write_workbook(path, sheets):
    """Write {sheet_name: [row, ...]} to an xlsx file."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return str(path)


@pytest.fixture
def workbook(tmp_path):
    return _write_workbook(tmp_path / "snapshot.xlsx", {
        RECRUITMENT_LOG_SHEET: [
            ["Recruitment export"],
            [],
            ["Status", "Request ID", "Mentor Name", "Class Date", "Response Date", "Ignored"],
            ["ACCEPTED", "R1", "Kim", "2026. 2. 3", datetime(2026, 1, 10, 9, 0), "x"],
            [None, None, None, None, None, None],
            ["DECLINED", "R2", "Lee", "2026-02-20", "2026-01-11", "y"],
        ],
        ROSTER_SHEET: [
            ["Name", "Affiliation", "Email"],
            ["Kim", "External", "kim@a.com; kim@b.com"],
            ["Lee", "내부", "lee@a.com"],
        ],
        CALENDAR_SHEET: [
            ["Event ID", "Summary", "Start", "Attendees"],
            ["e1", "Class", "2026-01-05T10:00:00", "kim@a.com"],
        ],
    })


def test_to_snake_case():
    assert to_snake_case("Request ID") == "request_id"
    assert to_snake_case("responseDate") == "response_date"
    assert to_snake_case(" Start (Date/Time) ") == "start_date_time"


def test_map_headers_first_occurrence_wins():
    aliases = {"status": "result", "result": "result", "mentor": "instructor_name"}
    assert map_headers(["Result", None, "Status", "Mentor", "Other"], aliases) == {
        0: "result",
        3: "instructor_name",
    }


def test_find_header_row_offset(workbook):
    wb = openpyxl.load_workbook(workbook)
    ws = wb[RECRUITMENT_LOG_SHEET]
    assert find_header_row(ws, {"status", "request_id", "mentor_name"}) == 3
    assert find_header_row(ws, {"nothing", "matches"}) is None
    wb.close()


def test_load_recruitment_log_aliases_and_blank_rows(workbook):
    """Headers are matched by alias; blank rows skipped; cells kept raw."""
    df = load_recruitment_log(workbook)

    assert list(df.columns) == RECRUITMENT_LOG_COLUMNS
    assert list(df["request_id"]) == ["R1", "R2"]
    assert list(df["instructor_name"]) == ["Kim", "Lee"]
    assert list(df["result"]) == ["ACCEPTED", "DECLINED"]
    assert df.loc[0, "response_date"] == datetime(2026, 1, 10, 9, 0)
    # No such column in the sheet
    assert df["company_name"].isna().all()


def test_load_instructor_roster(workbook):
    df = load_instructor_roster(workbook)
    assert list(df["name"]) == ["Kim", "Lee"]
    assert df.loc[0, "email"] == "kim@a.com; kim@b.com"


def test_missing_optional_sheet_is_empty(workbook):
    """No personal events sheet means no declarations."""
    df = load_personal_events(workbook)
    assert df.empty
    assert "email" in df.columns


def test_missing_workbook_raises(tmp_path):
    with pytest.raises(RecordStoreError):
        load_recruitment_log(str(tmp_path / "missing.xlsx"))


def test_missing_required_sheet_raises(tmp_path):
    path = _write_workbook(tmp_path / "partial.xlsx", {
        ROSTER_SHEET: [["Name", "Email"], ["Kim", "kim@a.com"]],
    })
    with pytest.raises(RecordStoreError):
        load_recruitment_log(path)


def test_load_snapshot(workbook):
    snapshot = load_snapshot(workbook)
    assert set(snapshot) == {"recruitment_log", "roster", "personal_events", "calendar_events"}
    assert len(snapshot["recruitment_log"]) == 2
    assert len(snapshot["calendar_events"]) == 1
    assert snapshot["personal_events"].empty


def test_load_snapshot_without_calendar(tmp_path):
    """A calendar failure is reported as None, not as an empty feed."""
    path = _write_workbook(tmp_path / "nocal.xlsx", {
        RECRUITMENT_LOG_SHEET: [["Request ID", "Status"], ["R1", "APPROVED"]],
        ROSTER_SHEET: [["Name", "Email"], ["Kim", "kim@a.com"]],
        PERSONAL_EVENTS_SHEET: [["Email", "Date", "Kind"], ["kim@a.com", "2026-02-01", "busy"]],
    })
    snapshot = load_snapshot(path)
    assert snapshot["calendar_events"] is None
    assert len(snapshot["personal_events"]) == 1


def test_rows_to_frame():
    """Missing keys become None; extra keys are dropped."""
    df = rows_to_frame([{"a": 1, "z": 9}, {"b": 2}], ["a", "b"])
    assert list(df.columns) == ["a", "b"]
    assert df.loc[0, "a"] == 1
    assert df.loc[1, "b"] == 2
    assert rows_to_frame(None, ["a", "b"]).empty
