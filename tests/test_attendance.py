import calendar
from datetime import date, timedelta

import pytest

from portfolio.attendance import (academic_year, build_attendance, build_calendar, classify, date_columns,
                                  decode_monthly, is_monthly_layout, observations_from_row)


def _days(month):
    return [d["dayOfMonth"] for d in month["days"]]


@pytest.mark.parametrize("status,expected", [
    ("P", ("present", True, "on-time")),
    ("present", ("present", True, "on-time")),
    ("1", ("present", True, "on-time")),
    ("A", ("absent", True, "")),
    ("0", ("absent", True, "")),
    ("Sunday", ("sunday", False, "")),
    ("s", ("sunday", False, "")),
    ("Holiday", ("holiday", False, "")),
    ("H", ("holiday", False, "")),
    ("  ", ("day-of-week", False, "")),
    ("", ("day-of-week", False, "")),
])
def test_classify(status, expected):
    assert classify(status) == expected


def test_late_needs_a_present_student():
    assert classify("P", "Came late") == ("present", True, "late")
    assert classify("P", "8:05") == ("present", True, "on-time")
    assert classify("A", "late") == ("absent", True, "")


def test_date_columns_pick_up_time_column(attendance):
    cols = date_columns(attendance[0])
    assert [(i, d, t) for i, d, t in cols][:2] == [(1, date(2024, 4, 1), 2), (3, date(2024, 4, 2), -1)]
    assert len(cols) == 5


def test_sparse_april(attendance):
    out = build_calendar(observations_from_row(attendance[0], attendance[1]))
    (april,) = out["months"]
    assert (april["month"], april["year"]) == (3, 2024)
    assert april["totalDays"] == 4
    assert april["daysPresent"] == 3
    assert april["daysAbsent"] == 1
    assert april["percentage"] == "75.0"
    assert _days(april) == list(range(1, 31))

    by_day = {d["dayOfMonth"]: d for d in april["days"]}
    assert by_day[1]["timeStatus"] == "late"
    assert by_day[2]["timeStatus"] == "on-time"
    assert by_day[7]["status"] == "sunday"
    assert by_day[14]["status"] == "sunday"
    assert by_day[4]["status"] == "no-school"
    assert by_day[4]["isHoliday"] is True
    filled = [d for n, d in by_day.items() if n not in (1, 2, 3, 5, 7)]
    assert len(filled) == 25
    assert all(not d["isSchoolDay"] for d in filled)
    assert {d["status"] for d in filled} == {"sunday", "no-school"}

    assert out["yearToDate"] == {"totalDays": 4, "daysPresent": 3, "daysAbsent": 1, "percentage": "75.0"}
    assert out["academicYear"] == "2024-25"


def test_three_present_one_absent_in_april():
    obs = [(date(2024, 4, 1), "P", ""), (date(2024, 4, 2), "P", ""), (date(2024, 4, 3), "P", ""),
           (date(2024, 4, 4), "A", "")]
    (april,) = build_calendar(obs)["months"]
    assert april["totalDays"] == 4
    assert april["percentage"] == "75.0"
    others = [d for d in april["days"] if d["dayOfMonth"] > 4]
    assert len(others) == 26
    assert all(d["status"] in ("sunday", "no-school") and not d["isSchoolDay"] for d in others)


@pytest.mark.parametrize("year,month", [(2024, 2), (2023, 2), (2024, 12), (2025, 1), (2025, 6)])
def test_one_entry_per_calendar_day(year, month):
    n = calendar.monthrange(year, month)[1]
    obs = [(date(year, month, 10), "P", ""), (date(year, month, 10), "A", ""), (date(year, month, n), "", "")]
    out = build_calendar(obs)
    (m,) = out["months"]
    assert _days(m) == list(range(1, n + 1))
    # duplicate date column: first entry wins
    assert m["daysPresent"] == 1 and m["daysAbsent"] == 0


def test_months_are_chronological_and_ytd_is_summed():
    obs = [(date(2025, 1, 6), "A", ""), (date(2024, 12, 2), "P", ""), (date(2024, 12, 3), "P", "")]
    out = build_calendar(obs)
    assert [(m["year"], m["month"]) for m in out["months"]] == [(2024, 11), (2025, 0)]
    assert [m["percentage"] for m in out["months"]] == ["100.0", "0.0"]
    assert out["yearToDate"]["totalDays"] == 3
    assert out["yearToDate"]["daysPresent"] == 2
    assert out["academicYear"] == "2024-25"


def test_month_without_school_days():
    out = build_calendar([(date(2024, 5, 5), "Sunday", ""), (date(2024, 5, 1), "holiday", "")])
    (may,) = out["months"]
    assert may["totalDays"] == 0
    assert may["percentage"] == "0.0"
    assert out["yearToDate"]["percentage"] == "0.0"


def test_empty_calendar():
    out = build_calendar([])
    assert out == {
        "yearToDate": {"totalDays": 0, "daysPresent": 0, "daysAbsent": 0, "percentage": "0.0"},
        "months": [],
        "academicYear": "2024-25",
    }


@pytest.mark.parametrize("latest,label", [
    (date(2025, 3, 15), "2024-25"),
    (date(2025, 4, 2), "2025-26"),
    (date(2099, 6, 1), "2099-00"),
    (None, "2024-25"),
])
def test_academic_year(latest, label):
    assert academic_year(latest) == label


def test_academic_year_follows_latest_date():
    start = date(2025, 3, 28)
    obs = [(start + timedelta(days=i), "P", "") for i in range(8)]
    assert build_calendar(obs)["academicYear"] == "2025-26"


def test_monthly_summary_columns():
    headers = ["admission_no", "april_working", "april_present", "april_absent", "april_percent",
               "january_working", "january_present", "may_working"]
    row = ["12345", "20", "18", "2", "90", "22", "11", "0"]
    out = decode_monthly(headers, row, "2024-25")
    assert [(m["monthName"], m["month"], m["year"]) for m in out["months"]] == [("April", 3, 2024), ("January", 0, 2025)]
    assert out["months"][0]["percentage"] == "90.0"
    # the sheet's own percentage is kept even when missing
    assert out["months"][1]["percentage"] == "0.0"
    assert out["months"][1]["days"] == []
    assert out["yearToDate"] == {"totalDays": 42, "daysPresent": 29, "daysAbsent": 2, "percentage": "69.0"}


def test_build_attendance_dispatch(attendance):
    horizontal = build_attendance("horizontal", attendance[0], [attendance[1]])
    assert horizontal["months"][0]["daysPresent"] == 3

    headers = ["roll_no", "date", "status", "arrival time"]
    rows = [["21", "01/04/2024", "P", "late"], ["21", "02/04/2024", "A", ""], ["21", "bad", "P", ""]]
    vertical = build_attendance("vertical", headers, rows)
    (april,) = vertical["months"]
    assert (april["daysPresent"], april["daysAbsent"]) == (1, 1)
    assert april["days"][0]["timeStatus"] == "late"

    monthly = build_attendance("horizontal", ["roll_no", "june_working"], [["21", "10"]])
    assert monthly["months"][0]["totalDays"] == 10

    assert build_attendance("horizontal", attendance[0], [])["months"] == []


def test_date_columns_win_over_total_working():
    headers = ["admission_no", "01/04/2024", "02/04/2024", "03/04/2024", "total_working", "total_present"]
    row = ["12345", "P", "P", "A", "3", "2"]
    assert not is_monthly_layout(headers)
    out = build_attendance("horizontal", headers, [row])
    (april,) = out["months"]
    assert (april["month"], april["year"]) == (3, 2024)
    assert (april["daysPresent"], april["daysAbsent"]) == (2, 1)
    assert len(april["days"]) == 30


def test_unknown_month_groups_are_skipped():
    headers = ["admission_no", "term1_working", "term1_present", "june_working", "june_present"]
    out = decode_monthly(headers, ["12345", "40", "35", "10", "9"], "2024-25")
    assert [(m["monthName"], m["month"], m["year"]) for m in out["months"]] == [("June", 5, 2024)]
    assert out["yearToDate"]["totalDays"] == 10


def test_classify_with_prebuilt_markers():
    markers = {
        "sunday": {"contains": [], "equals": ["sun"]},
        "holiday": {"contains": [], "equals": ["h"]},
        "present": {"contains": [], "equals": ["yes"]},
        "late": {"contains": ["late"], "equals": []},
    }
    assert classify("yes", "late", markers=markers) == ("present", True, "late")
    assert classify("P", markers=markers) == ("absent", True, "")
