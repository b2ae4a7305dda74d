from __future__ import annotations
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence
from .attendance import build_attendance
from .dates import reversed_date
from .errors import KeyColumnMissing, StudentNotFound
from .headers import STUDENT_FIELDS, key_terms, value_by_matchers
from .horizontal import decode_sheet
from .sheets import RawTable, Sheet, make_sheet
from .utils import DEFAULT_RULES, as_float, norm_text

log = logging.getLogger(__name__)

PRIMARY_SHEET = "students"
SHEET_ORDER = ("students", "subjects", "activities", "assignments", "tests", "corrections", "attendance")
RECENT_TESTS = 5


def sheet_ranges(rules: Optional[Dict[str, Any]] = None) -> List[str]:
    sheets = (rules or DEFAULT_RULES).get("sheets", {})
    return [sheets.get(name, DEFAULT_RULES["sheets"][name])["range"] for name in SHEET_ORDER]


def build_sheets(raw_tables: Sequence[Optional[RawTable]], rules: Optional[Dict[str, Any]] = None) -> Dict[str, Sheet]:
    # tables arrive in SHEET_ORDER; missing trailing ones are empty sheets
    sheets_cfg = (rules or DEFAULT_RULES).get("sheets", {})
    raw_tables = list(raw_tables or [])
    out = {}
    for i, name in enumerate(SHEET_ORDER):
        cfg = sheets_cfg.get(name) or DEFAULT_RULES["sheets"][name]
        raw = raw_tables[i] if i < len(raw_tables) else None
        out[name] = make_sheet(name, raw, cfg.get("layout", "horizontal"))
    return out


def _rows_for(sheet: Sheet, key: str, terms: Sequence[str]) -> List[List[Any]]:
    try:
        return sheet.student_rows(key, terms)
    except KeyColumnMissing as e:
        log.warning("%s; no %s records", e, sheet.name)
        return []


def student_info(headers: Sequence[Any], row: Sequence[Any], rules: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    info = {field: value_by_matchers(row, headers, ms) for field, ms in STUDENT_FIELDS.items()}
    if not info["photoUrl"].strip():
        info["photoUrl"] = (rules or DEFAULT_RULES).get("placeholder_photo_url", "")
    return info


def recent_tests(tests: Sequence[Dict[str, Any]], limit: int = RECENT_TESTS) -> List[Dict[str, Any]]:
    """Newest first; equal dates keep sheet order, undated tests go last."""
    def sort_key(t):
        d = reversed_date(t.get("date", ""))
        return (d is not None, d or date.min)

    ordered = sorted(tests, key=sort_key, reverse=True)
    # sorted(reverse=True) keeps equal keys in original order
    return [
        {
            "subject": t["subject"],
            "name": t["name"],
            "date": t["date"],
            "marks": f"{t['marksObtained']}/{t['maxMarks']}",
            "percentage": t["percentage"],
            "grade": t["grade"],
        }
        for t in ordered[:limit]
    ]


def summarize(subjects: Sequence[Dict[str, Any]], assignments: Sequence[Dict[str, Any]],
              attendance: Dict[str, Any]) -> Dict[str, Any]:
    # months without a single school day are left out of the mean
    months = [m for m in attendance.get("months", []) if m.get("totalDays", 0) > 0]
    overall = sum(as_float(m["percentage"]) for m in months) / len(months) if months else 0.0
    return {
        "totalSubjects": len(subjects),
        "completedAssignments": sum(1 for a in assignments if norm_text(a.get("status")) == "complete"),
        "pendingAssignments": sum(1 for a in assignments if norm_text(a.get("status")) == "pending"),
        "attendancePercentage": f"{overall:.1f}%",
    }


def build_student_profile(raw_tables: Sequence[Optional[RawTable]], key: str, *,
                          key_kind: Optional[str] = None,
                          rules: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Reshape the fetched tables (SHEET_ORDER) into one student's profile.

    Raises StudentNotFound / KeyColumnMissing for the primary sheet only;
    every other sheet degrades to empty records.
    """
    rules = rules or DEFAULT_RULES
    terms = key_terms(rules.get("key_columns", DEFAULT_RULES["key_columns"]), prefer=key_kind)
    sheets = build_sheets(raw_tables, rules)

    students = sheets[PRIMARY_SHEET]
    rows = students.student_rows(key, terms)
    if not rows:
        raise StudentNotFound(key)

    records = {}
    for name in ("subjects", "activities", "assignments", "tests", "corrections"):
        sh = sheets[name]
        records[name] = decode_sheet(name, sh.layout, sh.headers, _rows_for(sh, key, terms))

    att = sheets["attendance"]
    attendance = build_attendance(att.layout, att.headers, _rows_for(att, key, terms), rules)

    return {
        "studentInfo": student_info(students.headers, rows[0], rules),
        "subjectProgress": records["subjects"],
        "recentTests": recent_tests(records["tests"]),
        "subjectActivities": records["activities"],
        "assignments": records["assignments"],
        "tests": records["tests"],
        "corrections": records["corrections"],
        "attendance": attendance,
        "summary": summarize(records["subjects"], records["assignments"], attendance),
    }
