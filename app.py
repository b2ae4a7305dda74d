from __future__ import annotations
import streamlit as st
import pandas as pd
from portfolio.config import load_settings, setup_logging
from portfolio.errors import PortfolioError
from portfolio.ingest import load_tables_from_workbook
from portfolio.profile import build_student_profile, sheet_ranges
from portfolio.sheets_client import fetch_ranges

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)
RULES = SETTINGS.rules

st.set_page_config(page_title="Student Portfolio", layout="wide")
st.title("Student Portfolio")
# =========================

# Helpers
# =========================
STATUS_ICONS = {
    "present": "P",
    "absent": "A",
    "sunday": "S",
    "holiday": "H",
    "no-school": "-",
    "day-of-week": "",
}


def _table(records: list[dict], empty_msg: str):
    if not records:
        st.info(empty_msg)
        return
    st.dataframe(pd.DataFrame(records), width="stretch", hide_index=True)


def _month_grid(month: dict) -> pd.DataFrame:
    # one row, one column per day of the month
    cells = {}
    for d in month.get("days", []):
        mark = STATUS_ICONS.get(d["status"], "")
        if d.get("timeStatus") == "late":
            mark += "*"
        cells[str(d["dayOfMonth"])] = mark
    return pd.DataFrame([cells])


def _load_tables(source: str, upload) -> list | None:
    ranges = sheet_ranges(RULES)
    if source == "workbook":
        if upload is None:
            st.warning("Upload a workbook first.")
            return None
        return load_tables_from_workbook(upload.getvalue(), ranges)
    if not SETTINGS.sheets_configured:
        st.error("GOOGLE_SHEETS_ID / GOOGLE_SHEETS_API_KEY are not set.")
        return None
    return fetch_ranges(SETTINGS.sheets_id, ranges, SETTINGS.api_key, timeout=SETTINGS.timeout)
# =========================

# Input
# =========================
source_labels = {"sheets": "Google Sheets", "workbook": "Excel workbook (.xlsx)"}
c1, c2, c3 = st.columns([2, 2, 3])
with c1:
    source = st.radio("Source", list(source_labels), format_func=lambda x: source_labels[x], horizontal=True)
with c2:
    key_kind = st.selectbox("Look up by", ["admission", "roll"])
with c3:
    key = st.text_input("Admission / roll number", value="").strip()

upload = None
if source == "workbook":
    upload = st.file_uploader("Workbook with Students, Subjects, ... Attendance sheets", type=["xlsx"])

st.session_state.setdefault("profile", None)

if st.button("Show profile", type="primary"):
    if not key:
        st.error("Enter a number.")
    elif key_kind == "admission" and not SETTINGS.admission_ok(key):
        st.error("Invalid admission number.")
    else:
        try:
            tables = _load_tables(source, upload)
            if tables is not None:
                st.session_state["profile"] = build_student_profile(tables, key, key_kind=key_kind, rules=RULES)
        except PortfolioError as e:
            st.session_state["profile"] = None
            st.error(str(e))
# =========================

# Profile
# =========================
profile = st.session_state.get("profile")
if profile:
    info = profile["studentInfo"]
    summary = profile["summary"]
    attendance = profile["attendance"]

    p1, p2 = st.columns([1, 4])
    with p1:
        if info.get("photoUrl", "").startswith("http"):
            st.image(info["photoUrl"], width=120)
    with p2:
        st.subheader(info.get("name") or "(no name)")
        st.caption(
            f"Class {info.get('class', '')} | Admission {info.get('admissionNo', '')} | "
            f"Roll {info.get('rollNo', '')} | DOB {info.get('dob', '')} | {info.get('contact', '')}"
        )

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Subjects", summary["totalSubjects"])
    m2.metric("Completed assignments", summary["completedAssignments"])
    m3.metric("Pending assignments", summary["pendingAssignments"])
    m4.metric("Attendance", summary["attendancePercentage"])

    tabs = st.tabs(["Progress", "Tests", "Activities", "Assignments", "Corrections", "Attendance"])
    with tabs[0]:
        _table(profile["subjectProgress"], "No subject progress recorded.")
    with tabs[1]:
        st.write("Most recent")
        _table(profile["recentTests"], "No tests recorded.")
        with st.expander("All tests", expanded=False):
            _table(profile["tests"], "No tests recorded.")
    with tabs[2]:
        _table(profile["subjectActivities"], "No activities recorded.")
    with tabs[3]:
        _table(profile["assignments"], "No assignments recorded.")
    with tabs[4]:
        _table(profile["corrections"], "No corrections recorded.")
    with tabs[5]:
        ytd = attendance["yearToDate"]
        st.caption(
            f"Academic year {attendance['academicYear']}: {ytd['daysPresent']}/{ytd['totalDays']} days "
            f"({ytd['percentage']}%)"
        )
        for month in attendance["months"]:
            title = f"{month['monthName']} {month.get('year') or ''}".strip()
            with st.expander(f"{title}: {month['daysPresent']}/{month['totalDays']} ({month['percentage']}%)"):
                if month.get("days"):
                    st.dataframe(_month_grid(month), width="stretch", hide_index=True)
                    st.caption("P present, A absent, S Sunday, H holiday, - no school, * late")
                else:
                    st.write(f"Absent: {month['daysAbsent']}")
