from __future__ import annotations
import calendar
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple
from .dates import looks_like_date, parse_date
from .headers import NOT_FOUND, contains, exact, normalize_headers, resolve_first, value_at
from .horizontal import suffix_groups
from .utils import DEFAULT_RULES, as_float, as_int, display_name, fixed1, norm_text

log = logging.getLogger(__name__)

PRESENT = "present"
ABSENT = "absent"
SUNDAY = "sunday"
HOLIDAY = "holiday"
DAY_OF_WEEK = "day-of-week"
NO_SCHOOL = "no-school"

ON_TIME = "on-time"
LATE = "late"

# (date, status cell, time cell)
Observation = Tuple[date, str, str]

_MONTHS = {name.lower(): i for i, name in enumerate(calendar.month_name) if name}
_MONTHS.update({name.lower(): i for i, name in enumerate(calendar.month_abbr) if name})
_MONTHS["sept"] = 9


def _markers(rules: Optional[Dict[str, Any]]) -> Dict[str, Dict[str, List[str]]]:
    att = (rules or DEFAULT_RULES).get("attendance") or DEFAULT_RULES["attendance"]
    out = {}
    for k, default in DEFAULT_RULES["attendance"].items():
        m = att.get(k) or default
        out[k] = {
            "contains": [norm_text(x) for x in m.get("contains", [])],
            "equals": [norm_text(x) for x in m.get("equals", [])],
        }
    return out


def _hit(s: str, marker: Dict[str, List[str]]) -> bool:
    return s in marker["equals"] or any(t and t in s for t in marker["contains"])
# =========================

# Day classification
# =========================
def classify(status: Any, time: Any = "", rules: Optional[Dict[str, Any]] = None,
             markers: Optional[Dict[str, Dict[str, List[str]]]] = None) -> Tuple[str, bool, str]:
    """-> (status, is_school_day, time_status)"""
    mk = markers or _markers(rules)
    s = norm_text(status)
    if _hit(s, mk["sunday"]):
        return SUNDAY, False, ""
    if _hit(s, mk["holiday"]):
        return HOLIDAY, False, ""
    if not s:
        return DAY_OF_WEEK, False, ""

    if not _hit(s, mk["present"]):
        return ABSENT, True, ""
    t = norm_text(time)
    return PRESENT, True, (LATE if t and _hit(t, mk["late"]) else ON_TIME)


def _day(d: date, status: str, school: bool, time_status: str = "", holiday: bool = False) -> Dict[str, Any]:
    return {
        "dayOfMonth": d.day,
        "date": d.isoformat(),
        "dayName": calendar.day_name[d.weekday()],
        "isSchoolDay": school,
        "isHoliday": holiday,
        "status": status,
        "timeStatus": time_status,
    }


def _percent(present: int, total: int) -> str:
    return fixed1(present / total * 100) if total else fixed1(0)


def academic_year(latest: Optional[date], default: str = "2024-25") -> str:
    # April..March
    if latest is None:
        return default
    y = latest.year
    if latest.month - 1 >= 3:
        return f"{y}-{(y + 1) % 100:02d}"
    return f"{y - 1}-{y % 100:02d}"
# =========================

# Observations: calendar row / vertical rows
# =========================
def date_columns(headers: Sequence[Any]) -> List[Tuple[int, date, int]]:
    """(column, date, time column or NOT_FOUND) for every header that parses as a date."""
    normed = normalize_headers(headers)
    out = []
    for i, h in enumerate(headers or []):
        if not looks_like_date(h):
            continue
        d = parse_date(h)
        if d is None:
            log.debug("Skipping date-like header %r", h)
            continue
        t = i + 1
        if t >= len(normed) or "time" not in normed[t] or parse_date(headers[t]) is not None:
            t = NOT_FOUND
        out.append((i, d, t))
    return out


def observations_from_row(headers: Sequence[Any], row: Optional[Sequence[Any]]) -> List[Observation]:
    if not row:
        return []
    return [(d, value_at(row, i), value_at(row, t)) for i, d, t in date_columns(headers)]


ATT_DATE_M = [exact("date"), contains("date")]
ATT_STATUS_M = [exact("status"), contains("status"), contains("attendance")]
ATT_TIME_M = [exact("time"), contains("time"), contains("arrival")]


def observations_from_rows(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> List[Observation]:
    di = resolve_first(headers, ATT_DATE_M)
    si = resolve_first(headers, ATT_STATUS_M)
    ti = resolve_first(headers, ATT_TIME_M)
    if di == NOT_FOUND:
        return []
    out = []
    for row in rows or []:
        d = parse_date(value_at(row, di))
        if d is None:
            continue
        out.append((d, value_at(row, si), value_at(row, ti)))
    return out
# =========================

# Calendar builder
# =========================
def _complete_month(year: int, month0: int, days: Dict[int, Dict[str, Any]]) -> List[Dict[str, Any]]:
    n = calendar.monthrange(year, month0 + 1)[1]
    for dom in range(1, n + 1):
        if dom in days:
            continue
        d = date(year, month0 + 1, dom)
        if d.weekday() == calendar.SUNDAY:
            days[dom] = _day(d, SUNDAY, False)
        else:
            days[dom] = _day(d, NO_SCHOOL, False, holiday=True)
    return [days[k] for k in sorted(days)]


def build_calendar(observations: Sequence[Observation], rules: Optional[Dict[str, Any]] = None,
                   default_year: Optional[str] = None) -> Dict[str, Any]:
    """
    Per-month calendar with every day of every observed month present.
    Counters only move for school days; unobserved days are filled as
    sunday / no-school.
    """
    default_year = default_year or (rules or DEFAULT_RULES).get("default_academic_year", "2024-25")
    buckets: Dict[Tuple[int, int], Dict[str, Any]] = {}
    ytd = {"totalDays": 0, "daysPresent": 0, "daysAbsent": 0}
    latest: Optional[date] = None
    markers = _markers(rules)

    for d, status, time in observations:
        latest = d if latest is None or d > latest else latest
        b = buckets.setdefault((d.year, d.month - 1), {"present": 0, "absent": 0, "days": {}})
        if d.day in b["days"]:
            log.debug("Duplicate attendance entry for %s ignored", d.isoformat())
            continue

        st, school, time_status = classify(status, time, markers=markers)
        b["days"][d.day] = _day(d, st, school, time_status, holiday=(st == HOLIDAY))
        if st == PRESENT:
            b["present"] += 1
            ytd["daysPresent"] += 1
        elif st == ABSENT:
            b["absent"] += 1
            ytd["daysAbsent"] += 1

    months = []
    for (year, month0) in sorted(buckets):
        b = buckets[(year, month0)]
        total = b["present"] + b["absent"]
        ytd["totalDays"] += total
        months.append({
            "month": month0,
            "monthName": calendar.month_name[month0 + 1],
            "year": year,
            "totalDays": total,
            "daysPresent": b["present"],
            "daysAbsent": b["absent"],
            "percentage": _percent(b["present"], total),
            "days": _complete_month(year, month0, b["days"]),
        })

    ytd["percentage"] = _percent(ytd["daysPresent"], ytd["totalDays"])
    return {
        "yearToDate": ytd,
        "months": months,
        "academicYear": academic_year(latest, default_year),
    }
# =========================

# Monthly summary columns: <month>_working / _present / _absent / _percent
# =========================
MONTHLY_SUFFIXES = {"primary": "_working", "present": "_present", "absent": "_absent", "percent": "_percent"}


def is_monthly_layout(headers: Sequence[Any]) -> bool:
    # date columns win over summary columns such as total_working
    if date_columns(headers):
        return False
    return any(h.endswith(MONTHLY_SUFFIXES["primary"]) for h in normalize_headers(headers))


def _month_index(name: str) -> Optional[int]:
    i = _MONTHS.get(norm_text(name).replace("_", " ").strip())
    return i - 1 if i else None


def decode_monthly(headers: Sequence[Any], row: Optional[Sequence[Any]],
                   default_year: str = "2024-25") -> Dict[str, Any]:
    # percentages are taken from the sheet as given, not recomputed
    try:
        start = int(str(default_year)[:4])
    except ValueError:
        start = 2024

    months = []
    ytd = {"totalDays": 0, "daysPresent": 0, "daysAbsent": 0}
    siblings = {k: v for k, v in MONTHLY_SUFFIXES.items() if k != "primary"}
    for month, raw_working, sib in suffix_groups(headers, row or [], MONTHLY_SUFFIXES["primary"], siblings):
        working = as_int(raw_working)
        if working <= 0:
            continue
        present = as_int(sib["present"])
        absent = as_int(sib["absent"])
        m0 = _month_index(month)
        if m0 is None:
            log.warning("Skipping monthly attendance columns for unknown month %r", month)
            continue
        year = start if m0 >= 3 else start + 1
        months.append({
            "month": m0,
            "monthName": display_name(month),
            "year": year,
            "totalDays": working,
            "daysPresent": present,
            "daysAbsent": absent,
            "percentage": fixed1(as_float(sib["percent"])),
            "days": [],
        })
        ytd["totalDays"] += working
        ytd["daysPresent"] += present
        ytd["daysAbsent"] += absent

    ytd["percentage"] = _percent(ytd["daysPresent"], ytd["totalDays"])
    return {"yearToDate": ytd, "months": months, "academicYear": default_year}


def build_attendance(layout: str, headers: Sequence[Any], rows: Sequence[Sequence[Any]],
                     rules: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    default_year = (rules or DEFAULT_RULES).get("default_academic_year", "2024-25")
    if layout == "vertical":
        return build_calendar(observations_from_rows(headers, rows), rules, default_year)
    row = rows[0] if rows else None
    if is_monthly_layout(headers):
        return decode_monthly(headers, row, default_year)
    return build_calendar(observations_from_row(headers, row), rules, default_year)
