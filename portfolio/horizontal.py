from __future__ import annotations
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple
from .headers import (NOT_FOUND, Matcher, contains, exact, normalize_headers, resolve_first, value_at)
from .utils import as_float, as_int, as_number, display_name

Row = Sequence[Any]
Record = Dict[str, Any]

# =========================
# Record kinds
# =========================
# companions: output field -> header suffix appended to "<subject>_<kind><N>"
RECORD_KINDS: Dict[str, Dict[str, Any]] = {
    "activities": {
        "pattern": "activity",
        "primary": "activity",
        "companions": {"date": "_date", "description": "_description", "status": "_status"},
        "defaults": {"status": "pending"},
    },
    "assignments": {
        "pattern": "assignment",
        "primary": "name",
        "companions": {
            "assignedDate": "_assigned_date",
            "dueDate": "_due_date",
            "status": "_status",
            "remarks": "_remarks",
        },
        "defaults": {"status": "pending"},
    },
    "tests": {
        "pattern": "test",
        "primary": "name",
        "companions": {
            "date": "_date",
            "maxMarks": "_max_marks",
            "marksObtained": "_marks_obtained",
            "percentage": "_percentage",
            "grade": "_grade",
        },
        "ints": ("maxMarks", "marksObtained"),
        "floats": ("percentage",),
    },
    "corrections": {
        "pattern": "correction",
        "primary": "copyType",
        "companions": {"date": "_date", "improvements": "_improvements", "remarks": "_remarks"},
    },
}

SUBJECT_SUFFIXES = {"primary": "_progress", "grade": "_grade"}


def _pattern_re(kind_token: str) -> re.Pattern:
    return re.compile(rf"^([a-z][a-z0-9_]*?)_{kind_token}(\d+)$")


_PATTERNS = {k: _pattern_re(v["pattern"]) for k, v in RECORD_KINDS.items()}


def _index_of(normed: List[str], name: str) -> int:
    try:
        return normed.index(name)
    except ValueError:
        return NOT_FOUND
# =========================

# (a) fixed-suffix groups
# =========================
def suffix_groups(headers: Sequence[Any], row: Row, primary_suffix: str,
                  siblings: Dict[str, str]) -> List[Tuple[str, str, Dict[str, str]]]:
    """
    Every header "<group><primary_suffix>" yields (group, primary cell, {name: sibling cell}),
    siblings located by "<group><suffix>". Header order is kept.
    """
    normed = normalize_headers(headers)
    out = []
    for i, h in enumerate(normed):
        if not h.endswith(primary_suffix) or len(h) == len(primary_suffix):
            continue
        group = h[: -len(primary_suffix)]
        sib = {name: value_at(row, _index_of(normed, group + suf)) for name, suf in siblings.items()}
        out.append((group, value_at(row, i), sib))
    return out


def decode_subjects(headers: Sequence[Any], row: Optional[Row]) -> List[Record]:
    if not row:
        return []
    out = []
    for subject, raw_progress, sib in suffix_groups(headers, row, SUBJECT_SUFFIXES["primary"],
                                                     {"grade": SUBJECT_SUFFIXES["grade"]}):
        rec = _subject_record(subject, raw_progress, sib["grade"])
        if rec is not None:
            out.append(rec)
    return out


def _subject_record(subject: str, raw_progress: Any, grade: str) -> Optional[Record]:
    progress = as_float(raw_progress, float("nan"))
    # only subjects with progress
    if progress != progress or progress <= 0:
        return None
    return {
        "subject": display_name(subject),
        "progress": as_number(raw_progress),
        "grade": grade,
    }
# =========================

# (b) numbered pattern groups: <subject>_<kind><N>
# =========================
def pattern_groups(headers: Sequence[Any], row: Row, kind: str) -> List[Tuple[str, str, Dict[str, str]]]:
    kind_rules = RECORD_KINDS[kind]
    rx = _PATTERNS[kind]
    normed = normalize_headers(headers)
    seen = set()
    out = []
    for i, h in enumerate(normed):
        m = rx.match(h)
        if not m or int(m.group(2)) <= 0 or h in seen:
            continue
        seen.add(h)
        fields = {name: value_at(row, _index_of(normed, h + suf)) for name, suf in kind_rules["companions"].items()}
        out.append((m.group(1), value_at(row, i), fields))
    return out


def _make_record(kind: str, subject: str, primary: str, fields: Dict[str, str]) -> Optional[Record]:
    kind_rules = RECORD_KINDS[kind]
    if not primary or not primary.strip():
        return None

    rec: Record = {"subject": display_name(subject.strip()), kind_rules["primary"]: primary}
    defaults = kind_rules.get("defaults", {})
    for name in kind_rules["companions"]:
        v = fields.get(name, "")
        if name in kind_rules.get("ints", ()):
            rec[name] = as_int(v)
        elif name in kind_rules.get("floats", ()):
            rec[name] = as_number(v)
        else:
            rec[name] = v if v.strip() else defaults.get(name, "")
    return rec


def decode_records(kind: str, headers: Sequence[Any], row: Optional[Row]) -> List[Record]:
    if not row:
        return []
    out = []
    for subject, primary, fields in pattern_groups(headers, row, kind):
        rec = _make_record(kind, subject, primary, fields)
        if rec is not None:
            out.append(rec)
    return out
# =========================

# Vertical layout: one record per row
# =========================
SUBJECT_M = [exact("subject"), exact("subject_name"), contains("subject")]
DATE_M = [exact("date"), contains("date", exclude=("due", "assigned"))]
STATUS_M = [exact("status"), contains("status")]
REMARKS_M = [exact("remarks"), contains("remark")]
GRADE_M = [exact("grade"), contains("grade")]

VERTICAL_FIELDS: Dict[str, Dict[str, List[Matcher]]] = {
    "subjects": {
        "subject": SUBJECT_M,
        "progress": [exact("progress"), contains("progress")],
        "grade": GRADE_M,
    },
    "activities": {
        "subject": SUBJECT_M,
        "activity": [exact("activity"), exact("activity_name"), contains("activity", exclude=("date", "desc", "status"))],
        "date": DATE_M,
        "description": [exact("description"), contains("desc")],
        "status": STATUS_M,
    },
    "assignments": {
        "subject": SUBJECT_M,
        "name": [exact("name"), exact("assignment"), exact("assignment_name"), contains("title"),
                 contains("assignment", exclude=("date", "status", "remark"))],
        "assignedDate": [exact("assigned_date"), contains("assigned")],
        "dueDate": [exact("due_date"), contains("due")],
        "status": STATUS_M,
        "remarks": REMARKS_M,
    },
    "tests": {
        "subject": SUBJECT_M,
        "name": [exact("name"), exact("test"), exact("test_name"), contains("test", exclude=("date",))],
        "date": DATE_M,
        "maxMarks": [exact("max_marks"), contains("max")],
        "marksObtained": [exact("marks_obtained"), contains("obtained"), contains("scored")],
        "percentage": [exact("percentage"), contains("percent"), exact("%")],
        "grade": GRADE_M,
    },
    "corrections": {
        "subject": SUBJECT_M,
        "copyType": [exact("copy_type"), contains("copy")],
        "date": DATE_M,
        "improvements": [exact("improvements"), contains("improv")],
        "remarks": REMARKS_M,
    },
}


def decode_vertical(kind: str, headers: Sequence[Any], rows: Sequence[Row]) -> List[Record]:
    fields = VERTICAL_FIELDS[kind]
    cols = {name: resolve_first(headers, ms) for name, ms in fields.items()}
    out = []
    for row in rows or []:
        cells = {name: value_at(row, idx) for name, idx in cols.items()}
        subject = cells.pop("subject")
        if kind == "subjects":
            rec = _subject_record(subject, cells["progress"], cells["grade"])
        else:
            primary = cells.pop(RECORD_KINDS[kind]["primary"])
            rec = _make_record(kind, subject, primary, cells)
        if rec is not None:
            out.append(rec)
    return out


def decode_sheet(kind: str, layout: str, headers: Sequence[Any], rows: Sequence[Row]) -> List[Record]:
    """Records of one kind for one student, whatever the sheet layout."""
    if layout == "vertical":
        return decode_vertical(kind, headers, rows)
    row = rows[0] if rows else None
    if kind == "subjects":
        return decode_subjects(headers, row)
    return decode_records(kind, headers, row)
