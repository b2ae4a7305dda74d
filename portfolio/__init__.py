"""
This package contains:
- header matching (named, ordered matcher rules)
- date interpretation for headers and cells
- record extraction from vertical / horizontal sheets
- horizontal field decoding (suffix and numbered groups)
- the attendance calendar
- assembly of the student profile
- the Google Sheets / workbook sources and the HTTP layer
"""
from .attendance import build_attendance, build_calendar, academic_year
from .dates import looks_like_date, parse_date
from .errors import KeyColumnMissing, PortfolioError, SheetsFetchError, StudentNotFound
from .headers import NOT_FOUND, resolve, resolve_first
from .horizontal import decode_records, decode_subjects, decode_sheet
from .ingest import load_tables_from_workbook
from .profile import build_student_profile, sheet_ranges
from .sheets import HorizontalSheet, VerticalSheet, find_all, find_one, make_sheet
from .sheets_client import fetch_ranges

__all__ = [
    "build_attendance",
    "build_calendar",
    "academic_year",
    "looks_like_date",
    "parse_date",
    "KeyColumnMissing",
    "PortfolioError",
    "SheetsFetchError",
    "StudentNotFound",
    "NOT_FOUND",
    "resolve",
    "resolve_first",
    "decode_records",
    "decode_subjects",
    "decode_sheet",
    "load_tables_from_workbook",
    "build_student_profile",
    "sheet_ranges",
    "HorizontalSheet",
    "VerticalSheet",
    "find_all",
    "find_one",
    "make_sheet",
    "fetch_ranges",
]
