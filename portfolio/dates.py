from __future__ import annotations
import re
from datetime import date, datetime
from typing import Any, List, Optional
from dateutil import parser as dtparser
from .utils import cell_text

# generic parsing is only attempted on text carrying a 4-digit year,
# otherwise dateutil happily turns "Mon" or "7" into a date near today
_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")
_DEFAULT = datetime(2000, 1, 1)


def _parts(s: str, sep: str) -> List[str]:
    return [p.strip() for p in s.split(sep)]


def _year(s: str) -> int:
    y = int(s)
    return y + 2000 if len(s) <= 2 else y


def _build(y: int, m: int, d: int) -> Optional[date]:
    try:
        return date(y, m, d)
    except ValueError:
        return None


def _generic(s: str) -> Optional[date]:
    if not _YEAR_RE.search(s):
        return None
    try:
        return dtparser.parse(s, default=_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def looks_like_date(cell: Any) -> bool:
    s = cell_text(cell).strip()
    if not s:
        return False
    if len(s.split("/")) == 3 or len(s.split("-")) == 3:
        return True
    return _generic(s) is not None


def parse_date(cell: Any) -> Optional[date]:
    """
    Header/cell -> calendar date, or None.

      dd/mm/yyyy   both leading parts <= 2 chars, day first
      yyyy/mm/dd   anything else with '/', parsed as given
      yyyy-mm-dd   ISO
      dd-mm-yyyy   same as written on test sheets
      other        dateutil, if a 4-digit year is present
    """
    if isinstance(cell, datetime):
        return cell.date()
    if isinstance(cell, date):
        return cell

    s = cell_text(cell).strip()
    if not s:
        return None

    p = _parts(s, "/")
    if len(p) == 3:
        if len(p[0]) <= 2 and len(p[1]) <= 2:
            if not all(x.isdigit() for x in p):
                return None
            return _build(_year(p[2]), int(p[1]), int(p[0]))
        return _generic(s)

    p = _parts(s, "-")
    if len(p) == 3 and all(x.isdigit() for x in p):
        if len(p[0]) == 4:
            return _build(int(p[0]), int(p[1]), int(p[2]))
        if len(p[2]) == 4:
            return _build(int(p[2]), int(p[1]), int(p[0]))
        return None

    return _generic(s)


def reversed_date(s: Any) -> Optional[date]:
    # "05-04-2024" -> "2024-04-05" before parsing; used to order test dates
    txt = cell_text(s).strip()
    if "-" in txt:
        txt = "-".join(reversed(txt.split("-")))
    return parse_date(txt)
