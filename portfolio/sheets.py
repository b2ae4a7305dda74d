from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Union
from .errors import KeyColumnMissing
from .headers import NOT_FOUND, key_matchers, resolve_first, value_at
from .utils import cell_text, norm_text

log = logging.getLogger(__name__)

RawRow = Sequence[Any]
RawTable = Sequence[RawRow]

DEFAULT_KEY_TERMS = ("roll", "admission", "id")
# =========================

# Record extraction (row 0 = header)
# =========================
def key_column(headers: Sequence[Any], terms: Sequence[str] = DEFAULT_KEY_TERMS, sheet: str = "") -> int:
    idx = resolve_first(headers, key_matchers(terms))
    if idx == NOT_FOUND:
        raise KeyColumnMissing(sheet or "?", tried=terms)
    return idx


def _matches(row: RawRow, idx: int, key: str) -> bool:
    return bool(row) and value_at(row, idx) == key


def find_one(table: RawTable, headers: Sequence[Any], key: str, terms: Sequence[str] = DEFAULT_KEY_TERMS,
             sheet: str = "") -> Optional[List[Any]]:
    idx = key_column(headers, terms, sheet)
    for row in list(table or [])[1:]:
        if _matches(row, idx, key):
            return list(row)
    return None


def find_all(table: RawTable, headers: Sequence[Any], key: str, terms: Sequence[str] = DEFAULT_KEY_TERMS,
             sheet: str = "") -> List[List[Any]]:
    idx = key_column(headers, terms, sheet)
    return [list(row) for row in list(table or [])[1:] if _matches(row, idx, key)]
# =========================

# Sheet variants
# =========================
@dataclass(frozen=True)
class _SheetBase:
    name: str
    table: List[List[Any]] = field(default_factory=list, repr=False)

    layout: ClassVar[str] = ""

    @property
    def headers(self) -> List[str]:
        return [cell_text(h) for h in self.table[0]] if self.table else []


@dataclass(frozen=True)
class VerticalSheet(_SheetBase):
    """One row per record, several rows per student."""
    layout: ClassVar[str] = "vertical"

    def student_rows(self, key: str, terms: Sequence[str] = DEFAULT_KEY_TERMS) -> List[List[Any]]:
        if not self.table:
            return []
        return find_all(self.table, self.headers, key, terms, self.name)


@dataclass(frozen=True)
class HorizontalSheet(_SheetBase):
    """One row per student, repeated fields spread over suffixed columns."""
    layout: ClassVar[str] = "horizontal"

    def student_rows(self, key: str, terms: Sequence[str] = DEFAULT_KEY_TERMS) -> List[List[Any]]:
        if not self.table:
            return []
        row = find_one(self.table, self.headers, key, terms, self.name)
        return [row] if row is not None else []


Sheet = Union[VerticalSheet, HorizontalSheet]

LAYOUTS: Dict[str, type] = {
    VerticalSheet.layout: VerticalSheet,
    HorizontalSheet.layout: HorizontalSheet,
}


def make_sheet(name: str, raw: Optional[RawTable], layout: str = "horizontal") -> Sheet:
    cls = LAYOUTS.get(norm_text(layout))
    if cls is None:
        log.warning("Unknown layout %r for sheet %s, using horizontal", layout, name)
        cls = HorizontalSheet
    table = [list(r) if r is not None else [] for r in (raw or [])]
    return cls(name=name, table=table)
