from __future__ import annotations
import logging
from datetime import date, datetime, time
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence
import pandas as pd
from openpyxl import load_workbook
from .utils import cell_text, norm_text

log = logging.getLogger(__name__)
# =========================

# Excel: each worksheet as a matrix, merged cells expanded
# =========================
def _cell_value(v: Any) -> str:
    # Sheets API returns formatted strings; mimic that for workbook cells
    if isinstance(v, datetime):
        if v.time() == time(0, 0):
            return v.date().isoformat()
        return v.isoformat(sep=" ")
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, time):
        return v.strftime("%H:%M")
    return cell_text(v)


def _trim(rows: List[List[str]]) -> List[List[str]]:
    out = []
    for r in rows:
        while r and not r[-1].strip():
            r = r[:-1]
        out.append(r)
    while out and not out[-1]:
        out.pop()
    return out


def _sheet_to_matrix_with_merged(wb, sheet_name: str) -> List[List[str]]:
    ws = wb[sheet_name]
    merged_map = {}
    for r in ws.merged_cells.ranges:
        min_col, min_row, max_col, max_row = r.bounds
        top_val = ws.cell(min_row, min_col).value
        for rr in range(min_row, max_row + 1):
            for cc in range(min_col, max_col + 1):
                merged_map[(rr, cc)] = top_val

    rows = []
    for r in range(1, ws.max_row + 1):
        row_vals = []
        for c in range(1, ws.max_column + 1):
            v = ws.cell(r, c).value
            if (r, c) in merged_map and (v is None or str(v).strip() == ""):
                v = merged_map[(r, c)]
            row_vals.append(_cell_value(v))
        rows.append(row_vals)
    return _trim(rows)


def _read_with_pandas(data: bytes, sheet_name: str) -> List[List[str]]:
    df = pd.read_excel(BytesIO(data), sheet_name=sheet_name, header=None)
    rows = [[_cell_value(v) for v in rec] for rec in df.itertuples(index=False, name=None)]
    return _trim(rows)
# =========================

# Main: workbook -> raw tables in range order
# =========================
def range_sheet_name(range_name: str) -> str:
    # "Students!A:G" -> "Students", "'My Sheet'!A:Z" -> "My Sheet"
    name = range_name.split("!", 1)[0].strip()
    if len(name) >= 2 and name[0] == name[-1] == "'":
        name = name[1:-1].replace("''", "'")
    return name


def load_tables_from_workbook(data: bytes, ranges: Sequence[str]) -> List[List[List[str]]]:
    """
    One raw table per range, matching worksheets by name (case-insensitive).
    A worksheet missing from the workbook gives an empty table.
    """
    wb = load_workbook(BytesIO(data), read_only=False, data_only=True)
    by_name: Dict[str, str] = {norm_text(n): n for n in wb.sheetnames}

    tables: List[List[List[str]]] = []
    for rng in ranges:
        sheet: Optional[str] = by_name.get(norm_text(range_sheet_name(rng)))
        if sheet is None:
            log.warning("Workbook has no worksheet for range %s", rng)
            tables.append([])
            continue
        try:
            tables.append(_sheet_to_matrix_with_merged(wb, sheet))
        except Exception:
            log.exception("Falling back to pandas for worksheet %s", sheet)
            tables.append(_read_with_pandas(data, sheet))
    return tables
