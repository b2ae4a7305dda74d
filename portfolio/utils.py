import re
import json
import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

Number = Union[int, float]

DEFAULT_RULES: Dict[str, Any] = {
    "sheets": {
        "students": {"range": "Students!A:Z", "layout": "horizontal"},
        "subjects": {"range": "Subjects!A:ZZ", "layout": "horizontal"},
        "activities": {"range": "Activities!A:ZZ", "layout": "horizontal"},
        "assignments": {"range": "Assignments!A:ZZ", "layout": "horizontal"},
        "tests": {"range": "Tests!A:ZZ", "layout": "horizontal"},
        "corrections": {"range": "Corrections!A:ZZ", "layout": "horizontal"},
        "attendance": {"range": "Attendance!A:ZZZ", "layout": "horizontal"},
    },
    "key_columns": ["roll", "admission", "id"],
    "attendance": {
        "sunday": {"contains": ["sun"], "equals": ["s"]},
        "holiday": {"contains": ["hol"], "equals": ["h"]},
        "present": {"contains": ["p"], "equals": ["1"]},
        "late": {"contains": ["late", "came"], "equals": []},
    },
    "default_academic_year": "2024-25",
    "placeholder_photo_url": "/api/placeholder/120/120",
}


def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception:
        return default


def rules_path() -> Path:
    return DEFAULT_DATA_DIR / "rules.json"


def load_rules(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Rules file merged over DEFAULT_RULES, nested dicts key by key.
    A missing or broken file gives the defaults.
    """
    rules = copy.deepcopy(DEFAULT_RULES)
    loaded = load_json(path or rules_path(), {})
    if isinstance(loaded, dict):
        _merge(rules, loaded)
    return rules


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> None:
    for k, v in extra.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _merge(base[k], v)
        else:
            base[k] = v


_NBSP_RE = re.compile(r"[\u00A0\u2007\u202F]")  # NBSP variants


def cell_text(v: Any) -> str:
    # None / NaN -> ""
    if v is None:
        return ""
    if isinstance(v, float) and v != v:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def norm_text(s: Any) -> str:
    """
    Normalisation for matching:
    - lower
    - BOM / non-breaking spaces
    - collapsed whitespace
    """
    s = cell_text(s)
    if not s:
        return ""
    s = s.replace("\ufeff", "")
    s = _NBSP_RE.sub(" ", s)
    s = s.lower()
    s = re.sub(r"\s+", " ", s).strip()
    return s


def display_name(key: str) -> str:
    # "social_science" -> "Social science"
    s = cell_text(key).replace("_", " ")
    return s[:1].upper() + s[1:]


_LEADING_NUM_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_LEADING_INT_RE = re.compile(r"^\s*[-+]?\d+")


def as_float(x: Any, default: float = 0.0) -> float:
    # parseFloat: leading number wins, "75%" -> 75.0, "abc" -> default
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        return default if x != x else float(x)
    m = _LEADING_NUM_RE.match(cell_text(x))
    if not m:
        return default
    try:
        return float(m.group(0))
    except ValueError:
        return default


def as_int(x: Any, default: int = 0) -> int:
    # parseInt: "45.5" -> 45, "12 marks" -> 12
    if isinstance(x, float):
        return default if x != x else int(x)
    if isinstance(x, int):
        return x
    m = _LEADING_INT_RE.match(cell_text(x))
    return int(m.group(0)) if m else default


def as_number(x: Any, default: Number = 0) -> Number:
    f = as_float(x, float("nan"))
    if f != f:
        return default
    return int(f) if f.is_integer() else f


def fixed1(x: float) -> str:
    return f"{x:.1f}"
