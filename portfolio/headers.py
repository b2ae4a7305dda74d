from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence
from .utils import norm_text, cell_text

NOT_FOUND = -1


@dataclass(frozen=True)
class Matcher:
    """Named header predicate. Headers arrive already normalised (norm_text)."""
    name: str
    test: Callable[[str], bool] = field(repr=False)

    def __call__(self, header: str) -> bool:
        return bool(self.test(header))


def exact(term: str) -> Matcher:
    t = norm_text(term)
    return Matcher(f"== {t}", lambda h: h == t)


def contains(term: str, *, exclude: Sequence[str] = ()) -> Matcher:
    t = norm_text(term)
    ex = tuple(norm_text(x) for x in exclude)
    label = f"~ {t}" + (f" !~ {'|'.join(ex)}" if ex else "")
    return Matcher(label, lambda h: t in h and not any(x in h for x in ex))


def contains_all(*terms: str) -> Matcher:
    ts = tuple(norm_text(x) for x in terms)
    return Matcher("~ " + "&".join(ts), lambda h: all(t in h for t in ts))


def normalize_headers(headers: Sequence[Any]) -> List[str]:
    return [norm_text(h) for h in headers or []]


def resolve(headers: Sequence[Any], predicate: Callable[[str], bool]) -> int:
    # first hit in left-to-right header order
    for i, h in enumerate(headers or []):
        if predicate(norm_text(h)):
            return i
    return NOT_FOUND


def resolve_first(headers: Sequence[Any], matchers: Sequence[Matcher]) -> int:
    # matchers are tried in order, the first one that hits anything wins
    normed = normalize_headers(headers)
    for m in matchers:
        for i, h in enumerate(normed):
            if m(h):
                return i
    return NOT_FOUND


def index_of(headers: Sequence[Any], name: str) -> int:
    return resolve(headers, exact(name))


def value_at(row: Sequence[Any], idx: int) -> str:
    # rows from the Sheets API are ragged: trailing empty cells are dropped
    if idx == NOT_FOUND or row is None or idx >= len(row):
        return ""
    return cell_text(row[idx])


def value_by_matchers(row: Sequence[Any], headers: Sequence[Any], matchers: Sequence[Matcher]) -> str:
    return value_at(row, resolve_first(headers, matchers))


# =========================
# Field rules
# =========================
GUARDIAN_KWS = ("father", "mother", "guardian", "parent")

STUDENT_FIELDS: Dict[str, List[Matcher]] = {
    "name": [
        exact("name"),
        exact("student_name"),
        contains_all("student", "name"),
        contains("name", exclude=GUARDIAN_KWS + ("user", "file", "school", "subject", "test")),
    ],
    "class": [exact("class"), contains("class"), contains("section")],
    "admissionNo": [exact("admission_no"), contains("admission")],
    "rollNo": [exact("roll_no"), contains("roll")],
    "dob": [exact("dob"), contains("birth"), contains("dob")],
    "contact": [exact("contact"), contains("contact"), contains("phone"), contains("mobile")],
    "photoUrl": [exact("photo_url"), contains("photo"), contains("image")],
}


def key_terms(terms: Sequence[str], prefer: str | None = None) -> List[str]:
    """Key column search order; `prefer` moves one term to the front."""
    out = [norm_text(t) for t in terms if norm_text(t)]
    p = norm_text(prefer)
    if p:
        out = [p] + [t for t in out if t != p]
    return out


def key_matchers(terms: Sequence[str]) -> List[Matcher]:
    return [contains(t) for t in terms]
