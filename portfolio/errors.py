from __future__ import annotations
from typing import Sequence


class PortfolioError(Exception):
    pass


class StudentNotFound(PortfolioError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Student with key {key} not found")


class KeyColumnMissing(PortfolioError):
    def __init__(self, sheet: str, tried: Sequence[str] = ()):
        self.sheet = sheet
        self.tried = tuple(tried)
        msg = f"Sheet '{sheet}' has no key column"
        if self.tried:
            msg += f" (tried: {', '.join(self.tried)})"
        super().__init__(msg)


class SheetsFetchError(PortfolioError):
    pass
