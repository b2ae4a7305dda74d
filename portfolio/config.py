from __future__ import annotations
import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv
from .utils import BASE_DIR, load_rules

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    sheets_id: str = ""
    api_key: str = field(default="", repr=False)
    timeout: float = 15.0
    admission_pattern: str = r"^\d{5}$"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 3000
    rules: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def sheets_configured(self) -> bool:
        return bool(self.sheets_id and self.api_key)

    def admission_ok(self, value: str) -> bool:
        return bool(value) and re.fullmatch(self.admission_pattern, value) is not None


def _float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def load_settings(env_file: Optional[Path] = None, rules_file: Optional[Path] = None) -> Settings:
    load_dotenv(env_file or BASE_DIR / ".env")
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        sheets_id=os.getenv("GOOGLE_SHEETS_ID", ""),
        api_key=os.getenv("GOOGLE_SHEETS_API_KEY", ""),
        timeout=_float("SHEETS_TIMEOUT", 15.0),
        admission_pattern=os.getenv("ADMISSION_PATTERN", r"^\d{5}$"),
        cors_origins=origins or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=_int("PORT", 3000),
        rules=load_rules(rules_file),
    )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
