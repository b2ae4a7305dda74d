from __future__ import annotations
import logging
from typing import Any, Callable, List, Optional, Sequence
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import Settings, load_settings, setup_logging
from .errors import KeyColumnMissing, SheetsFetchError, StudentNotFound
from .profile import build_student_profile, sheet_ranges
from .schemas import Status, StudentProfile
from .sheets_client import fetch_ranges

log = logging.getLogger(__name__)

# (sheet_id, ranges) -> raw tables
Fetcher = Callable[[str, Sequence[str]], List[Any]]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None, fetch: Optional[Fetcher] = None) -> FastAPI:
    settings = settings or load_settings()
    if fetch is None:
        def fetch(sheet_id: str, ranges: Sequence[str]) -> List[Any]:
            return fetch_ranges(sheet_id, ranges, settings.api_key, timeout=settings.timeout)

    app = FastAPI(title="Student Portfolio API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(HTTPException)
    def http_error(request: Request, exc: HTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(StudentNotFound)
    def student_not_found(request: Request, exc: StudentNotFound):
        return _error(404, str(exc))

    @app.exception_handler(KeyColumnMissing)
    def key_column_missing(request: Request, exc: KeyColumnMissing):
        log.error("%s", exc)
        return _error(422, str(exc))

    @app.exception_handler(SheetsFetchError)
    def fetch_failed(request: Request, exc: SheetsFetchError):
        return _error(502, str(exc))

    @app.get("/api/status", response_model=Status)
    def status():
        return {
            "status": "online",
            "message": "Student Portfolio API is running",
            "sheetsConfigured": settings.sheets_configured,
        }

    @app.get("/api/student-data", response_model=StudentProfile)
    def student_data(admission: Optional[str] = None, roll: Optional[str] = None):
        if admission is not None:
            if not settings.admission_ok(admission):
                raise HTTPException(status_code=400, detail="Invalid admission number.")
            key, kind = admission, "admission"
        elif roll and roll.strip():
            key, kind = roll.strip(), "roll"
        else:
            raise HTTPException(status_code=400, detail="Missing admission or roll number.")

        if not settings.sheets_configured:
            raise HTTPException(status_code=503, detail="Google Sheets is not configured.")

        tables = fetch(settings.sheets_id, sheet_ranges(settings.rules))
        return build_student_profile(tables, key, key_kind=kind, rules=settings.rules)

    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    log.info("Google Sheets configured: %s", settings.sheets_configured)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
