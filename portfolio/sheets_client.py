"""Google Sheets v4 `values:batchGet` over plain REST with an API key."""
from __future__ import annotations
import logging
from typing import Any, List, Sequence
import requests
from .errors import SheetsFetchError

log = logging.getLogger(__name__)

SHEETS_ENDPOINT = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values:batchGet"


def fetch_ranges(sheet_id: str, ranges: Sequence[str], api_key: str, timeout: float = 15.0,
                 session: requests.Session | None = None) -> List[List[List[Any]]]:
    """
    One raw table per requested range, in request order. A range the API
    returns without "values" (empty sheet) comes back as [].
    """
    url = SHEETS_ENDPOINT.format(sheet_id=sheet_id)
    # API key never goes into the query string
    headers = {"X-goog-api-key": api_key}
    params = [("ranges", r) for r in ranges]
    http = session or requests
    log.debug("Fetching %d ranges from sheet %s", len(ranges), sheet_id)

    try:
        resp = http.get(url, params=params, headers=headers, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.HTTPError as exc:
        body = exc.response.text[:300] if exc.response is not None else ""
        log.exception("Sheets API returned an error: %s", body)
        raise SheetsFetchError("Failed to fetch data from Google Sheets") from exc
    except requests.RequestException as exc:
        log.exception("Sheets API request failed")
        raise SheetsFetchError("Failed to fetch data from Google Sheets") from exc
    except ValueError as exc:
        log.exception("Sheets API returned a non-JSON payload")
        raise SheetsFetchError("Malformed response from Google Sheets") from exc

    value_ranges = payload.get("valueRanges") if isinstance(payload, dict) else None
    if not isinstance(value_ranges, list):
        log.error("Sheets API payload has no valueRanges")
        raise SheetsFetchError("Malformed response from Google Sheets")

    tables = []
    for vr in value_ranges:
        values = vr.get("values") if isinstance(vr, dict) else None
        tables.append(values if isinstance(values, list) else [])
    log.debug("Sheets API returned %s", [len(t) for t in tables])
    return tables
