from contextlib import contextmanager
from typing import Optional

import streamlit as st
import structlog
from gspread.exceptions import APIError, WorksheetNotFound

logger = structlog.get_logger(__name__)


class DataGatewayError(Exception):
    """A spreadsheet call failed (network, auth, permission, quota)."""


class SessionNotFound(LookupError):
    pass


@contextmanager
def gateway_errors(operation: str, **context):
    try:
        yield
    except APIError as exc:
        logger.error("gateway_call_failed", operation=operation, error=str(exc), **context)
        raise DataGatewayError(f"{operation} failed") from exc


# -----------------------------
# Sheet helpers
# -----------------------------
def _worksheet_cache() -> dict:
    return st.session_state.setdefault("_ws_cache", {})


def get_or_create_worksheet(sh, tab_name: str):
    """
    Cached per Streamlit session to avoid repeated fetch_sheet_metadata calls.
    """
    cache = _worksheet_cache()

    # Key by spreadsheet id + tab name
    key = (sh.id, tab_name)
    if key in cache:
        return cache[key]

    try:
        ws = sh.worksheet(tab_name)  # this triggers metadata read (expensive)
    except WorksheetNotFound:
        logger.info("worksheet_created", tab=tab_name)
        ws = sh.add_worksheet(title=tab_name, rows=1000, cols=50)

    cache[key] = ws
    return ws


def ensure_headers(ws, headers):
    values = ws.get_all_values()
    if not values or values[0] != headers:
        ws.update(range_name="A1", values=[headers])


def open_tab(sh, tab_name: str, headers: list[str]):
    ws = get_or_create_worksheet(sh, tab_name)
    ensure_headers(ws, headers)
    return ws


def find_row(ws, value: str, column: int = 1) -> Optional[int]:
    """1-based sheet row holding `value` in `column`, skipping the header."""
    col = ws.col_values(column)
    for i, v in enumerate(col[1:], start=2):
        if str(v) == str(value):
            return i
    return None
