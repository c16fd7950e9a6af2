# counselor_dashboard/repositories/sessions_repo.py
from typing import Optional

import structlog

from counselor_dashboard.services.gsheets_client import get_spreadsheet
from counselor_dashboard.repositories.worksheets import (
    SessionNotFound,
    find_row,
    gateway_errors,
    open_tab,
)
from counselor_dashboard.config import (
    SESSION_STATUSES,
    SESSIONS_HEADERS,
    SESSIONS_TAB,
    USERS_HEADERS,
    USERS_TAB,
)
from counselor_dashboard.models.session import Session, parse_session

logger = structlog.get_logger(__name__)


def _sessions_ws():
    return open_tab(get_spreadsheet(), SESSIONS_TAB, SESSIONS_HEADERS)


def _profile_pictures() -> dict[str, str]:
    ws = open_tab(get_spreadsheet(), USERS_TAB, USERS_HEADERS)
    return {
        str(r.get("uid", "")): str(r.get("profilePicture", ""))
        for r in ws.get_all_records(numericise_ignore=["all"])
        if r.get("profilePicture")
    }


def fetch_counselor_sessions(counselor_id: str) -> list[Session]:
    with gateway_errors("fetch_counselor_sessions", counselor_id=counselor_id):
        records = _sessions_ws().get_all_records(numericise_ignore=["all"])
        mine = [r for r in records if str(r.get("counselorId", "")) == str(counselor_id)]
        pictures = _profile_pictures() if mine else {}

    sessions = [
        parse_session({**r, "profilePicture": pictures.get(str(r.get("userId", "")))})
        for r in mine
    ]
    logger.info("sessions_fetched", counselor_id=counselor_id, count=len(sessions))
    return sessions


def create_session(new_session: Session, notifications=None) -> Session:
    """
    Append a booked session. When a notification store is passed, the
    counselor gets a "New Session Booked" alert for it.
    """
    with gateway_errors("create_session", session_id=new_session.session_id):
        _sessions_ws().append_row(new_session.to_row(), value_input_option="RAW")

    logger.info("session_created", session_id=new_session.session_id, counselor_id=new_session.counselor_id)
    if notifications is not None:
        notifications.add_session_booking_notification(new_session)
    return new_session


def update_session_status(session_id: str, status: str) -> None:
    if status not in SESSION_STATUSES:
        raise ValueError(f"Unknown session status: {status!r}")

    with gateway_errors("update_session_status", session_id=session_id):
        ws = _sessions_ws()
        row = find_row(ws, session_id, column=SESSIONS_HEADERS.index("sessionId") + 1)
        if row is None:
            raise SessionNotFound(session_id)
        ws.update_cell(row, SESSIONS_HEADERS.index("status") + 1, status)

    logger.info("session_status_updated", session_id=session_id, status=status)


def get_session_by_id(session_id: str) -> Optional[Session]:
    with gateway_errors("get_session_by_id", session_id=session_id):
        records = _sessions_ws().get_all_records(numericise_ignore=["all"])

    for r in records:
        if str(r.get("sessionId", "")) == str(session_id):
            return parse_session(r)
    return None


def delete_session(session_id: str) -> None:
    with gateway_errors("delete_session", session_id=session_id):
        ws = _sessions_ws()
        row = find_row(ws, session_id, column=SESSIONS_HEADERS.index("sessionId") + 1)
        if row is None:
            raise SessionNotFound(session_id)
        ws.delete_rows(row)

    logger.info("session_deleted", session_id=session_id)
