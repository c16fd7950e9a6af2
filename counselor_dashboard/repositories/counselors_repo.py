# counselor_dashboard/repositories/counselors_repo.py
from dataclasses import replace
from typing import Optional

import structlog

from counselor_dashboard.services.gsheets_client import get_spreadsheet
from counselor_dashboard.repositories.worksheets import find_row, gateway_errors, open_tab
from counselor_dashboard.config import COUNSELORS_HEADERS, COUNSELORS_TAB
from counselor_dashboard.models.counselor import CounselorProfile, now_ms, parse_counselor

logger = structlog.get_logger(__name__)

_PROFILE_FIELDS = {"username", "bio", "photo_url", "specializations"}


def _counselors_ws():
    return open_tab(get_spreadsheet(), COUNSELORS_TAB, COUNSELORS_HEADERS)


def _find(predicate) -> Optional[CounselorProfile]:
    with gateway_errors("load_counselors"):
        records = _counselors_ws().get_all_records(numericise_ignore=["all"])
    for r in records:
        if predicate(r):
            return parse_counselor(r)
    return None


def get_counselor(uid: str) -> Optional[CounselorProfile]:
    return _find(lambda r: str(r.get("uid", "")) == str(uid))


def get_counselor_by_email(email: str) -> Optional[CounselorProfile]:
    wanted = email.strip().lower()
    return _find(lambda r: str(r.get("email", "")).strip().lower() == wanted)


def save_counselor(profile: CounselorProfile) -> CounselorProfile:
    """Upsert the counselor row keyed by uid."""
    with gateway_errors("save_counselor", uid=profile.uid):
        ws = _counselors_ws()
        row = find_row(ws, profile.uid, column=COUNSELORS_HEADERS.index("uid") + 1)
        if row is None:
            ws.append_row(profile.to_row(), value_input_option="RAW")
        else:
            ws.update(range_name=f"A{row}", values=[profile.to_row()])

    logger.info("counselor_saved", uid=profile.uid)
    return profile


def update_counselor_profile(profile: CounselorProfile, **changes) -> CounselorProfile:
    unknown = set(changes) - _PROFILE_FIELDS
    if unknown:
        raise ValueError(f"Not editable from the profile form: {sorted(unknown)}")
    return save_counselor(replace(profile, **changes, updated_at=now_ms()))


def update_counselor_settings(profile: CounselorProfile, settings: dict) -> CounselorProfile:
    """Shallow-merge `settings` into the stored settings blob."""
    merged = {**profile.settings, **settings}
    return save_counselor(replace(profile, settings=merged, updated_at=now_ms()))
