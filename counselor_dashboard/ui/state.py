# counselor_dashboard/ui/state.py
import uuid
from typing import Optional

import streamlit as st
import structlog

from counselor_dashboard.config import NOTIFICATION_SLOT, SEED_TEST_NOTIFICATIONS, SETTINGS_SLOT, WEEKDAYS
from counselor_dashboard.state.notification_store import NotificationStore
from counselor_dashboard.state.settings_store import SettingsStore
from counselor_dashboard.storage.local_store import LocalSlot

logger = structlog.get_logger(__name__)

# Centralize keys to avoid typos across files
KEY_COUNSELOR = "counselor"
KEY_NOTIFICATIONS = "notification_store"
KEY_SETTINGS = "settings_store"
KEY_SLOT_ROWS = "slot_rows"
KEY_DO_RESET = "_do_reset"
KEY_WS_CACHE = "_ws_cache"
KEY_FLASH = "_flash"

# page caches, dropped on logout
CACHE_KEYS = ["sessions_cache", "payments_cache", "students_cache"]

# preferences that also live on the counselor's profile row
PROFILE_PREFERENCES = ("language", "timezone", "currency")


# -----------------------------
# Stores (one per logged-in counselor)
# -----------------------------
def get_settings_store() -> SettingsStore:
    if KEY_SETTINGS not in st.session_state:
        st.session_state[KEY_SETTINGS] = SettingsStore(LocalSlot(SETTINGS_SLOT))
    return st.session_state[KEY_SETTINGS]


def get_notification_store() -> NotificationStore:
    return st.session_state[KEY_NOTIFICATIONS]


def apply_preferences(
    language: Optional[str] = None,
    timezone: Optional[str] = None,
    currency: Optional[str] = None,
) -> SettingsStore:
    """
    Push preferences into the settings store; None leaves a value as is.
    The notification store follows the timezone for booking alerts.
    Raises ValueError on an unsupported value.
    """
    settings = get_settings_store()
    if language:
        settings.set_language(language)
    if timezone:
        settings.set_timezone(timezone)
    if currency:
        settings.set_currency(currency)

    store = st.session_state.get(KEY_NOTIFICATIONS)
    if store is not None:
        store.tz = settings.timezone
    return settings


def reset_preferences() -> SettingsStore:
    settings = get_settings_store()
    settings.reset()
    return apply_preferences()


def start_counselor_session(counselor) -> None:
    """Call once after a successful login."""
    st.session_state[KEY_COUNSELOR] = counselor

    # saved profile preferences win over this installation's defaults
    for key in PROFILE_PREFERENCES:
        if not counselor.settings.get(key):
            continue
        value = getattr(counselor, key)
        try:
            apply_preferences(**{key: value})
        except ValueError:
            logger.warning("profile_preference_ignored", uid=counselor.uid, key=key, value=value)
    settings = get_settings_store()

    store = NotificationStore(
        LocalSlot(f"{NOTIFICATION_SLOT}:{counselor.uid}"),
        tz=settings.timezone,
    )
    if SEED_TEST_NOTIFICATIONS and not store.restored:
        store.initialize_test_notifications()
    st.session_state[KEY_NOTIFICATIONS] = store


def end_counselor_session() -> None:
    for key in [KEY_COUNSELOR, KEY_NOTIFICATIONS, KEY_SLOT_ROWS, KEY_WS_CACHE, KEY_FLASH, *CACHE_KEYS]:
        st.session_state.pop(key, None)


def invalidate_caches(*keys: str) -> None:
    for key in keys or CACHE_KEYS:
        st.session_state.pop(key, None)


# -----------------------------
# Flash messages (survive one st.rerun)
# -----------------------------
def set_flash(message: str) -> None:
    st.session_state[KEY_FLASH] = message


def pop_flash() -> Optional[str]:
    return st.session_state.pop(KEY_FLASH, None)


# -----------------------------
# Working-hours slot editor
# -----------------------------
def _new_slot_row(day: str = "monday", time: str = "09:00") -> dict:
    return {"row_id": str(uuid.uuid4()), "day": day, "time": time}


def working_hours_to_rows(working_hours: dict) -> list[dict]:
    rows = [
        _new_slot_row(day, slot.get("time", ""))
        for day in WEEKDAYS
        for slot in working_hours.get(day, {}).get("availableSlots", [])
    ]
    return rows or [_new_slot_row()]


def rows_to_working_hours(rows: list[dict], working_days: set[str]) -> dict:
    """Rows for days off are dropped; duplicate times collapse; slots are sorted."""
    out = {day: {"isWorking": day in working_days, "availableSlots": []} for day in WEEKDAYS}
    for day in WEEKDAYS:
        if day not in working_days:
            continue
        times = sorted({r["time"] for r in rows if r["day"] == day and r["time"]})
        out[day]["availableSlots"] = [{"time": t} for t in times]
    return out


def init_slot_rows_if_missing(working_hours: dict) -> None:
    """Call at the top of the page before rendering widgets."""
    if KEY_SLOT_ROWS not in st.session_state:
        st.session_state[KEY_SLOT_ROWS] = working_hours_to_rows(working_hours)


def add_slot_row() -> None:
    st.session_state[KEY_SLOT_ROWS].append(_new_slot_row())


def remove_slot_row(row_id: str) -> None:
    st.session_state[KEY_SLOT_ROWS] = [
        r for r in st.session_state[KEY_SLOT_ROWS] if r["row_id"] != row_id
    ]
    if not st.session_state[KEY_SLOT_ROWS]:
        st.session_state[KEY_SLOT_ROWS] = [_new_slot_row()]


def mark_reset() -> None:
    st.session_state[KEY_DO_RESET] = True


def apply_reset_if_marked(working_hours: dict) -> None:
    """
    'Reset on next run' pattern: call at the very top of the page BEFORE
    creating widgets, so the editor reloads the saved schedule.
    """
    if st.session_state.get(KEY_DO_RESET):
        st.session_state[KEY_SLOT_ROWS] = working_hours_to_rows(working_hours)
        st.session_state[KEY_DO_RESET] = False
