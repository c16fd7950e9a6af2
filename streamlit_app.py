"""
Counselor dashboard.
Run: streamlit run streamlit_app.py
"""
from datetime import date, datetime, time, timedelta
import time as _time

import pandas as pd
import pytz
import streamlit as st
import structlog

from counselor_dashboard.logging_config import configure_logging
from counselor_dashboard.config import LANGUAGES, RESOURCE_CATEGORIES, CURRENCY_SYMBOLS, WEEKDAYS
from counselor_dashboard.models.counselor import SPECIALIZATIONS, generate_time_slots, specialization_options
from counselor_dashboard.models.resource import RESOURCES
from counselor_dashboard.models.session import Session
from counselor_dashboard.repositories.counselors_repo import (
    get_counselor_by_email,
    update_counselor_profile,
    update_counselor_settings,
)
from counselor_dashboard.repositories.payments_repo import fetch_counselor_payments, payments_to_csv_bytes
from counselor_dashboard.repositories.sessions_repo import (
    create_session,
    delete_session,
    fetch_counselor_sessions,
    update_session_status,
)
from counselor_dashboard.repositories.students_repo import fetch_counselor_students
from counselor_dashboard.repositories.worksheets import DataGatewayError, SessionNotFound
from counselor_dashboard.services.filters import (
    filter_resources,
    filter_sessions,
    filter_students,
    session_status_label,
)
from counselor_dashboard.services.stats_calculator import (
    calculate_dashboard_stats,
    calculate_earnings_stats,
    monthly_earnings,
    payment_years,
    upcoming_sessions,
)
from counselor_dashboard.ui.state import (
    KEY_COUNSELOR,
    KEY_SLOT_ROWS,
    add_slot_row,
    apply_preferences,
    apply_reset_if_marked,
    end_counselor_session,
    get_notification_store,
    get_settings_store,
    init_slot_rows_if_missing,
    invalidate_caches,
    mark_reset,
    pop_flash,
    remove_slot_row,
    reset_preferences,
    rows_to_working_hours,
    set_flash,
    start_counselor_session,
)
from counselor_dashboard.utils.formatters import (
    format_currency,
    format_phone_number,
    format_session_date,
    format_session_time,
    time_ago,
)
from counselor_dashboard.utils.validation import (
    validate_login_inputs,
    validate_profile_inputs,
    validate_time_slot,
)

configure_logging()
logger = structlog.get_logger("streamlit_app")

st.set_page_config(page_title="Counselor Dashboard", layout="wide")

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
TIME_SLOTS = generate_time_slots()


# -----------------------------
# Data access helpers (cached per Streamlit session)
# -----------------------------
def _cached(key: str, loader, counselor_id: str):
    if key not in st.session_state:
        st.session_state[key] = loader(counselor_id)
    return st.session_state[key]


def load_error(message: str, key: str, *cache_keys: str) -> None:
    st.error(message)
    if st.button("Try again", key=f"retry_{key}"):
        invalidate_caches(*cache_keys)
        st.rerun()


def apply_theme(dark_mode: bool) -> None:
    if dark_mode:
        st.markdown(
            "<style>.stApp {background-color: #111827; color: #f9fafb;}</style>",
            unsafe_allow_html=True,
        )


# -----------------------------
# Login gate
# -----------------------------
def require_login():
    if st.session_state.get(KEY_COUNSELOR) is not None:
        return

    st.title("Counselor Login")
    with st.form("login"):
        email = st.text_input("Email")
        pw = st.text_input("Password", type="password")
        ok = st.form_submit_button("Login")

    if not ok:
        st.stop()

    errors = validate_login_inputs(email, pw)
    if errors:
        for e in errors:
            st.error(e)
        st.stop()

    if pw != st.secrets["APP_PASSWORD"]:
        logger.warning("login_rejected", email=email)
        st.error("Incorrect email or password")
        st.stop()

    try:
        counselor = get_counselor_by_email(email)
    except DataGatewayError:
        st.error("Could not reach the data service. Please try again.")
        st.stop()

    if counselor is None:
        st.error("No counselor profile is registered for this email.")
        st.stop()

    start_counselor_session(counselor)
    logger.info("login_succeeded", uid=counselor.uid)
    st.rerun()


def logout():
    uid = getattr(st.session_state.get(KEY_COUNSELOR), "uid", None)
    end_counselor_session()
    logger.info("logout", uid=uid)
    st.rerun()


# -----------------------------
# Pages
# -----------------------------
def dashboard_page(counselor, settings):
    st.header("Dashboard")
    st.caption("Welcome back. Here's an overview of your counseling practice.")

    try:
        payments = _cached("payments_cache", fetch_counselor_payments, counselor.uid)
        sessions = _cached("sessions_cache", fetch_counselor_sessions, counselor.uid)
    except DataGatewayError:
        load_error("Failed to load dashboard data", "dashboard", "payments_cache", "sessions_cache")
        return

    stats = calculate_dashboard_stats(payments, sessions, tz=settings.timezone)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Upcoming sessions", stats.upcoming_sessions)
    c2.metric("Active students", stats.active_students, delta=f"{stats.students_trend:.1f}%")
    c3.metric(
        "Total earnings",
        format_currency(stats.total_earnings, settings.currency),
        delta=f"{stats.earnings_trend:.1f}%",
    )
    c4.metric("Completed sessions", stats.completed_sessions)

    st.subheader("Monthly goal")
    st.progress(
        int(stats.monthly_goal_progress),
        text=f"{stats.monthly_goal_progress:.1f}% of this month's session goal",
    )

    st.subheader("Upcoming sessions")
    upcoming = upcoming_sessions(sessions, tz=settings.timezone)
    if not upcoming:
        st.info("No upcoming sessions.")
        return
    df = pd.DataFrame(
        [
            {
                "Student": s.user_name,
                "Date": format_session_date(s.session_date, settings.timezone),
                "Time": format_session_time(s.session_date, settings.timezone),
                "Duration (min)": int(s.duration),
            }
            for s in upcoming
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)


def _change_status(session: Session, status: str):
    try:
        update_session_status(session.session_id, status)
    except (DataGatewayError, SessionNotFound):
        st.error("Failed to update session status. Please try again.")
        return
    invalidate_caches("sessions_cache")
    set_flash(f"Session {status} successfully")
    st.rerun()


def _delete(session: Session):
    try:
        delete_session(session.session_id)
    except (DataGatewayError, SessionNotFound):
        st.error("Failed to delete session. Please try again.")
        return
    invalidate_caches("sessions_cache", "students_cache")
    set_flash("Session deleted.")
    st.rerun()


def _render_session(session: Session, tz: str):
    label = session_status_label(session, tz=tz)
    title = f"{session.user_name or 'Unknown student'} · {format_session_date(session.session_date, tz)} {format_session_time(session.session_date, tz)} · {label}"
    with st.expander(title):
        c1, c2 = st.columns(2)
        with c1:
            st.markdown(f"**Email:** {session.user_email or '-'}")
            st.markdown(f"**Phone:** {session.user_phone or '-'}")
            st.markdown(f"**Duration:** {int(session.duration)} minutes")
        with c2:
            st.markdown(f"**Concerns:** {', '.join(session.concerns) or '-'}")
            st.markdown(f"**Goals:** {', '.join(session.goals) or '-'}")
        if session.notes:
            st.markdown(f"**Notes:** {session.notes}")

        sid = session.session_id
        if session.status == "scheduled":
            b1, b2, _ = st.columns([1, 1, 3])
            with b1:
                if st.button("Mark completed", key=f"complete_{sid}"):
                    _change_status(session, "completed")
            with b2:
                confirm = st.checkbox("Confirm cancellation", key=f"confirm_cancel_{sid}")
                if st.button("Cancel session", key=f"cancel_{sid}", disabled=not confirm):
                    _change_status(session, "cancelled")
        confirm_delete = st.checkbox("Confirm delete (cannot be undone)", key=f"confirm_delete_{sid}")
        if st.button("Delete", key=f"delete_{sid}", disabled=not confirm_delete):
            _delete(session)


def _book_session_form(counselor, tz: str):
    with st.expander("Book a session"):
        with st.form("book_session", clear_on_submit=True):
            c1, c2 = st.columns(2)
            with c1:
                user_id = st.text_input("Student ID")
                user_name = st.text_input("Student name")
                user_email = st.text_input("Student email")
            with c2:
                day = st.date_input("Date", value=date.today() + timedelta(days=1))
                at = st.time_input("Time", value=time(9, 0), step=1800)
                duration = st.number_input("Duration (minutes)", min_value=15, max_value=240, value=60, step=15)
            notes = st.text_area("Notes")
            submitted = st.form_submit_button("Book")

        if not submitted:
            return
        if not user_id.strip() or not user_name.strip():
            st.error("Student ID and name are required.")
            return

        when = pytz.timezone(tz).localize(datetime.combine(day, at))
        new_session = Session.create(
            counselor_id=counselor.uid,
            user_id=user_id.strip(),
            user_name=user_name,
            user_email=user_email,
            session_date=when,
            duration=duration,
            notes=notes,
        )
        try:
            create_session(new_session, notifications=get_notification_store())
        except DataGatewayError:
            st.error("Failed to book the session. Please try again.")
            return
        invalidate_caches("sessions_cache", "students_cache")
        set_flash("Session booked.")
        st.rerun()


def sessions_page(counselor, settings):
    st.header("Sessions")
    st.caption("Manage your counseling sessions and schedule.")

    try:
        sessions = _cached("sessions_cache", fetch_counselor_sessions, counselor.uid)
    except DataGatewayError:
        load_error("Failed to load sessions. Please try again.", "sessions", "sessions_cache")
        return

    _book_session_form(counselor, settings.timezone)

    tabs = st.tabs(["Upcoming", "Past", "Cancelled"])
    for tab, name in zip(tabs, ["upcoming", "past", "cancelled"]):
        with tab:
            shown = filter_sessions(sessions, name, tz=settings.timezone)
            if not shown:
                st.info(f"No {name} sessions.")
            for s in shown:
                _render_session(s, settings.timezone)


def students_page(counselor, settings):
    st.header("Students")

    try:
        students = _cached("students_cache", fetch_counselor_students, counselor.uid)
    except DataGatewayError:
        load_error("Failed to load students. Please try again.", "students", "students_cache")
        return

    all_concerns = sorted({c for s in students for c in s.concerns})
    all_goals = sorted({g for s in students for g in s.goals})

    query = st.text_input("Search by name or email")
    c1, c2 = st.columns(2)
    with c1:
        concerns = st.multiselect("Concerns", all_concerns)
    with c2:
        goals = st.multiselect("Goals", all_goals)

    shown = filter_students(students, query, concerns, goals)
    if not shown:
        st.info("No students found.")
        return

    for s in shown:
        with st.expander(f"{s.name} · {s.email}"):
            c1, c2 = st.columns([1, 3])
            with c1:
                if s.profile_picture:
                    st.image(s.profile_picture, width=120)
                st.metric("Profile complete", f"{s.profile_completion_percentage:.0f}%")
            with c2:
                st.markdown(f"**Phone:** {format_phone_number(s.phone, s.phone_country_code)}")
                st.markdown(f"**Joined:** {format_session_date(s.created_at, settings.timezone)}")
                st.markdown(f"**Bio:** {s.user_bio or '-'}")
                st.markdown(f"**Concerns:** {', '.join(s.concerns) or '-'}")
                st.markdown(f"**Goals:** {', '.join(s.goals) or '-'}")
                ec = s.emergency_contact
                if ec.get("name"):
                    phone = format_phone_number(ec.get("phoneNumber", ""), ec.get("phoneCountryCode", ""))
                    st.markdown(f"**Emergency contact:** {ec['name']} ({ec.get('relationship') or '-'}), {phone}")
                mh = s.medical_history
                st.markdown(
                    f"**Medical history:** conditions: {mh.get('conditions') or '-'}; "
                    f"medications: {mh.get('medications') or '-'}; allergies: {mh.get('allergies') or '-'}"
                )


def earnings_page(counselor, settings):
    st.header("Earnings")

    try:
        payments = _cached("payments_cache", fetch_counselor_payments, counselor.uid)
    except DataGatewayError:
        load_error("Failed to load earnings data", "earnings", "payments_cache")
        return

    cur = settings.currency
    stats = calculate_earnings_stats(payments, tz=settings.timezone)
    trend = stats.earnings_trend
    arrow = "+" if trend.is_positive else "-"

    c1, c2, c3, c4 = st.columns(4)
    c1.metric(
        "Total earnings",
        format_currency(stats.total_earnings, cur),
        delta=f"{arrow}{trend.value:.1f}% from last month",
    )
    c2.metric("This month", format_currency(stats.this_month_earnings, cur))
    c3.metric("Pending", format_currency(stats.pending_amount, cur))
    c4.metric("Failed", format_currency(stats.failed_amount, cur))

    years = payment_years(payments, tz=settings.timezone)
    year = st.selectbox("Year", years, index=0)
    chart = pd.DataFrame(
        {"Monthly Earnings": monthly_earnings(payments, year, tz=settings.timezone)},
        index=pd.Index(MONTH_LABELS, name="Month"),
    )
    st.line_chart(chart)

    st.subheader("Payments")
    if not payments:
        st.info("No payments yet.")
        return
    df = pd.DataFrame(
        [
            {
                "Date": format_session_date(p.payment_date, settings.timezone),
                "Reference": p.reference,
                "Student": p.email,
                "Amount": format_currency(p.amount, cur, p.currency if p.currency in CURRENCY_SYMBOLS else "GHS"),
                "Status": p.payment_status,
                "Channel": p.channel,
            }
            for p in payments
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.download_button(
        "Export CSV",
        data=payments_to_csv_bytes(payments),
        file_name="payments.csv",
        mime="text/csv",
    )


def resources_page(counselor, settings):
    st.header("Resources")
    st.caption("Guides, worksheets, training material and assessment tools.")

    category = st.radio(
        "Category",
        list(RESOURCE_CATEGORIES),
        format_func=RESOURCE_CATEGORIES.get,
        horizontal=True,
    )
    term = st.text_input("Search resources")

    shown = filter_resources(RESOURCES, category, term)
    if not shown:
        st.info("No resources match your search.")
    for r in shown:
        with st.container(border=True):
            st.markdown(f"**{r.title}** ({r.file_type.upper()})")
            st.write(r.description)
            if r.tags:
                st.caption(" · ".join(r.tags))
            st.link_button("Download", r.file_url)


def notifications_page(counselor, settings):
    store = get_notification_store()
    st.header("Notifications")

    c1, c2, _ = st.columns([1, 1, 4])
    with c1:
        if st.button("Mark all as read"):
            store.mark_all_as_read()
            st.rerun()
    with c2:
        if st.button("Clear all", type="primary"):
            store.clear_all()
            st.rerun()

    if not store.notifications:
        st.info("No notifications.")
        return

    now_ms = int(_time.time() * 1000)
    for n in store.notifications:
        with st.container(border=True):
            col1, col2 = st.columns([5, 1])
            with col1:
                badge = "" if n.read else " (new)"
                st.markdown(f"**{n.title}**{badge}")
                st.write(n.message)
                st.caption(time_ago(n.created_at, now_ms))
            with col2:
                if not n.read and st.button("Mark read", key=f"read_{n.id}"):
                    store.mark_as_read(n.id)
                    st.rerun()
                if st.button("Delete", key=f"del_{n.id}"):
                    store.delete_notification(n.id)
                    st.rerun()


def _save_settings(counselor, settings: dict, message: str):
    try:
        updated = update_counselor_settings(counselor, settings)
    except DataGatewayError:
        st.error("Failed to save settings. Please try again.")
        return
    st.session_state[KEY_COUNSELOR] = updated
    st.success(message)


def settings_page(counselor, settings):
    st.header("Settings")
    tab_profile, tab_prefs, tab_notif, tab_schedule = st.tabs(
        ["Profile", "Preferences", "Notifications", "Schedule"]
    )

    with tab_profile:
        with st.form("profile"):
            username = st.text_input("Name", value=counselor.username)
            bio = st.text_area("Bio", value=counselor.bio)
            current = [s.get("value") for s in counselor.specializations if s.get("value") in SPECIALIZATIONS]
            specs = st.multiselect(
                "Specializations",
                list(SPECIALIZATIONS),
                default=current,
                format_func=SPECIALIZATIONS.get,
            )
            saved = st.form_submit_button("Save profile")
        if saved:
            errors = validate_profile_inputs(username, bio, specs)
            if errors:
                for e in errors:
                    st.error(e)
            else:
                try:
                    st.session_state[KEY_COUNSELOR] = update_counselor_profile(
                        counselor,
                        username=username.strip(),
                        bio=bio.strip(),
                        specializations=specialization_options(specs),
                    )
                except DataGatewayError:
                    st.error("Failed to update profile. Please try again.")
                else:
                    st.success("Profile updated.")

    with tab_prefs:
        with st.form("preferences"):
            languages = list(LANGUAGES)
            language = st.selectbox(
                "Language", languages, index=languages.index(settings.language), format_func=LANGUAGES.get
            )
            zones = pytz.common_timezones
            timezone = st.selectbox(
                "Timezone", zones, index=zones.index(settings.timezone) if settings.timezone in zones else 0
            )
            currencies = list(CURRENCY_SYMBOLS)
            currency = st.selectbox("Currency", currencies, index=currencies.index(settings.currency))
            dark = st.toggle("Dark mode", value=settings.dark_mode)
            saved = st.form_submit_button("Save preferences")
        if saved:
            apply_preferences(language=language, timezone=timezone, currency=currency)
            if dark != settings.dark_mode:
                settings.toggle_dark_mode()
            _save_settings(
                counselor,
                {"language": language, "timezone": timezone, "currency": currency},
                "Preferences saved.",
            )
        if st.button("Reset preferences on this device", key="reset_prefs_btn"):
            reset_preferences()
            set_flash("Preferences reset to defaults.")
            st.rerun()

    with tab_notif:
        prefs = counselor.notification_preferences
        with st.form("notification_prefs"):
            email = st.checkbox("Email notifications", value=prefs["email"])
            sms = st.checkbox("SMS notifications", value=prefs["sms"])
            reminders = st.checkbox("Session reminders", value=prefs["sessionReminders"])
            payment = st.checkbox("Payment notifications", value=prefs["paymentNotifications"])
            saved = st.form_submit_button("Save notification settings")
        if saved:
            _save_settings(
                counselor,
                {
                    "notifications": {
                        "email": email,
                        "sms": sms,
                        "sessionReminders": reminders,
                        "paymentNotifications": payment,
                    }
                },
                "Notification settings saved.",
            )

    with tab_schedule:
        _schedule_editor(counselor)


def _schedule_editor(counselor):
    working_hours = counselor.working_hours
    init_slot_rows_if_missing(working_hours)
    apply_reset_if_marked(working_hours)

    st.markdown("**Working days**")
    day_cols = st.columns(len(WEEKDAYS))
    working_days = set()
    for col, day in zip(day_cols, WEEKDAYS):
        with col:
            if st.checkbox(day.capitalize()[:3], value=working_hours[day]["isWorking"], key=f"working_{day}"):
                working_days.add(day)

    st.markdown("**Available slots** (weekday + start time)")
    b1, b2, _ = st.columns([1, 1, 6])
    with b1:
        st.button("Add", on_click=add_slot_row, key="add_slot_btn")
    with b2:
        st.button("Reset", on_click=mark_reset, key="reset_slots_btn")

    for row in st.session_state[KEY_SLOT_ROWS]:
        rid = row["row_id"]
        col1, col2, col3 = st.columns([2, 2, 1])
        with col1:
            day = st.selectbox(
                "Weekday",
                WEEKDAYS,
                index=WEEKDAYS.index(row["day"]) if row["day"] in WEEKDAYS else 0,
                format_func=str.capitalize,
                key=f"slot_day_{rid}",
                label_visibility="collapsed",
            )
        with col2:
            slot_time = st.selectbox(
                "Time",
                TIME_SLOTS,
                index=TIME_SLOTS.index(row["time"]) if row["time"] in TIME_SLOTS else 0,
                key=f"slot_time_{rid}",
                label_visibility="collapsed",
            )
        with col3:
            st.button("Remove", on_click=remove_slot_row, args=(rid,), key=f"remove_slot_{rid}")

        row["day"] = day
        row["time"] = slot_time

    if st.button("Save schedule", type="primary", key="save_schedule_btn"):
        rows = st.session_state[KEY_SLOT_ROWS]
        errors = [e for r in rows for e in validate_time_slot(r["time"])]
        if errors:
            st.error(errors[0])
            return
        _save_settings(
            counselor,
            {"schedule": {"workingHours": rows_to_working_hours(rows, working_days)}},
            "Schedule saved.",
        )


def video_call_page(counselor, settings):
    st.header("Video Call")
    st.session_state.setdefault("call_muted", False)
    st.session_state.setdefault("call_video_on", True)

    c1, c2 = st.columns(2)
    with c1:
        with st.container(border=True):
            st.markdown(f"**{counselor.username} (You)**")
            st.caption("Camera on" if st.session_state["call_video_on"] else "Camera off")
    with c2:
        with st.container(border=True):
            st.markdown("**Student**")
            st.caption("Waiting to join...")

    b1, b2, b3, _ = st.columns([1, 1, 1, 3])
    with b1:
        muted = st.session_state["call_muted"]
        if st.button("Unmute" if muted else "Mute"):
            st.session_state["call_muted"] = not muted
            st.rerun()
    with b2:
        video_on = st.session_state["call_video_on"]
        if st.button("Stop video" if video_on else "Start video"):
            st.session_state["call_video_on"] = not video_on
            st.rerun()
    with b3:
        st.button("End call", type="primary", disabled=True, help="Calls are not connected yet.")


PAGES = {
    "Dashboard": dashboard_page,
    "Sessions": sessions_page,
    "Students": students_page,
    "Earnings": earnings_page,
    "Resources": resources_page,
    "Notifications": notifications_page,
    "Settings": settings_page,
    "Video Call": video_call_page,
}


# -----------------------------
# Streamlit UI
# -----------------------------
settings = get_settings_store()
apply_theme(settings.dark_mode)
require_login()

counselor = st.session_state[KEY_COUNSELOR]
store = get_notification_store()

with st.sidebar:
    st.markdown(f"**{counselor.username}**")
    st.caption(counselor.email)
    page = st.radio(
        "Navigate",
        list(PAGES),
        format_func=lambda p: f"{p} ({store.unread_count})" if p == "Notifications" and store.unread_count else p,
    )
    if st.button("Logout"):
        logout()

flash = pop_flash()
if flash:
    st.success(flash)

PAGES[page](counselor, settings)
