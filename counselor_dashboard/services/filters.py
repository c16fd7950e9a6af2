from datetime import datetime
from typing import Optional

import pandas as pd

from counselor_dashboard.config import DEFAULT_TIMEZONE, SESSION_TABS
from counselor_dashboard.models.resource import Resource
from counselor_dashboard.models.session import Session
from counselor_dashboard.models.student import Student
from counselor_dashboard.services.stats_calculator import local_dates, resolve_now


def filter_sessions(
    sessions: list[Session],
    tab: str,
    now: Optional[datetime] = None,
    tz: str = DEFAULT_TIMEZONE,
) -> list[Session]:
    """
    upcoming:  scheduled and not yet started
    past:      completed, or scheduled but already gone by
    cancelled: cancelled
    """
    if tab not in SESSION_TABS:
        raise ValueError(f"Unknown sessions tab: {tab!r}")

    now = resolve_now(now, tz)
    dates = local_dates([s.session_date for s in sessions], tz)
    out = []
    for d, s in zip(dates, sessions):
        status = s.status.lower()
        before_now = pd.notna(d) and d < now
        if tab == "upcoming" and status == "scheduled" and not before_now:
            out.append(s)
        elif tab == "past" and (status == "completed" or (status == "scheduled" and before_now)):
            out.append(s)
        elif tab == "cancelled" and status == "cancelled":
            out.append(s)
    return out


def session_status_label(session: Session, now: Optional[datetime] = None, tz: str = DEFAULT_TIMEZONE) -> str:
    now = resolve_now(now, tz)
    d = local_dates([session.session_date], tz).iloc[0]
    if session.status == "scheduled" and pd.notna(d) and d < now:
        return "Past"
    return session.status.capitalize() if session.status else "Unknown"


def filter_students(
    students: list[Student],
    query: str = "",
    concerns: Optional[list[str]] = None,
    goals: Optional[list[str]] = None,
) -> list[Student]:
    q = (query or "").strip().lower()
    concerns = concerns or []
    goals = goals or []

    out = []
    for s in students:
        if not s.name or s.name == "Unknown" or not s.email:
            continue
        if q and q not in s.name.lower() and q not in s.email.lower():
            continue
        if concerns and not any(c in s.concerns for c in concerns):
            continue
        if goals and not any(g in s.goals for g in goals):
            continue
        out.append(s)
    return out


def filter_resources(resources: list[Resource], category: str, term: str = "") -> list[Resource]:
    t = (term or "").strip().lower()

    def _matches(r: Resource) -> bool:
        if not t:
            return True
        return (
            t in r.title.lower()
            or t in r.description.lower()
            or any(t in tag.lower() for tag in r.tags)
        )

    return [r for r in resources if r.category == category and _matches(r)]
