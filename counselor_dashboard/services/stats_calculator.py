"""
Dashboard and earnings statistics.

Pure functions over Payment/Session lists that were already fetched by the
caller. Month buckets are calendar months in the counselor's timezone; a
record whose date does not parse is left out of every bucket instead of
raising.

The two trend figures disagree when last month is empty:
the dashboard reports 0, the earnings page reports 100.
"""
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

import pandas as pd
import pytz

from counselor_dashboard.config import DEFAULT_TIMEZONE, MONTHLY_SESSION_GOAL
from counselor_dashboard.models.payment import Payment
from counselor_dashboard.models.session import Session


@dataclass(frozen=True)
class DashboardStats:
    total_earnings: float
    active_students: int
    upcoming_sessions: int
    completed_sessions: int
    students_trend: float
    earnings_trend: float
    monthly_goal_progress: float


@dataclass(frozen=True)
class Trend:
    value: float
    is_positive: bool


@dataclass(frozen=True)
class EarningsStats:
    total_earnings: float
    pending_amount: float
    failed_amount: float
    this_month_earnings: float
    last_month_earnings: float
    earnings_trend: Trend


# -----------------------------
# Helpers
# -----------------------------
def resolve_now(now: Optional[datetime], tz: str) -> datetime:
    zone = pytz.timezone(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        return zone.localize(now)
    return now.astimezone(zone)


def _previous_month(now: datetime) -> tuple[int, int]:
    prev = now.replace(day=1) - timedelta(days=1)
    return prev.year, prev.month


def local_dates(values: Iterable, tz: str) -> pd.Series:
    """ISO strings -> tz-aware timestamps in `tz`; garbage becomes NaT."""
    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    parsed = pd.to_datetime(series, errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_convert(tz)


def _in_month(dates: pd.Series, year: int, month: int) -> pd.Series:
    # NaT compares False on both sides
    return (dates.dt.year == year) & (dates.dt.month == month)


def _percent_change(this: float, last: float, when_no_baseline: float) -> float:
    if last == 0:
        return float(when_no_baseline)
    return (this - last) / last * 100


def _payments_frame(payments: list[Payment], tz: str) -> pd.DataFrame:
    df = pd.DataFrame(
        [asdict(p) for p in payments],
        columns=["amount", "payment_date", "payment_status", "status"],
    )
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["date"] = local_dates(df["payment_date"], tz)
    return df


def _sessions_frame(sessions: list[Session], tz: str) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"user_id": s.user_id, "session_date": s.session_date, "status": s.status} for s in sessions],
        columns=["user_id", "session_date", "status"],
    )
    df["status"] = df["status"].fillna("").astype(str).str.lower()
    df["date"] = local_dates(df["session_date"], tz)
    return df


def _month_total(df: pd.DataFrame, year: int, month: int) -> float:
    return float(df.loc[_in_month(df["date"], year, month), "amount"].sum())


# -----------------------------
# Public API
# -----------------------------
def calculate_dashboard_stats(
    payments: list[Payment],
    sessions: list[Session],
    now: Optional[datetime] = None,
    tz: str = DEFAULT_TIMEZONE,
) -> DashboardStats:
    now = resolve_now(now, tz)
    last_year, last_month = _previous_month(now)

    pay = _payments_frame(payments, tz)
    completed = pay[pay["payment_status"] == "completed"]
    total_earnings = float(completed["amount"].sum())

    this_month_earnings = _month_total(completed, now.year, now.month)
    last_month_earnings = _month_total(completed, last_year, last_month)
    earnings_trend = _percent_change(this_month_earnings, last_month_earnings, when_no_baseline=0)

    ses = _sessions_frame(sessions, tz)
    this_month_mask = _in_month(ses["date"], now.year, now.month)
    last_month_mask = _in_month(ses["date"], last_year, last_month)

    active_students = int(ses["user_id"].nunique())
    students_this_month = int(ses.loc[this_month_mask, "user_id"].nunique())
    students_last_month = int(ses.loc[last_month_mask, "user_id"].nunique())
    students_trend = _percent_change(students_this_month, students_last_month, when_no_baseline=0)

    is_scheduled = ses["status"] == "scheduled"
    is_completed = ses["status"] == "completed"
    upcoming = int((is_scheduled & (ses["date"] > pd.Timestamp(now))).sum())
    completed_sessions = int(is_completed.sum())

    completed_this_month = int((is_completed & this_month_mask).sum())
    goal_progress = completed_this_month / MONTHLY_SESSION_GOAL * 100

    return DashboardStats(
        total_earnings=total_earnings,
        active_students=active_students,
        upcoming_sessions=upcoming,
        completed_sessions=completed_sessions,
        students_trend=students_trend,
        earnings_trend=earnings_trend,
        monthly_goal_progress=min(goal_progress, 100.0),
    )


def calculate_earnings_stats(
    payments: list[Payment],
    now: Optional[datetime] = None,
    tz: str = DEFAULT_TIMEZONE,
) -> EarningsStats:
    now = resolve_now(now, tz)
    last_year, last_month = _previous_month(now)

    pay = _payments_frame(payments, tz)
    completed = pay[pay["payment_status"] == "completed"]
    pending = pay[pay["payment_status"] == "pending"]
    failed = pay[pay["status"] == "failed"]

    this_month_earnings = _month_total(completed, now.year, now.month)
    last_month_earnings = _month_total(completed, last_year, last_month)
    trend = _percent_change(this_month_earnings, last_month_earnings, when_no_baseline=100)

    return EarningsStats(
        total_earnings=float(completed["amount"].sum()),
        pending_amount=float(pending["amount"].sum()),
        failed_amount=float(failed["amount"].sum()),
        this_month_earnings=this_month_earnings,
        last_month_earnings=last_month_earnings,
        earnings_trend=Trend(value=abs(trend), is_positive=trend >= 0),
    )


def monthly_earnings(payments: list[Payment], year: int, tz: str = DEFAULT_TIMEZONE) -> list[float]:
    """Completed-payment totals for Jan..Dec of `year`."""
    pay = _payments_frame(payments, tz)
    completed = pay[(pay["payment_status"] == "completed") & (pay["date"].dt.year == year)]
    by_month = completed.groupby(completed["date"].dt.month)["amount"].sum()
    return [float(by_month.get(m, 0.0)) for m in range(1, 13)]


def payment_years(payments: list[Payment], now: Optional[datetime] = None, tz: str = DEFAULT_TIMEZONE) -> list[int]:
    now = resolve_now(now, tz)
    years = {int(y) for y in local_dates([p.payment_date for p in payments], tz).dt.year.dropna()}
    years.add(now.year)
    return sorted(years, reverse=True)


def upcoming_sessions(
    sessions: list[Session],
    now: Optional[datetime] = None,
    limit: int = 5,
    tz: str = DEFAULT_TIMEZONE,
) -> list[Session]:
    now = resolve_now(now, tz)
    dates = local_dates([s.session_date for s in sessions], tz)
    picked = [
        (d, s)
        for d, s in zip(dates, sessions)
        if s.status.lower() == "scheduled" and pd.notna(d) and d > now
    ]
    picked.sort(key=lambda pair: pair[0])
    return [s for _, s in picked[:limit]]
