from datetime import datetime

import pytest
import pytz

from counselor_dashboard.models.payment import Payment
from counselor_dashboard.models.session import Session
from counselor_dashboard.services.stats_calculator import (
    Trend,
    calculate_dashboard_stats,
    calculate_earnings_stats,
    monthly_earnings,
    payment_years,
    upcoming_sessions,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=pytz.UTC)


def pay(amount, date, payment_status="completed", status=""):
    return Payment(amount=amount, payment_date=date, payment_status=payment_status, status=status)


def session(user_id, date, status="scheduled"):
    return Session(session_id=f"s-{user_id}-{date}", user_id=user_id, session_date=date, status=status)


# -----------------------------
# earnings
# -----------------------------
def test_earnings_month_over_month():
    payments = [pay(100, "2026-10-05T10:00:00Z"), pay(50, "2026-09-12T10:00:00Z")]

    stats = calculate_earnings_stats(payments, now=NOW)

    assert stats.this_month_earnings == 100
    assert stats.last_month_earnings == 50
    assert stats.total_earnings == 150
    assert stats.earnings_trend == Trend(value=100, is_positive=True)


def test_earnings_trend_without_last_month_is_100():
    stats = calculate_earnings_stats([pay(80, "2026-10-02T10:00:00Z")], now=NOW)
    assert stats.earnings_trend == Trend(value=100, is_positive=True)


def test_earnings_trend_without_any_payments_is_100():
    stats = calculate_earnings_stats([], now=NOW)
    assert stats.total_earnings == 0
    assert stats.earnings_trend == Trend(value=100, is_positive=True)


def test_earnings_negative_trend_reports_magnitude():
    payments = [pay(25, "2026-10-05T10:00:00Z"), pay(100, "2026-09-05T10:00:00Z")]

    trend = calculate_earnings_stats(payments, now=NOW).earnings_trend

    assert trend.value == 75
    assert trend.is_positive is False


def test_pending_and_failed_read_different_fields():
    payments = [
        pay(100, "2026-10-05T10:00:00Z"),
        pay(40, "2026-10-06T10:00:00Z", payment_status="pending"),
        pay(30, "2026-10-07T10:00:00Z", payment_status="", status="failed"),
        # paymentStatus "failed" alone does not count as failed
        pay(999, "2026-10-07T10:00:00Z", payment_status="failed"),
    ]

    stats = calculate_earnings_stats(payments, now=NOW)

    assert stats.total_earnings == 100
    assert stats.pending_amount == 40
    assert stats.failed_amount == 30


def test_unparseable_payment_dates_only_count_towards_total():
    payments = [pay(100, "not-a-date"), pay(20, "2026-10-01T09:00:00Z")]

    stats = calculate_earnings_stats(payments, now=NOW)

    assert stats.total_earnings == 120
    assert stats.this_month_earnings == 20


def test_month_buckets_follow_the_timezone():
    # 23:30 UTC on Sep 30 is already Oct 1 in Lagos (UTC+1)
    payments = [pay(60, "2026-09-30T23:30:00Z")]

    accra = calculate_earnings_stats(payments, now=NOW, tz="Africa/Accra")
    lagos = calculate_earnings_stats(payments, now=NOW, tz="Africa/Lagos")

    assert accra.this_month_earnings == 0
    assert accra.last_month_earnings == 60
    assert lagos.this_month_earnings == 60


def test_january_compares_with_previous_december():
    payments = [pay(10, "2027-01-03T10:00:00Z"), pay(20, "2026-12-20T10:00:00Z")]

    stats = calculate_earnings_stats(payments, now=datetime(2027, 1, 10, tzinfo=pytz.UTC))

    assert stats.last_month_earnings == 20
    assert stats.earnings_trend == Trend(value=50, is_positive=False)


# -----------------------------
# dashboard
# -----------------------------
def test_dashboard_trends_are_zero_without_last_month():
    payments = [pay(100, "2026-10-05T10:00:00Z")]
    sessions = [session("u1", "2026-10-03T10:00:00Z", "completed")]

    stats = calculate_dashboard_stats(payments, sessions, now=NOW)

    assert stats.earnings_trend == 0
    assert stats.students_trend == 0


def test_dashboard_empty_inputs():
    stats = calculate_dashboard_stats([], [], now=NOW)

    assert stats.total_earnings == 0
    assert stats.active_students == 0
    assert stats.upcoming_sessions == 0
    assert stats.completed_sessions == 0
    assert stats.monthly_goal_progress == 0


def test_active_students_are_distinct_user_ids():
    sessions = [
        session("u1", "2026-10-01T10:00:00Z"),
        session("u1", "2026-10-08T10:00:00Z"),
        session("u2", "2026-10-09T10:00:00Z"),
    ]
    assert calculate_dashboard_stats([], sessions, now=NOW).active_students == 2


def test_upcoming_and_completed_counts():
    sessions = [
        session("u1", "2026-10-25T10:00:00Z", "scheduled"),
        session("u2", "2026-10-02T10:00:00Z", "completed"),
    ]

    stats = calculate_dashboard_stats([], sessions, now=NOW)

    assert stats.upcoming_sessions == 1
    assert stats.completed_sessions == 1


def test_scheduled_session_in_the_past_is_not_upcoming():
    sessions = [session("u1", "2026-10-18T10:00:00Z", "scheduled")]
    assert calculate_dashboard_stats([], sessions, now=NOW).upcoming_sessions == 0


def test_status_matching_ignores_case():
    sessions = [session("u1", "2026-10-02T10:00:00Z", "Completed")]
    assert calculate_dashboard_stats([], sessions, now=NOW).completed_sessions == 1


def test_goal_progress_is_capped_at_100():
    sessions = [session(f"u{i}", f"2026-10-{i + 1:02d}T10:00:00Z", "completed") for i in range(25)]
    assert calculate_dashboard_stats([], sessions, now=NOW).monthly_goal_progress == 100


def test_goal_progress_counts_only_this_month():
    sessions = [
        session("u1", "2026-10-02T10:00:00Z", "completed"),
        session("u2", "2026-10-03T10:00:00Z", "completed"),
        session("u3", "2026-09-03T10:00:00Z", "completed"),
    ]
    assert calculate_dashboard_stats([], sessions, now=NOW).monthly_goal_progress == pytest.approx(10.0)


def test_students_trend():
    sessions = [
        session("u1", "2026-10-02T10:00:00Z"),
        session("u2", "2026-10-03T10:00:00Z"),
        session("u3", "2026-10-04T10:00:00Z"),
        session("u1", "2026-09-02T10:00:00Z"),
        session("u2", "2026-09-03T10:00:00Z"),
    ]
    assert calculate_dashboard_stats([], sessions, now=NOW).students_trend == pytest.approx(50.0)


def test_dashboard_earnings_ignore_pending():
    payments = [pay(100, "2026-10-05T10:00:00Z"), pay(70, "2026-10-05T10:00:00Z", "pending")]
    assert calculate_dashboard_stats(payments, [], now=NOW).total_earnings == 100


def test_malformed_session_dates_are_skipped():
    sessions = [session("u1", "garbage", "scheduled"), session("u2", "2026-10-30T10:00:00Z")]

    stats = calculate_dashboard_stats([], sessions, now=NOW)

    assert stats.upcoming_sessions == 1
    assert stats.active_students == 2


# -----------------------------
# chart and lists
# -----------------------------
def test_monthly_earnings_buckets_completed_payments():
    payments = [
        pay(10, "2026-01-15T10:00:00Z"),
        pay(15, "2026-01-20T10:00:00Z"),
        pay(30, "2026-10-01T10:00:00Z"),
        pay(99, "2026-10-01T10:00:00Z", "pending"),
        pay(50, "2025-10-01T10:00:00Z"),
    ]

    months = monthly_earnings(payments, 2026)

    assert len(months) == 12
    assert months[0] == 25
    assert months[9] == 30
    assert sum(months) == 55


def test_payment_years_include_current_year():
    payments = [pay(10, "2024-05-01T10:00:00Z"), pay(10, "bad")]
    assert payment_years(payments, now=NOW) == [2026, 2024]


def test_upcoming_sessions_sorted_and_limited():
    sessions = [session(f"u{d}", f"2026-10-{d}T10:00:00Z") for d in (28, 21, 30, 22, 25, 29)]
    sessions.append(session("done", "2026-10-20T10:00:00Z", "completed"))

    picked = upcoming_sessions(sessions, now=NOW, limit=3)

    assert [s.user_id for s in picked] == ["u21", "u22", "u25"]
