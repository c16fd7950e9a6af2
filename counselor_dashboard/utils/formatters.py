from typing import Optional

import pandas as pd

from counselor_dashboard.config import CONVERSION_RATES, CURRENCY_SYMBOLS, DEFAULT_TIMEZONE


def format_currency(amount: float, target_currency: str = "GHS", source_currency: str = "GHS") -> str:
    """
    Convert with the fixed rate table, then prefix the target symbol.
    Unknown pairs fall back to a rate of 1.
    """
    rate = CONVERSION_RATES.get(source_currency, {}).get(target_currency) or 1
    symbol = CURRENCY_SYMBOLS.get(target_currency, target_currency)
    return f"{symbol}{float(amount) * rate:.2f}"


def _local_ts(value, tz: str) -> Optional[pd.Timestamp]:
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce", utc=True, format="ISO8601")
    if pd.isna(ts):
        return None
    return ts.tz_convert(tz)


def _clock(ts: pd.Timestamp) -> str:
    return f"{ts.strftime('%I').lstrip('0')}:{ts.strftime('%M')} {ts.strftime('%p')}"


def format_session_date(value, tz: str = DEFAULT_TIMEZONE) -> str:
    if not value:
        return "Date not set"
    ts = _local_ts(value, tz)
    if ts is None:
        return "Invalid date"
    return f"{ts.strftime('%B')} {ts.day}, {ts.year}"


def format_session_time(value, tz: str = DEFAULT_TIMEZONE) -> str:
    if not value:
        return "Time not set"
    ts = _local_ts(value, tz)
    if ts is None:
        return "Invalid time"
    return _clock(ts)


def format_long_datetime(value, tz: str = DEFAULT_TIMEZONE) -> str:
    """e.g. "Monday, October 19, 2026 at 2:30 PM"."""
    ts = _local_ts(value, tz)
    if ts is None:
        return "Invalid date"
    return f"{ts.strftime('%A, %B')} {ts.day}, {ts.year} at {_clock(ts)}"


def format_phone_number(phone: str, country_code: str = "") -> str:
    if not phone:
        return "No phone number provided"
    return f"{country_code or ''} {phone}".strip()


def time_ago(created_ms: int, now_ms: int) -> str:
    seconds = max(0, (now_ms - created_ms) // 1000)
    if seconds < 60:
        return "less than a minute ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"about {hours} hour{'s' if hours != 1 else ''} ago"
    days = hours // 24
    if days < 30:
        return f"{days} day{'s' if days != 1 else ''} ago"
    months = days // 30
    if months < 12:
        return f"{months} month{'s' if months != 1 else ''} ago"
    years = months // 12
    return f"about {years} year{'s' if years != 1 else ''} ago"
