# counselor_dashboard/repositories/payments_repo.py
import pandas as pd
import structlog

from counselor_dashboard.services.gsheets_client import get_spreadsheet
from counselor_dashboard.repositories.worksheets import gateway_errors, open_tab
from counselor_dashboard.config import PAYMENTS_HEADERS, PAYMENTS_TAB
from counselor_dashboard.models.payment import Payment, parse_payment

logger = structlog.get_logger(__name__)


def _sort_key(p: Payment):
    ts = pd.to_datetime(p.payment_date, errors="coerce", utc=True, format="ISO8601")
    # unparseable dates sink to the bottom
    return pd.Timestamp.min.tz_localize("UTC") if pd.isna(ts) else ts


def fetch_counselor_payments(counselor_id: str) -> list[Payment]:
    """Payments for one counselor, newest payment_date first."""
    with gateway_errors("fetch_counselor_payments", counselor_id=counselor_id):
        ws = open_tab(get_spreadsheet(), PAYMENTS_TAB, PAYMENTS_HEADERS)
        records = ws.get_all_records(numericise_ignore=["all"])

    payments = [parse_payment(r) for r in records]
    payments = [p for p in payments if p.counselor_id == str(counselor_id)]
    payments.sort(key=_sort_key, reverse=True)

    logger.info("payments_fetched", counselor_id=counselor_id, count=len(payments))
    return payments


def payments_to_csv_bytes(payments: list[Payment]) -> bytes:
    df = pd.DataFrame(
        [
            {
                "paymentDate": p.payment_date,
                "reference": p.reference,
                "email": p.email,
                "amount": p.amount,
                "currency": p.currency,
                "paymentStatus": p.payment_status,
                "channel": p.channel,
            }
            for p in payments
        ],
        columns=["paymentDate", "reference", "email", "amount", "currency", "paymentStatus", "channel"],
    )
    return df.to_csv(index=False).encode("utf-8")
