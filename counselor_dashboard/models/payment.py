from dataclasses import dataclass

from counselor_dashboard.models.fields import number, text


@dataclass(frozen=True)
class Payment:
    """A payment document written by the payment processor. Read-only here."""

    payment_id: str = ""
    amount: float = 0.0
    amount_paid: float = 0.0
    channel: str = ""
    counselor_id: str = ""
    counselor_name: str = ""
    currency: str = "GHS"
    email: str = ""
    payment_date: str = ""       # ISO-8601
    payment_status: str = ""     # completed/pending/...
    reference: str = ""
    session_id: str = ""
    status: str = ""             # not a synonym of payment_status; "failed" is reported here
    timestamp: str = ""
    user_id: str = ""


def parse_payment(record: dict) -> Payment:
    return Payment(
        payment_id=text(record.get("paymentId")),
        amount=number(record.get("amount")),
        amount_paid=number(record.get("amountPaid")),
        channel=text(record.get("channel")),
        counselor_id=text(record.get("counsellorId")) or text(record.get("counselorId")),
        counselor_name=text(record.get("counselorName")),
        currency=text(record.get("currency"), "GHS"),
        email=text(record.get("email")),
        payment_date=text(record.get("paymentDate")),
        payment_status=text(record.get("paymentStatus")),
        reference=text(record.get("reference")),
        session_id=text(record.get("sessionId")),
        status=text(record.get("status")),
        timestamp=text(record.get("timestamp")),
        user_id=text(record.get("userId")),
    )
