from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

import pytz

from counselor_dashboard.config import SESSIONS_HEADERS
from counselor_dashboard.models.fields import dump_json, json_cell, number, text


# -----------------------------
# Data model
# -----------------------------
@dataclass
class Session:
    session_id: str = ""
    counselor_id: str = ""
    user_id: str = ""
    user_name: str = ""
    user_email: str = ""
    user_phone: str = ""
    user_bio: str = ""
    session_date: str = ""       # ISO-8601
    duration: float = 0          # minutes
    status: str = "scheduled"    # scheduled/completed/cancelled
    concerns: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    notes: str = ""
    profile_picture: Optional[str] = None

    @staticmethod
    def create(
        *,
        counselor_id: str,
        user_id: str,
        user_name: str,
        session_date: datetime,
        duration: float,
        user_email: str = "",
        user_phone: str = "",
        concerns: Optional[list[str]] = None,
        goals: Optional[list[str]] = None,
        notes: str = "",
    ) -> "Session":
        if session_date.tzinfo is None:
            session_date = pytz.UTC.localize(session_date)
        return Session(
            session_id=str(uuid.uuid4()),
            counselor_id=counselor_id,
            user_id=user_id,
            user_name=user_name.strip(),
            user_email=user_email.strip(),
            user_phone=user_phone.strip(),
            session_date=session_date.isoformat(),
            duration=float(duration),
            status="scheduled",
            concerns=list(concerns or []),
            goals=list(goals or []),
            notes=notes,
        )

    def to_row(self) -> list:
        row = {
            "sessionId": self.session_id,
            "counselorId": self.counselor_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userPhone": self.user_phone,
            "userBio": self.user_bio,
            "sessionDate": self.session_date,
            "duration": self.duration,
            "status": self.status,
            "concerns": dump_json(self.concerns),
            "goals": dump_json(self.goals),
            "notes": self.notes,
        }
        return [row.get(h, "") for h in SESSIONS_HEADERS]


def parse_session(record: dict) -> Session:
    """
    Build a Session from a raw sheet record. Every missing field gets a
    type-appropriate default so callers never see None where a str/list is
    expected (profile_picture is the one optional field).
    """
    return Session(
        session_id=text(record.get("sessionId")),
        counselor_id=text(record.get("counselorId")),
        user_id=text(record.get("userId")),
        user_name=text(record.get("userName")),
        user_email=text(record.get("userEmail")),
        user_phone=text(record.get("userPhone")),
        user_bio=text(record.get("userBio")),
        session_date=text(record.get("sessionDate"), datetime.now(pytz.UTC).isoformat()),
        duration=number(record.get("duration")),
        status=text(record.get("status"), "scheduled"),
        concerns=json_cell(record.get("concerns"), []),
        goals=json_cell(record.get("goals"), []),
        notes=text(record.get("notes")),
        profile_picture=text(record.get("profilePicture")) or None,
    )
