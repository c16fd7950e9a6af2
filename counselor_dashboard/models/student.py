from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import pytz

from counselor_dashboard.models.fields import json_cell, number, text

_EMPTY_CONTACT = {"name": "", "phoneCountryCode": "", "phoneNumber": "", "relationship": ""}
_EMPTY_HISTORY = {"allergies": "", "conditions": "", "medications": ""}


@dataclass
class Student:
    uid: str
    name: str
    email: str
    bio: str = ""
    user_bio: str = ""
    concerns: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    created_at: str = ""
    last_updated: str = ""
    phone: str = ""
    phone_country_code: str = ""
    profile_completion_percentage: float = 0
    profile_picture: Optional[str] = None
    emergency_contact: dict = field(default_factory=lambda: dict(_EMPTY_CONTACT))
    medical_history: dict = field(default_factory=lambda: dict(_EMPTY_HISTORY))


def parse_student(record: dict, uid: str) -> Optional[Student]:
    """
    Returns None for profiles a counselor cannot act on: no name, the
    placeholder name "Unknown", or no email.
    """
    name = text(record.get("name"))
    email = text(record.get("email"))
    if not name or not email or name == "Unknown":
        return None

    now_iso = datetime.now(pytz.UTC).isoformat()
    bio = text(record.get("bio"))
    return Student(
        uid=uid,
        name=name,
        email=email,
        bio=bio,
        user_bio=text(record.get("userBio")) or bio,
        concerns=json_cell(record.get("concerns"), []),
        goals=json_cell(record.get("goals"), []),
        created_at=text(record.get("createdAt"), now_iso),
        last_updated=text(record.get("lastUpdated"), now_iso),
        phone=text(record.get("phone")),
        phone_country_code=text(record.get("phoneCountryCode")),
        profile_completion_percentage=number(record.get("profileCompletionPercentage")),
        profile_picture=text(record.get("profilePicture")) or None,
        emergency_contact={**_EMPTY_CONTACT, **json_cell(record.get("emergencyContact"), {})},
        medical_history={**_EMPTY_HISTORY, **json_cell(record.get("medicalHistory"), {})},
    )
