from dataclasses import dataclass, field
import time

from counselor_dashboard.config import (
    COUNSELORS_HEADERS,
    DEFAULT_CURRENCY,
    DEFAULT_TIMEZONE,
    DEFAULT_WORKING_DAYS,
    WEEKDAYS,
)
from counselor_dashboard.models.fields import dump_json, json_cell, number, text

SPECIALIZATIONS = {
    "anxiety": "Anxiety & Stress Management",
    "depression": "Depression",
    "relationships": "Relationship Counseling",
    "trauma": "Trauma & PTSD",
    "addiction": "Addiction Recovery",
    "grief": "Grief & Loss",
    "career": "Career Counseling",
    "family": "Family Therapy",
    "youth": "Youth & Adolescent",
    "couples": "Couples Therapy",
    "eating": "Eating Disorders",
    "lgbtq": "LGBTQ+ Support",
    "mindfulness": "Mindfulness & Meditation",
    "behavioral": "Behavioral Issues",
    "academic": "Academic Performance",
}

DEFAULT_NOTIFICATION_PREFERENCES = {
    "email": True,
    "sms": False,
    "sessionReminders": True,
    "paymentNotifications": True,
}


def now_ms() -> int:
    return int(time.time() * 1000)


def default_working_hours() -> dict:
    return {
        day: {"isWorking": day in DEFAULT_WORKING_DAYS, "availableSlots": []}
        for day in WEEKDAYS
    }


def generate_time_slots(start_hour: int = 9, end_hour: int = 22) -> list[str]:
    """Half-hour slots from start_hour:00 through end_hour:30."""
    return [f"{h:02d}:{m:02d}" for h in range(start_hour, end_hour + 1) for m in (0, 30)]


def specialization_options(values: list[str]) -> list[dict]:
    return [{"value": v, "label": SPECIALIZATIONS[v]} for v in values if v in SPECIALIZATIONS]


@dataclass
class CounselorProfile:
    uid: str
    username: str
    email: str
    photo_url: str = ""
    bio: str = ""
    specializations: list[dict] = field(default_factory=list)
    settings: dict = field(default_factory=dict)
    created_at: int = 0
    updated_at: int = 0

    # settings views with the same fallbacks the settings page shows
    @property
    def language(self) -> str:
        return self.settings.get("language") or "en"

    @property
    def timezone(self) -> str:
        return self.settings.get("timezone") or DEFAULT_TIMEZONE

    @property
    def currency(self) -> str:
        return self.settings.get("currency") or DEFAULT_CURRENCY

    @property
    def notification_preferences(self) -> dict:
        return {**DEFAULT_NOTIFICATION_PREFERENCES, **(self.settings.get("notifications") or {})}

    @property
    def working_hours(self) -> dict:
        saved = (self.settings.get("schedule") or {}).get("workingHours") or {}
        merged = default_working_hours()
        for day, hours in merged.items():
            day_saved = saved.get(day) or {}
            hours["isWorking"] = bool(day_saved.get("isWorking", hours["isWorking"]))
            hours["availableSlots"] = list(day_saved.get("availableSlots") or [])
        return merged

    def to_row(self) -> list:
        row = {
            "uid": self.uid,
            "username": self.username,
            "email": self.email,
            "photoURL": self.photo_url,
            "bio": self.bio,
            "specializations": dump_json(self.specializations),
            "settings": dump_json(self.settings),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        return [row.get(h, "") for h in COUNSELORS_HEADERS]


def parse_counselor(record: dict) -> CounselorProfile:
    return CounselorProfile(
        uid=text(record.get("uid")),
        username=text(record.get("username")),
        email=text(record.get("email")),
        photo_url=text(record.get("photoURL")),
        bio=text(record.get("bio")),
        specializations=json_cell(record.get("specializations"), []),
        settings=json_cell(record.get("settings"), {}),
        created_at=int(number(record.get("createdAt"))),
        updated_at=int(number(record.get("updatedAt"))),
    )
