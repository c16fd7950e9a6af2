import os
from pathlib import Path

# counselor_dashboard/config.py

SESSIONS_TAB = "Sessions"
SESSIONS_HEADERS = [
    "sessionId",
    "counselorId",
    "userId",
    "userName",
    "userEmail",
    "userPhone",
    "userBio",
    "sessionDate",            # ISO-8601
    "duration",               # minutes
    "status",                 # scheduled/completed/cancelled
    "concerns",               # JSON list[str]
    "goals",                  # JSON list[str]
    "notes",
]

PAYMENTS_TAB = "Payments"
PAYMENTS_HEADERS = [
    "paymentId",
    "amount",
    "amountPaid",
    "channel",
    "counsellorId",           # spelled this way by the payment processor
    "counselorName",
    "currency",
    "email",
    "paymentDate",            # ISO-8601
    "paymentStatus",          # completed/pending/...
    "reference",
    "sessionId",
    "status",                 # separate field, "failed" lives here
    "timestamp",
    "userId",
]

USERS_TAB = "Users"
USERS_HEADERS = [
    "uid",
    "name",
    "email",
    "bio",
    "userBio",
    "concerns",               # JSON list[str]
    "goals",                  # JSON list[str]
    "createdAt",
    "lastUpdated",
    "phone",
    "phoneCountryCode",
    "profileCompletionPercentage",
    "profilePicture",
    "emergencyContact",       # JSON object
    "medicalHistory",         # JSON object
]

COUNSELORS_TAB = "Counselors"
COUNSELORS_HEADERS = [
    "uid",
    "username",
    "email",
    "photoURL",
    "bio",
    "specializations",        # JSON list[{value,label}]
    "settings",               # JSON object
    "createdAt",              # epoch ms
    "updatedAt",              # epoch ms
]

SESSION_STATUSES = ["scheduled", "completed", "cancelled"]
SESSION_TABS = ["upcoming", "past", "cancelled"]

NOTIFICATION_TYPES = ["info", "success", "warning", "error"]

MONTHLY_SESSION_GOAL = 20

DEFAULT_TIMEZONE = "Africa/Accra"
DEFAULT_CURRENCY = "GHS"
LANGUAGES = {"en": "English", "fr": "French", "es": "Spanish"}

CURRENCY_SYMBOLS = {"GHS": "₵", "USD": "$", "EUR": "€", "GBP": "£"}
CONVERSION_RATES = {
    "GHS": {"USD": 0.083, "EUR": 0.076, "GBP": 0.065, "GHS": 1},
    "USD": {"GHS": 12.05, "EUR": 0.92, "GBP": 0.79, "USD": 1},
    "EUR": {"GHS": 13.16, "USD": 1.09, "GBP": 0.86, "EUR": 1},
    "GBP": {"GHS": 15.38, "USD": 1.27, "EUR": 1.17, "GBP": 1},
}

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
DEFAULT_WORKING_DAYS = {"monday", "tuesday", "wednesday", "thursday", "friday"}

RESOURCE_CATEGORIES = {
    "guides": "Guides & Templates",
    "worksheets": "Worksheets",
    "training": "Training Resources",
    "assessments": "Assessments",
}

# Local durable slots
NOTIFICATION_SLOT = "notification-storage"
SETTINGS_SLOT = "settings-storage"
LOCAL_STORE_FILE = Path(
    os.getenv("COUNSELOR_DASHBOARD_STORE", Path(__file__).resolve().parent.parent / ".counselor_dashboard.db")
)

TEST_NOTIFICATION_INTERVAL = 0.5  # seconds between seeded notifications


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SEED_TEST_NOTIFICATIONS = _env_flag("SEED_TEST_NOTIFICATIONS")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
JSON_LOGS = _env_flag("JSON_LOGS")
