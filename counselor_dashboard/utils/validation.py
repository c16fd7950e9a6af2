import re

from counselor_dashboard.models.counselor import SPECIALIZATIONS

_TIME_SLOT = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_profile_inputs(username: str, bio: str, specializations: list[str]) -> list[str]:
    errors: list[str] = []
    if not (username or "").strip():
        errors.append("Name is required.")
    if len((bio or "").strip()) > 1000:
        errors.append("Bio must be 1000 characters or fewer.")
    if not specializations:
        errors.append("Select at least one specialization.")
    unknown = [s for s in specializations if s not in SPECIALIZATIONS]
    if unknown:
        errors.append(f"Unknown specialization(s): {', '.join(unknown)}.")
    return errors


def validate_time_slot(value: str) -> list[str]:
    if not _TIME_SLOT.match((value or "").strip()):
        return ["Time must be HH:MM (24-hour)."]
    return []


def validate_login_inputs(email: str, password: str) -> list[str]:
    errors: list[str] = []
    if not (email or "").strip():
        errors.append("Email is required.")
    elif "@" not in email:
        errors.append("Enter a valid email address.")
    if not password:
        errors.append("Password is required.")
    return errors
