# backend/planner/utils.py
from datetime import date, datetime, time, timedelta, timezone

from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 6


def normalize_email(e: str) -> str:
    if not e:
        return ""
    return e.strip().lower()


def is_email_valid(email: str) -> bool:
    # surrounding whitespace makes the address invalid rather than being trimmed
    if not email or email != email.strip():
        return False
    try:
        # same check pydantic's EmailStr applies when the student is read back
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def subject_name_key(name: str) -> str:
    """Case-folded subject name used for per-student uniqueness."""
    return (name or "").strip().casefold()


def is_password_valid(pw: str) -> bool:
    return bool(pw) and len(pw) >= MIN_PASSWORD_LENGTH


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in created_at / updated_at."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(value) -> datetime:
    """Midnight at the start of the given date or datetime."""
    d = value.date() if isinstance(value, datetime) else value
    return datetime.combine(d, time.min)


def end_of_day_exclusive(d: date) -> datetime:
    """Midnight at the start of the day after `d`, for inclusive whole-day ranges."""
    return start_of_day(d) + timedelta(days=1)


def to_local_naive(value: datetime) -> datetime:
    """Deadlines are stored as naive local time; aware input is converted first."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
