"""Birth and death date plausibility checks.

Dates are optional strings; an empty value is always valid. Accepted
forms are ``YYYY``, ``YYYY-MM``, ``YYYY-MM-DD`` and ISO-8601 datetimes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime

MIN_YEAR = 1800
MAX_LIFESPAN_YEARS = 150

_PARTIAL_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")


@dataclass
class DateValidationResult:
    is_valid: bool
    error: str | None = None


def parse_date(value: str | None) -> datetime | None:
    """Parse a member date string into an aware UTC datetime, or None."""
    if not value or not value.strip():
        return None
    text = value.strip()

    match = _PARTIAL_DATE.match(text)
    if match:
        year = int(match.group(1))
        month = int(match.group(2) or 1)
        day = int(match.group(3) or 1)
        try:
            return datetime(year, month, day, tzinfo=UTC)
        except ValueError:
            return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _check_common(
    value: str, label: str, now: datetime
) -> datetime | DateValidationResult:
    """Parsed date, or the failing result."""
    parsed = parse_date(value)
    if parsed is None:
        return DateValidationResult(False, "Invalid date format")
    if parsed > now:
        return DateValidationResult(False, f"{label} date cannot be in the future")
    if parsed.year < MIN_YEAR:
        return DateValidationResult(False, f"{label} year must be after {MIN_YEAR}")
    if parsed.year > now.year:
        return DateValidationResult(False, f"{label} year cannot be after {now.year}")
    return parsed


def validate_birth_date(
    date_str: str | None, now: datetime | None = None
) -> DateValidationResult:
    if not date_str:
        return DateValidationResult(True)
    checked = _check_common(date_str, "Birth", now or datetime.now(UTC))
    if isinstance(checked, DateValidationResult):
        return checked
    return DateValidationResult(True)


def validate_death_date(
    date_str: str | None,
    birth_date_str: str | None = None,
    now: datetime | None = None,
) -> DateValidationResult:
    if not date_str:
        return DateValidationResult(True)
    death = _check_common(date_str, "Death", now or datetime.now(UTC))
    if isinstance(death, DateValidationResult):
        return death

    # An unparseable birth date is reported by validate_birth_date, not here
    birth = parse_date(birth_date_str)
    if birth is not None:
        if death < birth:
            return DateValidationResult(False, "Death date cannot be before birth date")
        if death.year - birth.year > MAX_LIFESPAN_YEARS:
            return DateValidationResult(
                False, f"Age at death cannot exceed {MAX_LIFESPAN_YEARS} years"
            )
    return DateValidationResult(True)


def validate_dates(
    birth_date_str: str | None = None,
    death_date_str: str | None = None,
    now: datetime | None = None,
) -> DateValidationResult:
    """Birth first, then death; stops at the first failure."""
    if birth_date_str:
        birth = validate_birth_date(birth_date_str, now=now)
        if not birth.is_valid:
            return birth
    if death_date_str:
        death = validate_death_date(death_date_str, birth_date_str, now=now)
        if not death.is_valid:
            return death
    return DateValidationResult(True)


def calculate_age(
    birth_date_str: str | None,
    death_date_str: str | None = None,
    now: datetime | None = None,
) -> int | None:
    """Age in whole years at death, or today if still living."""
    birth = parse_date(birth_date_str)
    if birth is None:
        return None
    end = parse_date(death_date_str) if death_date_str else (now or datetime.now(UTC))
    if end is None:
        return None
    age = end.year - birth.year
    if (end.month, end.day) < (birth.month, birth.day):
        age -= 1
    return age if age >= 0 else None


def min_date() -> str:
    return f"{MIN_YEAR}-01-01"


def max_date(now: datetime | None = None) -> str:
    return (now or datetime.now(UTC)).date().isoformat()
