"""Calendar utilities for the savings engine.

All engine arithmetic works on civil ``datetime.date`` values in the
Asia/Bangkok calendar. Wall-clock inputs are normalized to Bangkok civil
dates (UTC+7, no daylight saving) before they reach the day walk, so nothing
below the normalization helpers is timezone-sensitive.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Union

from .exceptions import FormatError, ValidationError

SUPPORTED_TIMEZONE = "Asia/Bangkok"
BANGKOK_TZ = timezone(timedelta(hours=7), name=SUPPORTED_TIMEZONE)

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

# Semiannual crediting dates as (month, day)
MID_YEAR_PAYOUT = (6, 30)
YEAR_END_PAYOUT = (12, 31)


def parse_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    ``date`` instances pass through unchanged (datetimes are rejected so a
    wall-clock value cannot sneak past Bangkok normalization).

    Raises:
        FormatError: If the pattern does not match or the date does not exist.
    """
    if isinstance(value, datetime):
        raise FormatError(
            "Expected a calendar date, got a datetime", value=value.isoformat()
        )
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise FormatError("Date must be in YYYY-MM-DD format", value=str(value))

    year, month, day = (int(part) for part in value.split("-"))
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid date: {value}", value=value) from exc


def format_date(value: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def compare_dates(a: date, b: date) -> int:
    """Return -1, 0 or 1 as ``a`` is before, equal to or after ``b``."""
    if a == b:
        return 0
    return 1 if a > b else -1


def is_payout_date(value: date) -> bool:
    """True on 30 June and 31 December."""
    return (value.month, value.day) in (MID_YEAR_PAYOUT, YEAR_END_PAYOUT)


def is_semiannual_accrual_day(value: date) -> bool:
    """True if interest accrues on this day.

    A payout on day D credits interest accrued through D-1. 30 June therefore
    accrues into the second-half window, while 31 December closes the year
    and accrues nothing.
    """
    return (value.month, value.day) != YEAR_END_PAYOUT


def year_end(value: date, limit: Optional[date] = None) -> date:
    """Last day of ``value``'s calendar year, clipped to ``limit`` if earlier."""
    end = date(value.year, 12, 31)
    if limit is not None and limit < end:
        return limit
    return end


def days_inclusive(start: date, end: date) -> int:
    """Number of days from ``start`` to ``end`` counting both ends."""
    return (end - start).days + 1


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4, not by 100 unless also by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    if start > end:
        return
    current = start
    yield current
    # Stop before stepping past ``end``; 9999-12-31 has no successor
    while current < end:
        current = add_days(current, 1)
        yield current


# =============================================================================
# BANGKOK NORMALIZATION
# =============================================================================

def ensure_supported_timezone(name: str) -> str:
    """Reject any timezone other than Asia/Bangkok.

    Raises:
        ValidationError: For any other timezone designation.
    """
    if name != SUPPORTED_TIMEZONE:
        raise ValidationError(
            f"Only {SUPPORTED_TIMEZONE} timezone is supported",
            field="timezone",
            value=name,
            constraint=SUPPORTED_TIMEZONE,
        )
    return name


def to_bangkok_date(moment: datetime) -> date:
    """Civil date in Bangkok for a wall-clock moment.

    Naive datetimes are taken to already be Bangkok wall-clock time.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(BANGKOK_TZ).date()


def bangkok_today(now: Optional[datetime] = None) -> date:
    """Today's date in Bangkok."""
    return to_bangkok_date(now or datetime.now(timezone.utc))


def previous_business_day(value: date) -> date:
    """The closest weekday strictly before ``value``."""
    cursor = add_days(value, -1)
    while cursor.weekday() >= 5:  # Saturday=5, Sunday=6
        cursor = add_days(cursor, -1)
    return cursor
