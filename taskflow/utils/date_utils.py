from calendar import monthrange
from datetime import datetime, timezone
from typing import Optional


def start_of_day(value: datetime) -> datetime:
    """Midnight of the same calendar day (tzinfo is kept)"""
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def weekday_index(value: datetime) -> int:
    """Weekday as stored in recurrence patterns: 0 = Sunday .. 6 = Saturday"""
    return value.isoweekday() % 7


def add_months(value: datetime, months: int, day: Optional[int] = None) -> datetime:
    """Shift by whole months, clamping the day to the target month length.

    `day` requests a specific day of month instead of keeping the current
    one; it is clamped the same way (day 31 in April yields April 30).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(day or value.day, last_day))


def add_years(value: datetime, years: int) -> datetime:
    """Shift by whole years; Feb 29 becomes Feb 28 outside leap years"""
    year = value.year + years
    last_day = monthrange(year, value.month)[1]
    return value.replace(year=year, day=min(value.day, last_day))


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware values are converted to UTC and stripped; naive values are taken as UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
