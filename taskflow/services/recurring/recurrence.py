"""
Next-occurrence calculation for recurrence patterns.
"""
from datetime import datetime, timedelta
from typing import Optional

from taskflow.core.config import settings
from taskflow.models.shared.enums import RecurrenceType
from taskflow.schemas.recurring.recurring_template_schema import RecurrencePattern
from taskflow.utils.date_utils import add_months, add_years, to_naive_utc, weekday_index


def calculate_next_occurrence(
    pattern: RecurrencePattern,
    from_date: datetime,
    occurrence_count: int = 0,
) -> Optional[datetime]:
    """Date of the occurrence following `from_date`, or None once the pattern is exhausted.

    Exhausted means `occurrence_count` reached `max_occurrences`, the
    end date is already behind `from_date`, or the next date would fall
    after the end date. Any returned date is strictly later than
    `from_date`.
    """
    from_date = to_naive_utc(from_date)
    end_date = to_naive_utc(pattern.end_date)

    if pattern.max_occurrences and occurrence_count >= pattern.max_occurrences:
        return None

    if end_date and end_date < from_date:
        return None

    if pattern.type == RecurrenceType.DAILY:
        next_date = from_date + timedelta(days=pattern.interval)

    elif pattern.type == RecurrenceType.WEEKLY:
        if pattern.days_of_week:
            next_date = _next_listed_weekday(pattern, from_date)
            if next_date is None:
                return None
        else:
            next_date = from_date + timedelta(days=7 * pattern.interval)

    elif pattern.type == RecurrenceType.MONTHLY:
        next_date = add_months(from_date, pattern.interval, pattern.day_of_month)

    elif pattern.type == RecurrenceType.YEARLY:
        next_date = add_years(from_date, pattern.interval)

    else:
        return None

    if end_date and next_date > end_date:
        return None

    return next_date


def _next_listed_weekday(pattern: RecurrencePattern, from_date: datetime) -> Optional[datetime]:
    # Bounded scan; patterns whose weekdays never match give up instead of looping
    for days_ahead in range(1, settings.WEEKLY_SCAN_DAYS + 1):
        candidate = from_date + timedelta(days=days_ahead)
        if weekday_index(candidate) in pattern.days_of_week:
            return candidate
    return None
