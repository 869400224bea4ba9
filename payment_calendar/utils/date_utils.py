"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

# Fixed-length steps in days; calendar-relative frequencies handled separately
_DAY_STEPS = {
    "daily": 1,
    "weekly": 7,
    "biweekly": 14,
}


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def date_at_offset(start: date, offset: int, frequency: str) -> date:
    """
    Return the Nth occurrence of a schedule starting at `start`.

    Monthly and yearly steps are always taken from `start` itself, so a
    schedule anchored on the 31st clamps to shorter month ends and then
    recovers: 2024-01-31 -> 2024-02-29 -> 2024-03-31 -> 2024-04-30.
    """
    if frequency in _DAY_STEPS:
        return start + timedelta(days=offset * _DAY_STEPS[frequency])
    if frequency == "monthly":
        return start + relativedelta(months=offset)
    if frequency == "yearly":
        return start + relativedelta(years=offset)
    if frequency == "once":
        return start
    raise ValueError(f"Unsupported frequency: {frequency}")


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def default_horizon(reference: date, years_ahead: int = 1) -> date:
    """Dec 31 of the reference year plus `years_ahead`"""
    return date(reference.year + years_ahead, 12, 31)
