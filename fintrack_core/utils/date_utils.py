"""Calendar helpers for installment schedules and accrual buckets"""

import calendar
from datetime import date
from typing import TypeVar

D = TypeVar("D", bound=date)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month, leap years included"""
    return calendar.monthrange(year, month)[1]


def add_months(value: D, months: int) -> D:
    """
    Shift a date (or datetime) by a number of calendar months.

    The day of month is clamped to the last day of the target month instead
    of overflowing into the next one, so Jan 31 + 1 month is Feb 28/29.
    Time of day and tzinfo on datetimes are kept.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, days_in_month(year, month))
    return value.replace(year=year, month=month, day=day)


def accrual_month_for(value: date) -> str:
    """Format a date as its YYYYMM accrual bucket"""
    return f"{value.year:04d}{value.month:02d}"
