"""
Calendar month arithmetic for history analysis.

Histories are entered at month granularity, so every interval is
normalised to [first instant of the start month, last instant of the
end month]. Month shifts clamp to the length of the target month
(Jan 31 + 1 month = Feb 28/29), which relativedelta does natively.
"""

import calendar
from datetime import datetime

from dateutil.relativedelta import relativedelta

COVERAGE_YEARS = 3
COVERAGE_MONTHS = COVERAGE_YEARS * 12

MONTH_YEAR_FORMAT = "%m/%Y"


def start_of_month(year: int, month: int) -> datetime:
    """First instant of the given month."""
    return datetime(year, month, 1)


def end_of_month(year: int, month: int) -> datetime:
    """Last instant of the given month."""
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, last_day, 23, 59, 59, 999999)


def add_months(value: datetime, months: int) -> datetime:
    return value + relativedelta(months=months)


def months_between(later: datetime, earlier: datetime) -> int:
    """
    Whole calendar months from `earlier` to `later`, truncated toward zero.

    Negative when `later` precedes `earlier`.

    Example:
        >>> months_between(datetime(2023, 5, 1), end_of_month(2023, 1))
        3
    """
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def three_years_before(now: datetime) -> datetime:
    """Start of the residency/employment coverage window."""
    return now - relativedelta(years=COVERAGE_YEARS)


def format_month_year(value: datetime) -> str:
    return value.strftime(MONTH_YEAR_FORMAT)
