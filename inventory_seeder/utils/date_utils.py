# inventory_seeder/utils/date_utils.py
from datetime import date, datetime
from typing import List, Union
import calendar

def add_months(start_date: Union[date, datetime], months: int) -> Union[date, datetime]:
    """Shift a date by a number of calendar months.

    The day is clamped to the last day of the target month, so
    March 31 minus one month is February 28 (or 29).

    Args:
        start_date: Date or datetime to shift
        months: Number of months (negative to go back)

    Returns:
        Shifted value of the same type as start_date
    """
    month_index = start_date.month - 1 + months
    year = start_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return start_date.replace(year=year, month=month, day=day)

def months_ago(months: int, today: date = None) -> date:
    """Get the date a given number of months before today."""
    return add_months(today or date.today(), -months)

def month_start(value: Union[date, datetime]) -> date:
    """Truncate a date or datetime to the first day of its month."""
    return date(value.year, value.month, 1)

def to_date(value: Union[date, datetime]) -> date:
    """Drop the time part of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value

def month_range(start: date, months: int) -> List[date]:
    """Get first-of-month dates for `months` consecutive months from start.

    Args:
        start: Any date in the first month
        months: Number of months to return

    Returns:
        List of month start dates, ascending
    """
    first = month_start(start)
    return [add_months(first, offset) for offset in range(months)]
