"""Date manipulation utilities"""

import calendar
from datetime import date


def add_months(from_date: date, months: int) -> date:
    """Same day N months later, clamped to the last day of shorter months"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
