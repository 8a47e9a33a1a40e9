"""Calendar-month period helpers used by the analytics queries"""

from datetime import date, datetime


def shift_month(day: date, offset: int) -> date:
    """First day of the month ``offset`` months away from ``day``'s month"""
    month_index = day.year * 12 + (day.month - 1) + offset
    return date(month_index // 12, month_index % 12 + 1, 1)


def month_bounds(today: date, offset: int = 0) -> tuple[datetime, datetime]:
    """
    Half-open [start, end) datetime range of a calendar month.

    offset=0 is the month containing ``today``, offset=-1 the month before it.
    """
    start = shift_month(today, offset)
    end = shift_month(today, offset + 1)
    return datetime.combine(start, datetime.min.time()), datetime.combine(end, datetime.min.time())


def trailing_months(today: date, months: int) -> list[date]:
    """First days of the last ``months`` calendar months, oldest first, ending with the current one"""
    months = max(months, 1)
    return [shift_month(today, offset) for offset in range(-(months - 1), 1)]


def month_label(month_start: date) -> str:
    return month_start.strftime("%b")
