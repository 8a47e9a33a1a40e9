"""Shared formatting and arithmetic helpers for catalog and analytics responses"""

import math
from typing import Optional


def dollars_from_cents(cents: int) -> float:
    """Convert an integer amount of cents to a dollar amount with two decimals"""
    return round(cents / 100, 2)


def format_duration(minutes: Optional[int]) -> str:
    """
    Render a duration in minutes as a human readable string.

    Examples:
        45  -> "45 min"
        60  -> "1 hr"
        120 -> "2 hrs"
        90  -> "1.5 hrs"
    """
    if minutes is None:
        return ""
    if minutes < 60:
        return f"{minutes} min"

    hours = minutes / 60
    if hours.is_integer():
        hours = int(hours)
        return f"{hours} hr{'' if hours == 1 else 's'}"
    return f"{hours:.1f} hrs"


def parse_service_area(area: Optional[str]) -> tuple[str, str]:
    """Split a vendor service area like "Brooklyn, NY" into (city, region)"""
    if not area:
        return "Unknown", ""

    parts = [p.strip() for p in area.split(",") if p.strip()]
    if len(parts) >= 2:
        return parts[0], parts[1]
    return area.strip() or "Unknown", ""


def calculate_trend(current: float, previous: float) -> float:
    """
    Percentage change from the previous period to the current one.

    A previous total of zero yields 0 so the result always stays numeric,
    including for a change from 0 to a positive value.
    """
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def whole_percentages(counts: list[int]) -> list[int]:
    """
    Convert counts to whole-number percentages that add up to exactly 100.

    Each share is rounded down, then the missing points go to the shares with
    the largest fractional parts (earlier entries win ties). All zeros when the
    counts sum to zero.
    """
    total = sum(counts)
    if total <= 0:
        return [0 for _ in counts]

    exact = [count * 100 / total for count in counts]
    result = [math.floor(value) for value in exact]
    missing = 100 - sum(result)

    by_remainder = sorted(range(len(counts)), key=lambda i: (-(exact[i] - result[i]), i))
    for index in by_remainder[:missing]:
        result[index] += 1
    return result
