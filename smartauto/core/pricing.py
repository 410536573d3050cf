"""Rental pricing."""
import math
from datetime import date, datetime

SECONDS_PER_DAY = 60 * 60 * 24


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def rental_days(start: date, end: date) -> int:
    """
    Whole days billed between start and end: the span in days, rounded up.
    A partial day counts as a full day (1.5 days -> 2). Same-day spans give 0 and
    reversed spans give a negative count; callers decide whether to accept those.
    """
    span = _as_datetime(end) - _as_datetime(start)
    return math.ceil(span.total_seconds() / SECONDS_PER_DAY)


def calculate_total_price(start: date, end: date, daily_rate: float) -> float:
    """Total price of a rental: billed days times the vehicle's daily rate."""
    return rental_days(start, end) * daily_rate
