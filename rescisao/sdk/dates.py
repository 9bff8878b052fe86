"""Date arithmetic for proration defaults.

Derives the calculated values a settlement starts from: vacation avos,
13th-salary avos and notice-period days.
"""

from datetime import date
from typing import Any, Dict

MAX_NOTICE_DAYS = 90
BASE_NOTICE_DAYS = 30
NOTICE_DAYS_PER_YEAR = 3


def months_between(start: date, end: date) -> int:
    """Count elapsed calendar months, rounding up from day 15 of the month.

    Example: 2023-01-10 -> 2024-07-20 is 18 (day difference 10 < 15).
    """
    total = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day - start.day >= 15:
        total += 1
    return max(0, total)


def days_between(start: date, end: date) -> int:
    """Count days between two dates, both ends inclusive."""
    return (end - start).days + 1


def default_notice_days(days_of_service: int) -> int:
    """Notice days: 30 plus 3 per full year beyond the first, capped at 90."""
    completed_years = days_of_service // 365
    return min(BASE_NOTICE_DAYS + max(0, completed_years - 1) * NOTICE_DAYS_PER_YEAR, MAX_NOTICE_DAYS)


def default_vacation_fraction(hire_date: date, termination_date: date) -> int:
    """Vacation avos: elapsed months modulo a full acquisition period."""
    return months_between(hire_date, termination_date) % 12


def default_thirteenth_fraction(termination_date: date) -> int:
    """13th-salary avos: termination month (1-12) plus one, at most 12/12.

    Counts by calendar month of termination, not by months of employment.
    """
    return min(termination_date.month + 1, 12)


def derive_defaults(hire_date: date, termination_date: date) -> Dict[str, Any]:
    """Compute the calculated values a front end pre-fills for adjustment.

    Returns:
        Dict with:
            - months_of_service: elapsed months (mid-month rounding)
            - days_of_service: inclusive day count
            - vacation_fraction: calculated vacation avos (/12)
            - thirteenth_fraction: calculated 13th avos (/12)
            - notice_days: calculated notice-period days
    """
    days = days_between(hire_date, termination_date)
    return {
        "months_of_service": months_between(hire_date, termination_date),
        "days_of_service": days,
        "vacation_fraction": default_vacation_fraction(hire_date, termination_date),
        "thirteenth_fraction": default_thirteenth_fraction(termination_date),
        "notice_days": default_notice_days(days),
    }
