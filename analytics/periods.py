"""
Monthly period arithmetic for imports.

A period is one calendar month, identified by its first day.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional


def month_start(day: date) -> date:
    return day.replace(day=1)


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month (negative = back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_starts(count: int, today: Optional[date] = None) -> List[date]:
    """
    The last ``count`` month starts ending with the current month, oldest first.

    >>> month_starts(3, date(2024, 2, 17))
    [datetime.date(2023, 12, 1), datetime.date(2024, 1, 1), datetime.date(2024, 2, 1)]
    """
    if count < 1:
        return []
    today = today or date.today()
    return [shift_months(today, -offset) for offset in range(count - 1, -1, -1)]
