"""Calendar helpers for batching date-range queries by month."""

from __future__ import annotations

import calendar
from datetime import date


def parse_day(value: str | date) -> date:
    """Accept ``YYYY-MM`` (first of month), ``YYYY-MM-DD`` or a ``date``."""

    if isinstance(value, date):
        return value
    s = value.strip()
    if len(s) == 7:
        s = f"{s}-01"
    return date.fromisoformat(s)


def month_ranges(start: str | date, end: str | date) -> list[tuple[date, date]]:
    """Split ``[start, end]`` into ``(first_day, last_day)`` pairs per calendar month.

    Every month touched by the range is returned whole, so ``2025-01-15`` to
    ``2025-02-03`` yields January and February in full.
    """

    first = parse_day(start).replace(day=1)
    last = parse_day(end)

    ranges: list[tuple[date, date]] = []
    current = first
    while current <= last:
        days = calendar.monthrange(current.year, current.month)[1]
        ranges.append((current, current.replace(day=days)))
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return ranges
