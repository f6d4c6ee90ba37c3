"""Calendar helpers shared by the forecasting modules."""

from __future__ import annotations

import calendar
from datetime import date

__all__ = ["add_months", "months_between"]


def add_months(anchor: date, months: int) -> date:
    """Shift ``anchor`` by whole months, clamping the day to the month end."""

    month = anchor.month - 1 + months
    year = anchor.year + month // 12
    month = month % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(later: date, earlier: date) -> int:
    """Return the number of complete months from ``earlier`` to ``later``."""

    if later < earlier:
        return -months_between(earlier, later)
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if add_months(earlier, months) > later:
        months -= 1
    return months
