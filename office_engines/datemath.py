"""
Module: office_engines.datemath
Responsibility:
    Frequency-aware date advancement and day-count arithmetic shared by
    the recurrence scheduler, the notification engine and the leave
    validator.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Purity: no clock access.
    - Month-end rollover clamps to the last valid day of the target
      month: Jan 31 + 1 month is Feb 29 (leap year) or Feb 28, and
      Feb 29 + 1 year is Feb 28.  A date is never pushed into the
      following month.

Failure modes:
    - UnknownFrequencyError for a frequency outside the closed set.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime

from office_kernel.exceptions import UnknownFrequencyError
from office_modules.billing.models import RecurrenceFrequency

_MONTHS_PER_STEP: dict[RecurrenceFrequency, int] = {
    RecurrenceFrequency.MONTHLY: 1,
    RecurrenceFrequency.QUARTERLY: 3,
    RecurrenceFrequency.ANNUALLY: 12,
}

_SECONDS_PER_DAY = 86400


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def advance(value: date, frequency: RecurrenceFrequency) -> date:
    """Return the next occurrence one ``frequency`` step after ``value``.

    Raises:
        UnknownFrequencyError: frequency is not a ``RecurrenceFrequency``.
    """
    try:
        months = _MONTHS_PER_STEP[frequency]
    except (KeyError, TypeError):
        raise UnknownFrequencyError(frequency) from None
    return add_months(value, months)


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Calendar-day difference ``end - start``, ceiling-rounded.

    Negative when ``end`` is before ``start`` (e.g. an overdue due date).
    Plain dates give an exact integer; datetimes round partial days up.
    """
    if isinstance(start, datetime) or isinstance(end, datetime):
        start_dt = start if isinstance(start, datetime) else datetime.combine(start, datetime.min.time())
        end_dt = end if isinstance(end, datetime) else datetime.combine(end, datetime.min.time())
        return math.ceil((end_dt - start_dt).total_seconds() / _SECONDS_PER_DAY)
    return (end - start).days
