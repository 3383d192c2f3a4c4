"""
office_batch.domain.schedule -- Pure daily schedule evaluation.

ZERO I/O.  The clock is read by the caller and passed in.
"""

from __future__ import annotations

from datetime import date


def should_run(last_run_date: date | None, today: date) -> bool:
    """True when the daily job has not completed for ``today`` yet.

    A ``today`` earlier than ``last_run_date`` (clock moved backwards)
    does not fire.
    """
    if last_run_date is None:
        return True
    return today > last_run_date
