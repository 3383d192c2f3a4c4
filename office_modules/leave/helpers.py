"""
Leave Helpers (``office_modules.leave.helpers``).

Responsibility
--------------
Pure calculation functions for the leave dashboard: request duration
and per-status summary figures.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no
clock, no database access.  Called by ``LeaveService`` or from tests.

Failure modes
-------------
* End date before start date -> ``ValueError`` raised.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from office_modules.leave.models import LeaveRequest, LeaveStatus, LeaveSummary


def leave_duration_days(start_date: date, end_date: date) -> int:
    """
    Number of calendar days covered by a leave, both ends included.

    Raises:
        ValueError: If ``end_date`` precedes ``start_date``.
    """
    if end_date < start_date:
        raise ValueError(f"end_date {end_date} precedes start_date {start_date}")
    return (end_date - start_date).days + 1


def summarize_requests(requests: Iterable[LeaveRequest]) -> LeaveSummary:
    """Count requests per status and total the approved days."""
    counts = {status: 0 for status in LeaveStatus}
    approved_days = 0
    for request in requests:
        counts[request.status] += 1
        if request.status == LeaveStatus.APPROVED:
            approved_days += leave_duration_days(request.start_date, request.end_date)
    return LeaveSummary(
        pending=counts[LeaveStatus.PENDING],
        approved=counts[LeaveStatus.APPROVED],
        rejected=counts[LeaveStatus.REJECTED],
        cancelled=counts[LeaveStatus.CANCELLED],
        total_approved_days=approved_days,
    )
