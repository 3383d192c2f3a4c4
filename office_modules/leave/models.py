"""
Leave Domain Models (``office_modules.leave.models``).

Responsibility
--------------
Frozen dataclass value objects for leave requests: the draft an
employee submits, the stored request with its lifecycle status, and the
summary figures shown on the leave dashboard.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
the leave validation engine, the workflow functions and ``LeaveService``.

Invariants enforced
-------------------
* All models are ``frozen=True``; transitions return new instances.
* ``status`` is a closed enum; ``parse_leave_status`` raises on unknown
  values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

from office_kernel.exceptions import UnknownStatusError


class LeaveStatus(str, Enum):
    """Leave request lifecycle states.  Only PENDING is non-terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


TERMINAL_LEAVE_STATUSES = frozenset(
    {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}
)


def parse_leave_status(value: Any) -> LeaveStatus:
    """Map a raw status string onto ``LeaveStatus`` (case-insensitive).

    Raises:
        UnknownStatusError: value matches no member.
    """
    if isinstance(value, LeaveStatus):
        return value
    if isinstance(value, str):
        try:
            return LeaveStatus(value.strip().lower())
        except ValueError:
            pass
    raise UnknownStatusError("leave_request", value)


@dataclass(frozen=True)
class LeaveRequestDraft:
    """What an employee submits, before any policy check."""
    start_date: date
    end_date: date
    reason: str
    is_urgent: bool = False
    urgency_reason: str = ""
    leave_type_id: UUID | None = None


@dataclass(frozen=True)
class LeaveRequest:
    """A stored leave request."""
    id: UUID
    employee_id: UUID
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    is_urgent: bool = False
    urgency_reason: str = ""
    leave_type_id: UUID | None = None
    approver_id: UUID | None = None
    approval_reason: str | None = None
    rejection_reason: str | None = None
    change_reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_LEAVE_STATUSES

    @classmethod
    def from_draft(
        cls, request_id: UUID, employee_id: UUID, draft: LeaveRequestDraft,
    ) -> LeaveRequest:
        return cls(
            id=request_id,
            employee_id=employee_id,
            start_date=draft.start_date,
            end_date=draft.end_date,
            reason=draft.reason.strip(),
            is_urgent=draft.is_urgent,
            urgency_reason=draft.urgency_reason.strip() if draft.is_urgent else "",
            leave_type_id=draft.leave_type_id,
        )


@dataclass(frozen=True)
class LeaveSummary:
    """Per-status counts plus total approved days."""
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0
    total_approved_days: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected + self.cancelled
