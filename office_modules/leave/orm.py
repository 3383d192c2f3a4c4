"""
SQLAlchemy ORM persistence model for the Leave module.

Responsibility
--------------
Provide database-backed persistence for leave requests.  Validation
results are transient and not persisted; a rejected draft never reaches
this table.

Architecture position
---------------------
**Modules layer** -- ORM model consumed by ``LeaveService``.  Inherits
from ``TrackedBase`` (kernel db layer).

Invariants enforced
-------------------
* ``status`` stored as String(50) and parsed back through
  ``parse_leave_status`` (unknown values raise).
* ``end_date >= start_date`` is checked before a row is written.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from office_kernel.db.base import TrackedBase


class LeaveRequestModel(TrackedBase):
    """
    An employee leave request.

    Maps to the ``LeaveRequest`` DTO in ``office_modules.leave.models``.

    Guarantees:
        - ``status`` follows pending -> approved | rejected | cancelled.
        - ``approval_reason`` / ``rejection_reason`` are set only by the
          matching transition.
    """

    __tablename__ = "leave_requests"

    __table_args__ = (
        Index("idx_leave_request_employee", "employee_id"),
        Index("idx_leave_request_status", "status"),
        Index("idx_leave_request_start", "start_date"),
    )

    employee_id: Mapped[UUID]
    leave_type_id: Mapped[UUID | None]
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    is_urgent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    urgency_reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    approver_id: Mapped[UUID | None]
    approval_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    change_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self):
        from office_modules.leave.models import LeaveRequest, parse_leave_status

        return LeaveRequest(
            id=self.id,
            employee_id=self.employee_id,
            start_date=self.start_date,
            end_date=self.end_date,
            reason=self.reason,
            status=parse_leave_status(self.status),
            is_urgent=self.is_urgent,
            urgency_reason=self.urgency_reason,
            leave_type_id=self.leave_type_id,
            approver_id=self.approver_id,
            approval_reason=self.approval_reason,
            rejection_reason=self.rejection_reason,
            change_reason=self.change_reason,
        )

    def apply_dto(self, dto, updated_by_id: UUID) -> None:
        """Copy the lifecycle fields of ``dto`` onto this row."""
        self.start_date = dto.start_date
        self.end_date = dto.end_date
        self.status = dto.status.value
        self.approver_id = dto.approver_id
        self.approval_reason = dto.approval_reason
        self.rejection_reason = dto.rejection_reason
        self.change_reason = dto.change_reason
        self.updated_by_id = updated_by_id

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "LeaveRequestModel":
        return cls(
            id=dto.id,
            employee_id=dto.employee_id,
            leave_type_id=dto.leave_type_id,
            start_date=dto.start_date,
            end_date=dto.end_date,
            reason=dto.reason,
            status=dto.status.value,
            is_urgent=dto.is_urgent,
            urgency_reason=dto.urgency_reason,
            approver_id=dto.approver_id,
            approval_reason=dto.approval_reason,
            rejection_reason=dto.rejection_reason,
            change_reason=dto.change_reason,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<LeaveRequestModel {self.employee_id} {self.start_date}..{self.end_date} [{self.status}]>"
