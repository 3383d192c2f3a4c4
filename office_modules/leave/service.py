"""
Leave Module Service (``office_modules.leave.service``).

Responsibility
--------------
Orchestrates leave requests: validates drafts with the pure
``validate_leave_request`` engine, persists accepted requests, and drives
the approve / reject / cancel / reschedule transitions.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``LeaveService`` is the sole public
entry point for leave persistence.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (``commit`` on
  success, ``rollback`` on failure or exception).
* A draft that fails validation is never written.

Failure modes
-------------
* ``LeaveRequestNotFoundError`` for unknown ids.
* Transition errors from ``office_modules.leave.workflows`` propagate
  after rollback.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from office_engines.leave_validation import LeaveValidationResult, validate_leave_request
from office_kernel.domain.clock import Clock, SystemClock
from office_kernel.exceptions import LeaveRequestNotFoundError
from office_kernel.logging_config import LogContext, get_logger
from office_modules.leave import workflows
from office_modules.leave.config import LeavePolicy
from office_modules.leave.helpers import summarize_requests
from office_modules.leave.models import LeaveRequest, LeaveRequestDraft, LeaveSummary
from office_modules.leave.orm import LeaveRequestModel

logger = get_logger("modules.leave.service")


@dataclass(frozen=True)
class LeaveSubmissionResult:
    """Validation outcome plus the stored request when accepted."""

    validation: LeaveValidationResult
    request: LeaveRequest | None = None

    @property
    def is_accepted(self) -> bool:
        return self.validation.is_accepted


class LeaveService:
    """
    Orchestrates leave request submission and decisions.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * Every write records the acting user.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        policy: LeavePolicy | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._policy = policy or LeavePolicy()

    def submit(
        self,
        employee_id: UUID,
        draft: LeaveRequestDraft,
        today: date | None = None,
        actor_id: UUID | None = None,
    ) -> LeaveSubmissionResult:
        """
        Validate a draft and store it as a pending request.

        Args:
            employee_id: Employee the leave is for.
            draft: The submission.
            today: Reference date for the notice rule; defaults to
                ``clock.today()``.
            actor_id: Submitting user; defaults to ``employee_id``.

        Returns:
            LeaveSubmissionResult.  ``request`` is None when rejected.
        """
        as_of = today or self._clock.today()
        actor = actor_id or employee_id
        validation = validate_leave_request(draft, today=as_of, policy=self._policy)
        if not validation.is_accepted:
            return LeaveSubmissionResult(validation=validation)

        request = LeaveRequest.from_draft(uuid4(), employee_id, draft)
        with LogContext.bind(actor_id=str(actor), request_id=str(request.id)):
            try:
                self._session.add(LeaveRequestModel.from_dto(request, created_by_id=actor))
                self._session.commit()
                logger.info("leave_request_submitted", extra={
                    "employee_id": str(employee_id),
                    "start_date": draft.start_date.isoformat(),
                    "end_date": draft.end_date.isoformat(),
                    "is_urgent": draft.is_urgent,
                })
                return LeaveSubmissionResult(validation=validation, request=request)
            except Exception:
                self._session.rollback()
                raise

    def approve(self, request_id: UUID, reason: str, approver_id: UUID) -> LeaveRequest:
        return self._transition(
            request_id, approver_id,
            lambda r: workflows.approve(r, reason, approver_id),
        )

    def reject(self, request_id: UUID, reason: str, approver_id: UUID) -> LeaveRequest:
        return self._transition(
            request_id, approver_id,
            lambda r: workflows.reject(r, reason, approver_id),
        )

    def cancel(self, request_id: UUID, actor_id: UUID) -> LeaveRequest:
        return self._transition(request_id, actor_id, workflows.cancel)

    def reschedule(
        self,
        request_id: UUID,
        start_date: date,
        end_date: date,
        change_reason: str,
        actor_id: UUID,
    ) -> LeaveRequest:
        return self._transition(
            request_id, actor_id,
            lambda r: workflows.reschedule(r, start_date, end_date, change_reason),
        )

    def get(self, request_id: UUID) -> LeaveRequest:
        return self._load(request_id).to_dto()

    def list_requests(self, employee_id: UUID | None = None) -> list[LeaveRequest]:
        """All requests, oldest start first, optionally for one employee."""
        stmt = select(LeaveRequestModel).order_by(
            LeaveRequestModel.start_date, LeaveRequestModel.id,
        )
        if employee_id is not None:
            stmt = stmt.where(LeaveRequestModel.employee_id == employee_id)
        return [row.to_dto() for row in self._session.scalars(stmt)]

    def summary(self, employee_id: UUID | None = None) -> LeaveSummary:
        return summarize_requests(self.list_requests(employee_id))

    def _load(self, request_id: UUID) -> LeaveRequestModel:
        row = self._session.get(LeaveRequestModel, request_id)
        if row is None:
            raise LeaveRequestNotFoundError(str(request_id))
        return row

    def _transition(self, request_id, actor_id, apply) -> LeaveRequest:
        with LogContext.bind(actor_id=str(actor_id), request_id=str(request_id)):
            try:
                row = self._load(request_id)
                updated = apply(row.to_dto())
                row.apply_dto(updated, updated_by_id=actor_id)
                self._session.commit()
                return updated
            except Exception:
                self._session.rollback()
                raise
