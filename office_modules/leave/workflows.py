"""Leave Request Workflows.

State machine for leave requests plus the pure transition functions
that apply it.  Every function returns a new ``LeaveRequest``.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from uuid import UUID

from office_kernel.domain.workflow import Guard, Transition, Workflow
from office_kernel.exceptions import (
    InvalidLeaveDatesError,
    InvalidLeaveTransitionError,
    MissingDecisionReasonError,
)
from office_kernel.logging_config import get_logger
from office_modules.leave.models import LeaveRequest, LeaveStatus

logger = get_logger("modules.leave.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

DECISION_REASON_GIVEN = Guard(
    name="decision_reason_given",
    description="Approver supplied a non-empty reason for the decision",
)

CHANGE_REASON_GIVEN = Guard(
    name="change_reason_given",
    description="A non-empty reason accompanies the date change",
)

logger.info(
    "leave_workflow_guards_defined",
    extra={"guards": [DECISION_REASON_GIVEN.name, CHANGE_REASON_GIVEN.name]},
)


# -----------------------------------------------------------------------------
# Leave Request Workflow
# -----------------------------------------------------------------------------

LEAVE_REQUEST_WORKFLOW = Workflow(
    name="leave_request",
    description="Leave request lifecycle",
    initial_state=LeaveStatus.PENDING.value,
    states=tuple(s.value for s in LeaveStatus),
    transitions=(
        Transition("pending", "approved", action="approve", guard=DECISION_REASON_GIVEN),
        Transition("pending", "rejected", action="reject", guard=DECISION_REASON_GIVEN),
        Transition("pending", "cancelled", action="cancel"),
        Transition("pending", "pending", action="reschedule", guard=CHANGE_REASON_GIVEN),
    ),
    terminal_states=("approved", "rejected", "cancelled"),
)

logger.info(
    "leave_request_workflow_registered",
    extra={
        "workflow_name": LEAVE_REQUEST_WORKFLOW.name,
        "state_count": len(LEAVE_REQUEST_WORKFLOW.states),
        "transition_count": len(LEAVE_REQUEST_WORKFLOW.transitions),
        "initial_state": LEAVE_REQUEST_WORKFLOW.initial_state,
    },
)


def _require_transition(request: LeaveRequest, action: str) -> LeaveStatus:
    transition = LEAVE_REQUEST_WORKFLOW.find_transition(request.status.value, action)
    if transition is None:
        raise InvalidLeaveTransitionError(str(request.id), request.status.value, action)
    return LeaveStatus(transition.to_state)


def _require_reason(request: LeaveRequest, reason: str | None, action: str) -> str:
    if reason is None or not reason.strip():
        raise MissingDecisionReasonError(str(request.id), action)
    return reason.strip()


def approve(request: LeaveRequest, reason: str, approver_id: UUID) -> LeaveRequest:
    """Approve a pending request.

    Raises:
        InvalidLeaveTransitionError: request is not pending.
        MissingDecisionReasonError: reason is empty.
    """
    to_status = _require_transition(request, "approve")
    reason = _require_reason(request, reason, "approve")
    logger.info(
        "leave_request_approved",
        extra={"request_id": str(request.id), "approver_id": str(approver_id)},
    )
    return replace(
        request, status=to_status, approval_reason=reason, approver_id=approver_id,
    )


def reject(request: LeaveRequest, reason: str, approver_id: UUID) -> LeaveRequest:
    """Reject a pending request.

    Raises:
        InvalidLeaveTransitionError: request is not pending.
        MissingDecisionReasonError: reason is empty.
    """
    to_status = _require_transition(request, "reject")
    reason = _require_reason(request, reason, "reject")
    logger.info(
        "leave_request_rejected",
        extra={"request_id": str(request.id), "approver_id": str(approver_id)},
    )
    return replace(
        request, status=to_status, rejection_reason=reason, approver_id=approver_id,
    )


def cancel(request: LeaveRequest) -> LeaveRequest:
    to_status = _require_transition(request, "cancel")
    logger.info("leave_request_cancelled", extra={"request_id": str(request.id)})
    return replace(request, status=to_status)


def reschedule(
    request: LeaveRequest,
    start_date: date,
    end_date: date,
    change_reason: str,
) -> LeaveRequest:
    """Move a pending request to new dates, recording why.

    The request stays pending; notice is not re-checked here.

    Raises:
        InvalidLeaveTransitionError: request is not pending.
        MissingDecisionReasonError: change_reason is empty.
        InvalidLeaveDatesError: end_date precedes start_date.
    """
    to_status = _require_transition(request, "reschedule")
    change_reason = _require_reason(request, change_reason, "reschedule")
    if end_date < start_date:
        raise InvalidLeaveDatesError(
            str(request.id), start_date.isoformat(), end_date.isoformat(),
        )
    logger.info(
        "leave_request_rescheduled",
        extra={
            "request_id": str(request.id),
            "old_start": request.start_date.isoformat(),
            "new_start": start_date.isoformat(),
            "new_end": end_date.isoformat(),
        },
    )
    return replace(
        request,
        status=to_status,
        start_date=start_date,
        end_date=end_date,
        change_reason=change_reason,
    )
