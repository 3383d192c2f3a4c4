"""
Tests for the leave request workflow.

Covers:
- Workflow definition (states, transitions, terminal states)
- approve / reject / cancel / reschedule transitions
- Reason requirements and terminal-state protection
"""

from datetime import date
from uuid import uuid4

import pytest

from office_kernel.exceptions import (
    InvalidLeaveDatesError,
    InvalidLeaveTransitionError,
    MissingDecisionReasonError,
)
from office_modules.leave.models import (
    LeaveRequest,
    LeaveRequestDraft,
    LeaveStatus,
    parse_leave_status,
)
from office_modules.leave.workflows import (
    LEAVE_REQUEST_WORKFLOW,
    approve,
    cancel,
    reject,
    reschedule,
)
from office_kernel.exceptions import UnknownStatusError

APPROVER = uuid4()


def _pending() -> LeaveRequest:
    draft = LeaveRequestDraft(
        start_date=date(2024, 4, 1),
        end_date=date(2024, 4, 5),
        reason="  Vacation  ",
    )
    return LeaveRequest.from_draft(uuid4(), uuid4(), draft)


class TestWorkflowDefinition:
    """Static shape of the state machine."""

    def test_states(self):
        assert set(LEAVE_REQUEST_WORKFLOW.states) == {s.value for s in LeaveStatus}
        assert LEAVE_REQUEST_WORKFLOW.initial_state == "pending"

    def test_terminal_states_have_no_exits(self):
        for state in ("approved", "rejected", "cancelled"):
            assert LEAVE_REQUEST_WORKFLOW.is_terminal(state)
            for action in ("approve", "reject", "cancel", "reschedule"):
                assert LEAVE_REQUEST_WORKFLOW.find_transition(state, action) is None

    def test_pending_actions(self):
        assert LEAVE_REQUEST_WORKFLOW.find_transition("pending", "approve").to_state == "approved"
        assert LEAVE_REQUEST_WORKFLOW.find_transition("pending", "reschedule").to_state == "pending"


class TestFromDraft:
    """Draft -> stored request."""

    def test_reason_trimmed_and_pending(self):
        request = _pending()
        assert request.reason == "Vacation"
        assert request.status == LeaveStatus.PENDING
        assert not request.is_terminal

    def test_urgency_reason_dropped_when_not_urgent(self):
        draft = LeaveRequestDraft(
            start_date=date(2024, 4, 1), end_date=date(2024, 4, 1),
            reason="x", is_urgent=False, urgency_reason="ignored",
        )
        assert LeaveRequest.from_draft(uuid4(), uuid4(), draft).urgency_reason == ""

    def test_parse_leave_status(self):
        assert parse_leave_status("APPROVED") == LeaveStatus.APPROVED
        with pytest.raises(UnknownStatusError):
            parse_leave_status("on_hold")


class TestDecisions:
    """approve / reject / cancel."""

    def test_approve(self):
        approved = approve(_pending(), "  Enjoy  ", APPROVER)

        assert approved.status == LeaveStatus.APPROVED
        assert approved.approval_reason == "Enjoy"
        assert approved.approver_id == APPROVER
        assert approved.is_terminal

    def test_reject(self):
        rejected = reject(_pending(), "Team at capacity", APPROVER)

        assert rejected.status == LeaveStatus.REJECTED
        assert rejected.rejection_reason == "Team at capacity"
        assert rejected.approval_reason is None

    def test_cancel(self):
        assert cancel(_pending()).status == LeaveStatus.CANCELLED

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reason_required(self, reason):
        with pytest.raises(MissingDecisionReasonError):
            approve(_pending(), reason, APPROVER)
        with pytest.raises(MissingDecisionReasonError):
            reject(_pending(), reason, APPROVER)

    def test_original_untouched(self):
        request = _pending()
        approve(request, "ok", APPROVER)
        assert request.status == LeaveStatus.PENDING

    @pytest.mark.parametrize("terminal", [
        lambda r: approve(r, "ok", APPROVER),
        lambda r: reject(r, "no", APPROVER),
        cancel,
    ])
    def test_terminal_states_admit_no_transition(self, terminal):
        done = terminal(_pending())

        with pytest.raises(InvalidLeaveTransitionError) as exc_info:
            approve(done, "again", APPROVER)
        assert exc_info.value.current_status == done.status.value

        with pytest.raises(InvalidLeaveTransitionError):
            cancel(done)
        with pytest.raises(InvalidLeaveTransitionError):
            reschedule(done, date(2024, 5, 1), date(2024, 5, 2), "moved")


class TestReschedule:
    """Date modification on a pending request."""

    def test_reschedule(self):
        moved = reschedule(_pending(), date(2024, 5, 6), date(2024, 5, 10), "Project slipped")

        assert moved.status == LeaveStatus.PENDING
        assert moved.start_date == date(2024, 5, 6)
        assert moved.end_date == date(2024, 5, 10)
        assert moved.change_reason == "Project slipped"

    def test_change_reason_required(self):
        with pytest.raises(MissingDecisionReasonError):
            reschedule(_pending(), date(2024, 5, 6), date(2024, 5, 10), " ")

    def test_invalid_range(self):
        with pytest.raises(InvalidLeaveDatesError):
            reschedule(_pending(), date(2024, 5, 10), date(2024, 5, 6), "oops")
