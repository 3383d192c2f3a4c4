"""
Leave Module (``office_modules.leave``).

Responsibility
--------------
Employee leave requests: drafts, the HR notice policy, the
pending -> approved / rejected / cancelled lifecycle, and dashboard
summaries.

Architecture position
---------------------
**Modules layer** -- value types, workflow, config schema, ORM model and
the ``LeaveService`` facade.  Draft validation lives in
``office_engines.leave_validation``.
"""

from office_modules.leave.config import LeavePolicy
from office_modules.leave.models import (
    LeaveRequest,
    LeaveRequestDraft,
    LeaveStatus,
    LeaveSummary,
)
from office_modules.leave.workflows import LEAVE_REQUEST_WORKFLOW

__all__ = [
    "LeavePolicy",
    "LeaveRequest",
    "LeaveRequestDraft",
    "LeaveStatus",
    "LeaveSummary",
    "LEAVE_REQUEST_WORKFLOW",
]
