"""
Leave Request Validator (``office_engines.leave_validation``).

Responsibility
--------------
Check a leave request draft against the HR policy before it may be
accepted: reason present and bounded, coherent date range, urgency
reason when the request is flagged urgent, and minimum notice for
non-urgent requests.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  "today" is passed in by the caller.

Invariants enforced
-------------------
* Errors accumulate in a fixed order (reason, range, urgency/notice) so
  the caller can show all of them at once.
* An urgent request with a valid urgency reason skips the notice rule.

Failure modes
-------------
* Returns validation results (not exceptions) for business rule
  violations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from office_kernel.logging_config import get_logger
from office_engines.datemath import days_between
from office_engines.tracer import traced_engine
from office_modules.leave.config import LeavePolicy
from office_modules.leave.models import LeaveRequestDraft

logger = get_logger("engines.leave_validation")


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmptyOrOversizedReason:
    max_length: int = 500
    code = "EMPTY_OR_OVERSIZED_REASON"

    @property
    def message(self) -> str:
        return f"A reason is required (at most {self.max_length} characters)"


@dataclass(frozen=True)
class InvalidDateRange:
    start_date: date
    end_date: date
    code = "INVALID_DATE_RANGE"

    @property
    def message(self) -> str:
        return f"End date {self.end_date} must not be before start date {self.start_date}"


@dataclass(frozen=True)
class MissingUrgencyReason:
    max_length: int = 500
    code = "MISSING_URGENCY_REASON"

    @property
    def message(self) -> str:
        return (
            "An urgency reason is required when the leave is marked urgent "
            f"(at most {self.max_length} characters)"
        )


@dataclass(frozen=True)
class InsufficientNotice:
    notice_days: int
    required_days: int = 15
    code = "INSUFFICIENT_NOTICE"

    @property
    def message(self) -> str:
        return (
            f"Non-urgent leave needs at least {self.required_days} days notice "
            f"({self.notice_days} days -- need {self.required_days})"
        )


LeaveValidationError = (
    EmptyOrOversizedReason | InvalidDateRange | MissingUrgencyReason | InsufficientNotice
)


@dataclass(frozen=True)
class LeaveValidationResult:
    """Outcome of validating one draft."""
    is_accepted: bool
    errors: tuple[LeaveValidationError, ...] = ()

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(e.message for e in self.errors)


def _text_ok(value: str | None, max_length: int) -> bool:
    # Blank is judged on the stripped text, length on the raw text.
    if value is None or not value.strip():
        return False
    return len(value) <= max_length


@traced_engine("leave_validation", "1.0", fingerprint_fields=("draft", "today"))
def validate_leave_request(
    draft: LeaveRequestDraft,
    today: date,
    policy: LeavePolicy = LeavePolicy(),
) -> LeaveValidationResult:
    """Validate a leave request draft.

    Args:
        draft: The employee's submission.
        today: The reference date, supplied by the caller.
        policy: Notice and reason-length rules.

    Returns:
        LeaveValidationResult; ``is_accepted`` is True iff no errors.
    """
    errors: list[LeaveValidationError] = []

    if not _text_ok(draft.reason, policy.max_reason_length):
        errors.append(EmptyOrOversizedReason(policy.max_reason_length))

    if draft.end_date < draft.start_date:
        errors.append(InvalidDateRange(draft.start_date, draft.end_date))

    if draft.is_urgent:
        if not _text_ok(draft.urgency_reason, policy.max_reason_length):
            errors.append(MissingUrgencyReason(policy.max_reason_length))
    else:
        notice_days = days_between(today, draft.start_date)
        if notice_days < policy.min_notice_days:
            errors.append(InsufficientNotice(notice_days, policy.min_notice_days))

    if errors:
        logger.info(
            "leave_request_rejected",
            extra={
                "error_codes": [e.code for e in errors],
                "is_urgent": draft.is_urgent,
            },
        )

    return LeaveValidationResult(is_accepted=not errors, errors=tuple(errors))
