"""
Module: office_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    engine sub-modules.  This is the canonical import surface for the
    services in office_modules and the batch scheduler.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import office_kernel and the office_modules value types
    (models / config).  MUST NOT import ORM models or services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      "today" is always an explicit parameter.
    - Decimal-only arithmetic for amounts.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``office_engines.tracer``), emitting OFFICE_ENGINE_TRACE records.

Usage:
    from office_engines.recurrence import run_scheduler
    from office_engines.notifications import compute_notifications
    from office_engines.leave_validation import validate_leave_request
"""

from office_kernel.logging_config import get_logger

logger = get_logger("engines")

from office_engines.datemath import add_months, advance, days_between
from office_engines.leave_validation import (
    EmptyOrOversizedReason,
    InsufficientNotice,
    InvalidDateRange,
    LeaveValidationResult,
    MissingUrgencyReason,
    validate_leave_request,
)
from office_engines.notifications import (
    Notification,
    NotificationEntityType,
    compute_notifications,
    mark_all_read,
    mark_read,
    unread_count,
)
from office_engines.recurrence import (
    SchedulerRunResult,
    TemplateRejection,
    run_scheduler,
)
from office_engines.tracer import traced_engine

__all__ = [
    "add_months",
    "advance",
    "days_between",
    "EmptyOrOversizedReason",
    "InsufficientNotice",
    "InvalidDateRange",
    "LeaveValidationResult",
    "MissingUrgencyReason",
    "validate_leave_request",
    "Notification",
    "NotificationEntityType",
    "compute_notifications",
    "mark_all_read",
    "mark_read",
    "unread_count",
    "SchedulerRunResult",
    "TemplateRejection",
    "run_scheduler",
    "traced_engine",
]
