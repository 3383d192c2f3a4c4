"""
office_batch -- Daily job scheduling for recurring generation.

Provides an in-process polling scheduler that runs the recurring
invoice / expense generation once per calendar day.  Idempotency is
enforced in storage by the generation key
``recurring:<template_id>:<period_due_date>``, so a crash-and-retry or
an overlapping run never double-generates.

Architecture:
    office_batch/ is a top-level package.  Nothing in kernel/, engines/
    or modules/ imports from office_batch.

Invariants:
    - Clock injection (no datetime.now() calls)
    - Schedule evaluation is pure (``should_run``)
    - Graceful shutdown
"""

from office_batch.domain.types import DailyRunRecord, DailyRunStatus
from office_batch.services.scheduler import DailyGenerationScheduler

__all__ = ["DailyGenerationScheduler", "DailyRunRecord", "DailyRunStatus"]
