"""
office_batch.domain.types -- Pure frozen dataclasses for the daily job.

ZERO I/O.  Frozen dataclasses with enum status fields, like the rest of
the domain layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class DailyRunStatus(str, Enum):
    """Outcome of one daily generation run."""

    COMPLETED = "completed"  # Generation ran and committed
    FAILED = "failed"  # Generation raised; retried on the next tick


@dataclass(frozen=True)
class DailyRunRecord:
    """Immutable summary of one daily generation run."""

    run_date: date
    status: DailyRunStatus
    started_at: datetime
    completed_at: datetime
    generated: int = 0
    skipped: int = 0
    rejected: int = 0
    error_message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == DailyRunStatus.COMPLETED
