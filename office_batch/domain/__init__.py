"""Pure domain types and schedule evaluation for the daily job."""

from office_batch.domain.schedule import should_run
from office_batch.domain.types import DailyRunRecord, DailyRunStatus

__all__ = ["DailyRunRecord", "DailyRunStatus", "should_run"]
