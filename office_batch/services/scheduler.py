"""
DailyGenerationScheduler -- In-process polling scheduler for the daily job.

Contract:
    Polls on a configurable interval, evaluates ``should_run()`` (pure)
    against the injected clock, and runs
    ``BillingService.generate_recurring`` at most once per calendar day.

Architecture: office_batch/services.  Uses office_batch.domain for pure
    evaluation and a service factory for execution.

Invariants enforced:
    - All dates and timestamps from the injected Clock.
    - A failed run does not mark the day as done; the next tick retries,
      and the storage-level generation key keeps the retry idempotent.
    - Graceful shutdown (respects stop signal between ticks).
"""

from __future__ import annotations

import threading
from datetime import date
from typing import Callable, Protocol
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from office_kernel.domain.clock import Clock, SystemClock
from office_kernel.logging_config import LogContext, get_logger

from office_batch.domain.schedule import should_run
from office_batch.domain.types import DailyRunRecord, DailyRunStatus

logger = get_logger("batch.scheduler")


class GenerationService(Protocol):
    """What the scheduler needs from ``BillingService``."""

    def generate_recurring(self, today: date, actor_id: UUID): ...


class DailyGenerationScheduler:
    """In-process polling scheduler for recurring generation.

    Contract:
        - ``tick()`` runs generation if today's run has not completed.
        - ``start()`` / ``stop()`` for background thread operation.

    Non-goals:
        - NOT a distributed scheduler (no leader election); overlapping
          runs from several processes are made safe by the generation key,
          not by this class.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        service_factory: Callable[[Session], GenerationService],
        clock: Clock | None = None,
        actor_id: UUID | None = None,
        tick_interval_seconds: float = 60,
    ):
        self._session_factory = session_factory
        self._service_factory = service_factory
        self._clock = clock or SystemClock()
        self._actor_id = actor_id or uuid4()
        self._tick_interval = tick_interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._last_run_date: date | None = None
        self._last_record: DailyRunRecord | None = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def last_run_date(self) -> date | None:
        return self._last_run_date

    @property
    def last_record(self) -> DailyRunRecord | None:
        return self._last_record

    def tick(self) -> DailyRunRecord | None:
        """Run today's generation if due (public for testing).

        Returns:
            The run record, or None when today's run already completed.
        """
        with self._lock:
            today = self._clock.today()
            if not should_run(self._last_run_date, today):
                return None

            started_at = self._clock.now()
            session = self._session_factory()
            with LogContext.bind(actor_id=str(self._actor_id)):
                try:
                    service = self._service_factory(session)
                    result = service.generate_recurring(today=today, actor_id=self._actor_id)
                    record = DailyRunRecord(
                        run_date=today,
                        status=DailyRunStatus.COMPLETED,
                        started_at=started_at,
                        completed_at=self._clock.now(),
                        generated=result.generated_count,
                        skipped=result.skipped_count,
                        rejected=len(result.rejections),
                    )
                    self._last_run_date = today
                    logger.info("daily_generation_completed", extra={
                        "run_date": today.isoformat(),
                        "generated": record.generated,
                        "skipped": record.skipped,
                        "rejected": record.rejected,
                    })
                except Exception as exc:
                    session.rollback()
                    record = DailyRunRecord(
                        run_date=today,
                        status=DailyRunStatus.FAILED,
                        started_at=started_at,
                        completed_at=self._clock.now(),
                        error_message=str(exc),
                    )
                    logger.exception("daily_generation_failed", extra={
                        "run_date": today.isoformat(),
                    })
                finally:
                    session.close()

            self._last_record = record
            return record

    def start(self) -> None:
        """Start the scheduler in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="daily-generation-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("scheduler_started", extra={"tick_interval": self._tick_interval})

    def stop(self, timeout: float = 30.0) -> None:
        """Signal stop and wait for the scheduler to finish.

        Args:
            timeout: Max seconds to wait for the thread to finish.
        """
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("scheduler_stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _run_loop(self) -> None:
        """Background polling loop. Exits when stop_event is set."""
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("scheduler_tick_exception")
            # Wait for interval or until stopped
            self._stop_event.wait(timeout=self._tick_interval)
