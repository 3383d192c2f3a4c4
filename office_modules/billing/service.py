"""
Billing Module Service (``office_modules.billing.service``).

Responsibility
--------------
Orchestrates recurring-obligation generation and the due-date reminder
feed: loads snapshots from storage, hands them to the pure engines
(``run_scheduler``, ``compute_notifications``) and writes the results
back.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``BillingService`` is the sole public
entry point for billing persistence.  "today" comes from the caller or
the injected clock, never from the engines.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (``commit`` on
  success, ``rollback`` on failure or exception).
* Each generated instance is written inside its own SAVEPOINT together
  with its generation record and the template update; a duplicate
  generation key rolls back only that savepoint and counts as skipped.

Failure modes
-------------
* Template rows that fail to parse are reported as rejections.
* Storage errors other than a duplicate generation key propagate
  unchanged after rollback.
* ``TemplateNotFoundError`` / ``NotificationNotFoundError`` for unknown ids.

Usage::

    service = BillingService(session, clock=clock, config=settings.billing_config())
    run = service.generate_recurring(today=clock.today(), actor_id=actor_id)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from office_engines.notifications import (
    Notification,
    NotificationEntityType,
    compute_notifications,
    parse_notification_id,
)
from office_engines.recurrence import TemplateRejection, run_scheduler
from office_kernel.domain.clock import Clock, SystemClock
from office_kernel.exceptions import (
    NotificationNotFoundError,
    StatusError,
    TemplateNotFoundError,
)
from office_kernel.logging_config import LogContext, get_logger
from office_kernel.utils.idempotency import generation_key
from office_modules.billing.config import BillingConfig
from office_modules.billing.models import (
    Expense,
    Invoice,
    InvoiceStatus,
    RecurringTemplate,
    TemplateKind,
    TemplatePatch,
    apply_template_patch,
)
from office_modules.billing.orm import (
    ExpenseModel,
    GenerationRecordModel,
    InvoiceModel,
    NotificationReadModel,
    RecurringTemplateModel,
)

logger = get_logger("modules.billing.service")


@dataclass(frozen=True)
class GenerationRunResult:
    """What one call to ``generate_recurring`` wrote."""

    run_date: date
    generated_ids: tuple[UUID, ...] = ()
    skipped_keys: tuple[str, ...] = ()
    rejections: tuple[TemplateRejection, ...] = ()

    @property
    def generated_count(self) -> int:
        return len(self.generated_ids)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_keys)


class BillingService:
    """
    Orchestrates recurring templates, invoices, expenses and reminders.

    Contract
    --------
    * ``generate_recurring`` returns ``GenerationRunResult``; rejected
      templates and skipped duplicates are reported, not raised.
    * ``notifications`` is read-only and never commits.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * Running ``generate_recurring`` twice for the same day writes nothing
      the second time.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: BillingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or BillingConfig()

    # =========================================================================
    # Templates and instances
    # =========================================================================

    def create_template(self, template: RecurringTemplate, actor_id: UUID) -> RecurringTemplate:
        """Persist a new recurring template."""
        try:
            self._session.add(RecurringTemplateModel.from_dto(template, created_by_id=actor_id))
            self._session.commit()
            logger.info("recurring_template_created", extra={
                "template_id": str(template.id),
                "kind": template.kind.value,
                "frequency": template.frequency.value,
            })
            return template
        except Exception:
            self._session.rollback()
            raise

    def record_invoice(self, invoice: Invoice, actor_id: UUID) -> Invoice:
        """Persist a manually created invoice."""
        try:
            self._session.add(InvoiceModel.from_dto(invoice, created_by_id=actor_id))
            self._session.commit()
            logger.info("invoice_recorded", extra={
                "invoice_id": str(invoice.id),
                "invoice_number": invoice.invoice_number,
            })
            return invoice
        except Exception:
            self._session.rollback()
            raise

    def record_expense(self, expense: Expense, actor_id: UUID) -> Expense:
        """Persist a manually created expense."""
        try:
            self._session.add(ExpenseModel.from_dto(expense, created_by_id=actor_id))
            self._session.commit()
            logger.info("expense_recorded", extra={"expense_id": str(expense.id)})
            return expense
        except Exception:
            self._session.rollback()
            raise

    def get_template(self, template_id: UUID) -> RecurringTemplate:
        return self._load_template_row(template_id).to_dto()

    def update_template(
        self, template_id: UUID, patch: TemplatePatch, actor_id: UUID,
    ) -> RecurringTemplate:
        """
        Apply an explicit patch to a recurring template.

        Raises:
            TemplateNotFoundError: No template with ``template_id``.
            InvalidPatchError: Patch names a field of the other variant
                or carries an invalid value.
        """
        try:
            row = self._load_template_row(template_id)
            updated = apply_template_patch(row.to_dto(), patch)
            row.apply_dto(updated, updated_by_id=actor_id)
            self._session.commit()
            logger.info("recurring_template_updated", extra={
                "template_id": str(template_id),
                "amount": str(updated.amount),
                "frequency": updated.frequency.value,
            })
            return updated
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Recurring generation
    # =========================================================================

    def generate_recurring(self, today: date | None = None, actor_id: UUID | None = None) -> GenerationRunResult:
        """
        Generate the instances due on ``today`` and advance their templates.

        Args:
            today: Run date; defaults to ``clock.today()``.
            actor_id: Recorded as creator of every written row.

        Returns:
            GenerationRunResult with generated ids, skipped generation keys
            and template rejections.
        """
        if actor_id is None:
            raise ValueError("actor_id is required")
        run_date = today or self._clock.today()

        with LogContext.bind(actor_id=str(actor_id)):
            try:
                rows = self._session.scalars(
                    select(RecurringTemplateModel).order_by(
                        RecurringTemplateModel.start_date, RecurringTemplateModel.id,
                    )
                ).all()
                rows_by_id = {row.id: row for row in rows}

                logger.info("recurring_generation_started", extra={
                    "run_date": run_date.isoformat(),
                    "template_count": len(rows),
                })

                result = run_scheduler(
                    [row.to_mapping() for row in rows],
                    today=run_date,
                    invoice_number_prefix=self._config.invoice_number_prefix,
                )

                generated: list[UUID] = []
                skipped: list[str] = []

                for instance, template in zip(result.new_instances, result.updated_templates):
                    key = generation_key(template.id, instance.due_date)
                    savepoint = self._session.begin_nested()
                    try:
                        self._session.add(GenerationRecordModel(
                            template_id=template.id,
                            period_due_date=instance.due_date,
                            generation_key=key,
                            instance_kind=template.kind.value,
                            instance_id=instance.id,
                            run_date=run_date,
                            created_by_id=actor_id,
                        ))
                        self._session.flush()

                        if template.kind == TemplateKind.INVOICE:
                            self._session.add(InvoiceModel.from_dto(instance, created_by_id=actor_id))
                        else:
                            self._session.add(ExpenseModel.from_dto(instance, created_by_id=actor_id))
                        rows_by_id[template.id].apply_dto(template, updated_by_id=actor_id)
                        self._session.flush()
                        savepoint.commit()
                        generated.append(instance.id)
                    except IntegrityError:
                        savepoint.rollback()
                        skipped.append(key)
                        logger.warning("recurring_generation_duplicate_skipped", extra={
                            "generation_key": key,
                            "template_id": str(template.id),
                        })

                self._session.commit()

                logger.info("recurring_generation_committed", extra={
                    "run_date": run_date.isoformat(),
                    "generated": len(generated),
                    "skipped": len(skipped),
                    "rejected": len(result.rejections),
                })
                return GenerationRunResult(
                    run_date=run_date,
                    generated_ids=tuple(generated),
                    skipped_keys=tuple(skipped),
                    rejections=result.rejections,
                )
            except Exception:
                self._session.rollback()
                logger.exception("recurring_generation_failed", extra={
                    "run_date": run_date.isoformat(),
                })
                raise

    # =========================================================================
    # Notifications
    # =========================================================================

    def notifications(self, today: date | None = None) -> tuple[Notification, ...]:
        """Current reminder feed with persisted read state applied.

        A stored invoice or expense whose status cannot be parsed is
        logged and left out; the rest of the feed is unaffected.
        """
        as_of = today or self._clock.today()
        invoices = self._load_open_rows(
            select(InvoiceModel)
            .where(InvoiceModel.status != InvoiceStatus.PAID.value)
            .order_by(InvoiceModel.due_date, InvoiceModel.invoice_number),
            NotificationEntityType.INVOICE,
        )
        expenses = self._load_open_rows(
            select(ExpenseModel)
            .where(ExpenseModel.due_date.is_not(None))
            .order_by(ExpenseModel.due_date, ExpenseModel.id),
            NotificationEntityType.EXPENSE,
        )
        return compute_notifications(
            invoices,
            expenses,
            reminder_days=self._config.reminder_days,
            today=as_of,
            read_keys=self._read_keys(),
        )

    def mark_notification_read(self, notification_id: str, actor_id: UUID) -> None:
        """
        Persist the read state of one notification.

        Raises:
            NotificationNotFoundError: id is malformed or its invoice /
                expense does not exist.
        """
        try:
            entity_type, entity_id = parse_notification_id(notification_id)
            model = InvoiceModel if entity_type == NotificationEntityType.INVOICE else ExpenseModel
            if self._session.get(model, entity_id) is None:
                raise NotificationNotFoundError(notification_id)
            self._add_read_marker(entity_type, entity_id, actor_id)
            self._session.commit()
            logger.info("notification_marked_read", extra={"notification_id": notification_id})
        except Exception:
            self._session.rollback()
            raise

    def mark_all_notifications_read(self, today: date | None = None, actor_id: UUID | None = None) -> int:
        """Mark every unread notification of the current feed read.

        Returns:
            Number of notifications newly marked.
        """
        if actor_id is None:
            raise ValueError("actor_id is required")
        try:
            unread = [n for n in self.notifications(today) if not n.is_read]
            for notification in unread:
                self._add_read_marker(notification.entity_type, notification.entity_id, actor_id)
            self._session.commit()
            logger.info("notifications_marked_all_read", extra={"count": len(unread)})
            return len(unread)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Internals
    # =========================================================================

    def _load_template_row(self, template_id: UUID) -> RecurringTemplateModel:
        row = self._session.get(RecurringTemplateModel, template_id)
        if row is None:
            raise TemplateNotFoundError(str(template_id))
        return row

    def _load_open_rows(self, stmt, entity_type: NotificationEntityType) -> list:
        dtos = []
        for row in self._session.scalars(stmt):
            try:
                dtos.append(row.to_dto())
            except StatusError as exc:
                logger.warning("notification_row_rejected", extra={
                    "entity_type": entity_type.value,
                    "entity_id": str(row.id),
                    "error_code": exc.code,
                    "detail": str(exc),
                })
        return dtos

    def _read_keys(self) -> frozenset[str]:
        rows = self._session.scalars(select(NotificationReadModel))
        return frozenset(row.notification_key() for row in rows)

    def _add_read_marker(
        self, entity_type: NotificationEntityType, entity_id: UUID, actor_id: UUID,
    ) -> None:
        existing = self._session.scalars(
            select(NotificationReadModel).where(
                NotificationReadModel.entity_type == entity_type.value,
                NotificationReadModel.entity_id == entity_id,
            )
        ).first()
        if existing is None:
            self._session.add(NotificationReadModel(
                entity_type=entity_type.value,
                entity_id=entity_id,
                created_by_id=actor_id,
            ))
