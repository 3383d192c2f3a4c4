"""
SQLAlchemy ORM persistence models for the Billing module.

Responsibility
--------------
Provide database-backed persistence for recurring templates, the
invoices and expenses they generate, the generation ledger that makes the
daily job idempotent, and per-entity notification read state.  The
notification feed itself is a projection and is not persisted.

Architecture position
---------------------
**Modules layer** -- ORM models consumed by ``BillingService`` for
persistence.  Inherits from ``TrackedBase`` (kernel db layer).

Invariants enforced
-------------------
* All monetary fields use ``Decimal`` (Numeric) -- NEVER float.
* Enum fields stored as String(50); they are parsed back through the
  exhaustive ``parse_*`` functions, so an unknown stored value raises.
* ``GenerationRecordModel``: UNIQUE ``(template_id, period_due_date)``;
  one generated instance per template per period.
* ``NotificationReadModel``: UNIQUE ``(entity_type, entity_id)``.
"""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from office_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# RecurringTemplateModel
# ---------------------------------------------------------------------------


class RecurringTemplateModel(TrackedBase):
    """
    A recurring invoice or expense definition.

    Maps to ``RecurringInvoiceTemplate`` / ``RecurringExpenseTemplate`` in
    ``office_modules.billing.models``; ``kind`` selects the variant.

    Guarantees:
        - ``last_generated_date`` is written only by the generation job.
        - ``frequency`` is one of Monthly / Quarterly / Annually once parsed.
    """

    __tablename__ = "recurring_templates"

    __table_args__ = (
        Index("idx_recurring_template_kind", "kind"),
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    client_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    amount: Mapped[Decimal]
    frequency: Mapped[str] = mapped_column(String(50), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_generated_date: Mapped[date] = mapped_column(Date, nullable=False)

    def to_mapping(self) -> dict[str, Any]:
        """Raw row as a plain mapping, the shape ``template_from_mapping`` reads."""
        return {
            "id": self.id,
            "kind": self.kind,
            "client_name": self.client_name,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "frequency": self.frequency,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "last_generated_date": self.last_generated_date,
        }

    def to_dto(self):
        from office_modules.billing.models import template_from_mapping

        return template_from_mapping(self.to_mapping())

    def apply_dto(self, dto, updated_by_id: UUID) -> None:
        """Copy the mutable fields of ``dto`` onto this row."""
        from office_modules.billing.models import TemplateKind

        self.amount = dto.amount
        self.frequency = dto.frequency.value
        self.end_date = dto.end_date
        self.last_generated_date = dto.last_generated_date
        if dto.kind == TemplateKind.INVOICE:
            self.client_name = dto.client_name
        else:
            self.category = dto.category
            self.description = dto.description
        self.updated_by_id = updated_by_id

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "RecurringTemplateModel":
        from office_modules.billing.models import TemplateKind

        is_invoice = dto.kind == TemplateKind.INVOICE
        return cls(
            id=dto.id,
            kind=dto.kind.value,
            client_name=dto.client_name if is_invoice else None,
            category=None if is_invoice else dto.category,
            description=None if is_invoice else dto.description,
            amount=dto.amount,
            frequency=dto.frequency.value,
            start_date=dto.start_date,
            end_date=dto.end_date,
            last_generated_date=dto.last_generated_date,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<RecurringTemplateModel {self.kind} {self.frequency} {self.amount}>"


# ---------------------------------------------------------------------------
# InvoiceModel
# ---------------------------------------------------------------------------


class InvoiceModel(TrackedBase):
    """
    A customer invoice.

    Maps to the ``Invoice`` DTO in ``office_modules.billing.models``.

    Guarantees:
        - ``invoice_number`` is unique.
        - ``recurring_source_id`` is set only for generated invoices.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_invoice_number"),
        Index("idx_invoice_status", "status"),
        Index("idx_invoice_due_date", "due_date"),
    )

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal]
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Draft")
    recurring_source_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("recurring_templates.id"), nullable=True,
    )
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    paid_amount: Mapped[Decimal | None]

    def to_dto(self):
        from office_modules.billing.models import Invoice, parse_invoice_status

        return Invoice(
            id=self.id,
            invoice_number=self.invoice_number,
            client_name=self.client_name,
            amount=self.amount,
            due_date=self.due_date,
            status=parse_invoice_status(self.status),
            recurring_source_id=self.recurring_source_id,
            paid_date=self.paid_date,
            paid_amount=self.paid_amount,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "InvoiceModel":
        return cls(
            id=dto.id,
            invoice_number=dto.invoice_number,
            client_name=dto.client_name,
            amount=dto.amount,
            due_date=dto.due_date,
            status=dto.status.value,
            recurring_source_id=dto.recurring_source_id,
            paid_date=dto.paid_date,
            paid_amount=dto.paid_amount,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<InvoiceModel {self.invoice_number} [{self.status}] {self.amount}>"


# ---------------------------------------------------------------------------
# ExpenseModel
# ---------------------------------------------------------------------------


class ExpenseModel(TrackedBase):
    """
    A business expense.

    Maps to the ``Expense`` DTO in ``office_modules.billing.models``.
    """

    __tablename__ = "expenses"

    __table_args__ = (
        Index("idx_expense_status", "status"),
        Index("idx_expense_due_date", "due_date"),
    )

    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    amount: Mapped[Decimal]
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Unpaid")
    recurring_source_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("recurring_templates.id"), nullable=True,
    )

    def to_dto(self):
        from office_modules.billing.models import Expense, parse_expense_status

        return Expense(
            id=self.id,
            category=self.category,
            description=self.description,
            amount=self.amount,
            date=self.expense_date,
            status=parse_expense_status(self.status),
            due_date=self.due_date,
            recurring_source_id=self.recurring_source_id,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ExpenseModel":
        return cls(
            id=dto.id,
            category=dto.category,
            description=dto.description,
            amount=dto.amount,
            expense_date=dto.date,
            due_date=dto.due_date,
            status=dto.status.value,
            recurring_source_id=dto.recurring_source_id,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<ExpenseModel {self.category} [{self.status}] {self.amount}>"


# ---------------------------------------------------------------------------
# GenerationRecordModel
# ---------------------------------------------------------------------------


class GenerationRecordModel(TrackedBase):
    """
    Ledger of generated instances, one row per (template, period).

    Guarantees:
        - (template_id, period_due_date) is unique; a second insert for the
          same period raises IntegrityError and the caller skips it.
        - ``generation_key`` is ``recurring:<template_id>:<period_due_date>``.
    """

    __tablename__ = "recurring_generation_records"

    __table_args__ = (
        UniqueConstraint(
            "template_id", "period_due_date", name="uq_generation_template_period",
        ),
        UniqueConstraint("generation_key", name="uq_generation_key"),
    )

    template_id: Mapped[UUID] = mapped_column(
        ForeignKey("recurring_templates.id"), nullable=False,
    )
    period_due_date: Mapped[date] = mapped_column(Date, nullable=False)
    generation_key: Mapped[str] = mapped_column(String(100), nullable=False)
    instance_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    instance_id: Mapped[UUID]
    run_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<GenerationRecordModel {self.generation_key}>"


# ---------------------------------------------------------------------------
# NotificationReadModel
# ---------------------------------------------------------------------------


class NotificationReadModel(TrackedBase):
    """
    Read marker for the notification of one invoice or expense.

    The feed is recomputed on every request; this row is what survives
    between computations.
    """

    __tablename__ = "notification_reads"

    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", name="uq_notification_read_entity"),
    )

    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[UUID]

    def notification_key(self) -> str:
        from office_engines.notifications import NotificationEntityType, notification_id

        return notification_id(NotificationEntityType(self.entity_type), self.entity_id)

    def __repr__(self) -> str:
        return f"<NotificationReadModel {self.entity_type}:{self.entity_id}>"
