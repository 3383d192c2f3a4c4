"""
Billing Domain Models (``office_modules.billing.models``).

Responsibility
--------------
Frozen dataclass value objects for recurring obligations: the recurring
invoice / expense templates, the concrete invoice / expense instances
they produce, and the explicit patch struct for template edits.  Also
the exhaustive string -> enum mapping used when rows come back from
storage.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
the recurrence and notification engines and by ``BillingService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Frequency and status are closed enums; unknown raw values raise
  (``UnknownFrequencyError`` / ``UnknownStatusError``), never default.
* An instance's ``id`` and ``recurring_source_id`` never change.

Failure modes
-------------
* ``template_from_mapping`` raises ``TemplateParseError`` naming the
  offending field.
* ``apply_template_patch`` raises ``InvalidPatchError`` for fields the
  template variant does not carry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping
from uuid import UUID

from office_kernel.exceptions import (
    InvalidPatchError,
    TemplateParseError,
    UnknownFrequencyError,
    UnknownStatusError,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RecurrenceFrequency(str, Enum):
    """How often a template produces an instance."""
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states."""
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"
    PARTIALLY_PAID = "Partially Paid"


class ExpenseStatus(str, Enum):
    """Expense payment states."""
    UNPAID = "Unpaid"
    PAID = "Paid"


class TemplateKind(str, Enum):
    """Which instance type a template generates."""
    INVOICE = "invoice"
    EXPENSE = "expense"


def _status_token(value: str) -> str:
    # "Partially Paid", "partially_paid", "PARTIALLY-PAID" -> "partiallypaid"
    return re.sub(r"[\s_\-]+", "", value).lower()


def _build_lookup(enum_cls: type[Enum]) -> dict[str, Enum]:
    lookup: dict[str, Enum] = {}
    for member in enum_cls:
        lookup[_status_token(member.value)] = member
        lookup[_status_token(member.name)] = member
    return lookup


_FREQUENCY_LOOKUP = _build_lookup(RecurrenceFrequency)
_INVOICE_STATUS_LOOKUP = _build_lookup(InvoiceStatus)
_EXPENSE_STATUS_LOOKUP = _build_lookup(ExpenseStatus)


def parse_frequency(value: Any) -> RecurrenceFrequency:
    """Map a raw frequency value onto the closed enum.

    Raises:
        UnknownFrequencyError: value is not Monthly/Quarterly/Annually.
    """
    if isinstance(value, RecurrenceFrequency):
        return value
    if isinstance(value, str):
        member = _FREQUENCY_LOOKUP.get(_status_token(value))
        if member is not None:
            return member  # type: ignore[return-value]
    raise UnknownFrequencyError(value)


def parse_invoice_status(value: Any) -> InvoiceStatus:
    """Map a raw invoice status onto ``InvoiceStatus``.

    Raises:
        UnknownStatusError: value matches no member.
    """
    if isinstance(value, InvoiceStatus):
        return value
    if isinstance(value, str):
        member = _INVOICE_STATUS_LOOKUP.get(_status_token(value))
        if member is not None:
            return member  # type: ignore[return-value]
    raise UnknownStatusError("invoice", value)


def parse_expense_status(value: Any) -> ExpenseStatus:
    """Map a raw expense status onto ``ExpenseStatus``.

    Raises:
        UnknownStatusError: value matches no member.
    """
    if isinstance(value, ExpenseStatus):
        return value
    if isinstance(value, str):
        member = _EXPENSE_STATUS_LOOKUP.get(_status_token(value))
        if member is not None:
            return member  # type: ignore[return-value]
    raise UnknownStatusError("expense", value)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecurringInvoiceTemplate:
    """A recurring invoice definition."""
    id: UUID
    client_name: str
    amount: Decimal
    frequency: RecurrenceFrequency
    start_date: date
    last_generated_date: date
    end_date: date | None = None

    kind = TemplateKind.INVOICE

    @property
    def counterparty(self) -> str:
        return self.client_name


@dataclass(frozen=True)
class RecurringExpenseTemplate:
    """A recurring expense definition."""
    id: UUID
    category: str
    description: str
    amount: Decimal
    frequency: RecurrenceFrequency
    start_date: date
    last_generated_date: date
    end_date: date | None = None

    kind = TemplateKind.EXPENSE

    @property
    def counterparty(self) -> str:
        return self.category


RecurringTemplate = RecurringInvoiceTemplate | RecurringExpenseTemplate


# ---------------------------------------------------------------------------
# Instances
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Invoice:
    """A concrete invoice, manual or generated from a template."""
    id: UUID
    invoice_number: str
    client_name: str
    amount: Decimal
    due_date: date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    recurring_source_id: UUID | None = None
    paid_date: date | None = None
    paid_amount: Decimal | None = None


@dataclass(frozen=True)
class Expense:
    """A concrete expense, manual or generated from a template."""
    id: UUID
    category: str
    description: str
    amount: Decimal
    date: date
    status: ExpenseStatus = ExpenseStatus.UNPAID
    due_date: date | None = None
    recurring_source_id: UUID | None = None


Obligation = Invoice | Expense


# ---------------------------------------------------------------------------
# Raw row parsing
# ---------------------------------------------------------------------------


def _as_date(ref: str, key: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise TemplateParseError(ref, key, f"not an ISO date: {value!r}")


def _parse_date_field(ref: str, data: Mapping[str, Any], key: str) -> date:
    return _as_date(ref, key, data.get(key))


def _parse_optional_date_field(
    ref: str, data: Mapping[str, Any], key: str,
) -> date | None:
    if data.get(key) in (None, ""):
        return None
    return _parse_date_field(ref, data, key)


def template_from_mapping(data: Mapping[str, Any]) -> RecurringTemplate:
    """Build a typed template from a raw storage row.

    The row carries ``kind`` ("invoice" / "expense"), ``id``, ``amount``,
    ``frequency``, ``start_date``, ``last_generated_date``, optional
    ``end_date``, plus ``client_name`` (invoices) or ``category`` and
    ``description`` (expenses).  Dates may be ``date`` objects or ISO
    strings.

    Raises:
        TemplateParseError: any field is missing or malformed.
        UnknownFrequencyError: frequency is outside the closed set.
    """
    ref = str(data.get("id", "<no id>"))

    try:
        template_id = data["id"] if isinstance(data["id"], UUID) else UUID(str(data["id"]))
    except (KeyError, ValueError) as exc:
        raise TemplateParseError(ref, "id", str(exc)) from None

    try:
        kind = TemplateKind(data.get("kind"))
    except ValueError:
        raise TemplateParseError(ref, "kind", f"unknown kind {data.get('kind')!r}") from None

    try:
        amount = Decimal(str(data["amount"]))
    except (KeyError, InvalidOperation) as exc:
        raise TemplateParseError(ref, "amount", repr(exc)) from None
    if not amount.is_finite() or amount <= 0:
        raise TemplateParseError(ref, "amount", f"must be positive, got {amount}")

    frequency = parse_frequency(data.get("frequency"))
    start_date = _parse_date_field(ref, data, "start_date")
    last_generated = _parse_date_field(ref, data, "last_generated_date")
    end_date = _parse_optional_date_field(ref, data, "end_date")
    if end_date is not None and end_date < start_date:
        raise TemplateParseError(ref, "end_date", "precedes start_date")

    if kind == TemplateKind.INVOICE:
        client_name = data.get("client_name")
        if not client_name:
            raise TemplateParseError(ref, "client_name", "required for invoice templates")
        return RecurringInvoiceTemplate(
            id=template_id,
            client_name=client_name,
            amount=amount,
            frequency=frequency,
            start_date=start_date,
            last_generated_date=last_generated,
            end_date=end_date,
        )

    category = data.get("category")
    if not category:
        raise TemplateParseError(ref, "category", "required for expense templates")
    return RecurringExpenseTemplate(
        id=template_id,
        category=category,
        description=data.get("description") or "",
        amount=amount,
        frequency=frequency,
        start_date=start_date,
        last_generated_date=last_generated,
        end_date=end_date,
    )


def normalize_template_dates(template: RecurringTemplate) -> RecurringTemplate:
    """Return ``template`` with every date field as a plain ``date``.

    Datetimes are truncated to their date.

    Raises:
        TemplateParseError: a date field holds something that is not a date.
    """
    ref = str(template.id)
    start_date = _as_date(ref, "start_date", template.start_date)
    last_generated = _as_date(ref, "last_generated_date", template.last_generated_date)
    end_date = (
        None if template.end_date is None
        else _as_date(ref, "end_date", template.end_date)
    )
    if end_date is not None and end_date < start_date:
        raise TemplateParseError(ref, "end_date", "precedes start_date")
    if (
        start_date is template.start_date
        and last_generated is template.last_generated_date
        and end_date is template.end_date
    ):
        return template
    return replace(
        template,
        start_date=start_date,
        last_generated_date=last_generated,
        end_date=end_date,
    )


# ---------------------------------------------------------------------------
# Patch struct
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplatePatch:
    """Every field a user may change on a recurring template.

    ``None`` means "leave unchanged".  ``end_date`` cannot be cleared
    through ``None``; use ``clear_end_date=True`` instead.  The id and
    ``last_generated_date`` are owned by the scheduler and not listed.
    """
    amount: Decimal | None = None
    frequency: RecurrenceFrequency | None = None
    end_date: date | None = None
    clear_end_date: bool = False
    client_name: str | None = None
    category: str | None = None
    description: str | None = None


_INVOICE_ONLY = ("client_name",)
_EXPENSE_ONLY = ("category", "description")


def apply_template_patch(
    template: RecurringTemplate, patch: TemplatePatch,
) -> RecurringTemplate:
    """Return a copy of ``template`` with the patch applied.

    Raises:
        InvalidPatchError: the patch sets a field of the other variant,
            a non-positive amount, or an end date before the start date.
    """
    foreign = _EXPENSE_ONLY if template.kind == TemplateKind.INVOICE else _INVOICE_ONLY
    for name in foreign:
        if getattr(patch, name) is not None:
            raise InvalidPatchError(
                str(template.id), name, f"not a field of {template.kind.value} templates",
            )

    if patch.end_date is not None and patch.clear_end_date:
        raise InvalidPatchError(
            str(template.id), "end_date", "cannot set and clear end_date together",
        )

    changes: dict[str, Any] = {}
    if patch.amount is not None:
        if patch.amount <= 0:
            raise InvalidPatchError(str(template.id), "amount", "must be positive")
        changes["amount"] = patch.amount
    if patch.frequency is not None:
        changes["frequency"] = parse_frequency(patch.frequency)
    if patch.clear_end_date:
        changes["end_date"] = None
    elif patch.end_date is not None:
        if patch.end_date < template.start_date:
            raise InvalidPatchError(str(template.id), "end_date", "precedes start_date")
        changes["end_date"] = patch.end_date

    own_fields = _INVOICE_ONLY if template.kind == TemplateKind.INVOICE else _EXPENSE_ONLY
    for name in own_fields:
        value = getattr(patch, name)
        if value is not None:
            changes[name] = value

    return replace(template, **changes)
