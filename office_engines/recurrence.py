"""
Recurrence Scheduler Engine (``office_engines.recurrence``).

Responsibility
--------------
Decide which recurring invoice / expense templates are due on a given
day and produce the new instances plus the updated templates.  The
caller persists both.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  "today" is always supplied by the caller.

Invariants enforced
-------------------
* At most one instance per template per run, even when several periods
  have elapsed since ``last_generated_date`` (no catch-up loop).
* No instance is generated once ``today`` is past the template's
  ``end_date``.
* ``last_generated_date`` moves to the run date, not to the period
  due date.
* Instance ids derive from the generation key ``(template_id,
  due_date)``, so identical snapshots give identical output.

Failure modes
-------------
* A malformed template (unparsable row or date field, unknown
  frequency, future ``last_generated_date``, next due date past year
  9999) is returned as a ``TemplateRejection`` and logged; the rest of
  the batch is still processed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Mapping, Sequence

from office_kernel.exceptions import TemplateError
from office_kernel.logging_config import get_logger
from office_kernel.utils.idempotency import generation_uuid
from office_engines.datemath import advance
from office_engines.tracer import traced_engine
from office_modules.billing.models import (
    Expense,
    ExpenseStatus,
    Invoice,
    InvoiceStatus,
    Obligation,
    RecurringExpenseTemplate,
    RecurringInvoiceTemplate,
    RecurringTemplate,
    normalize_template_dates,
    parse_frequency,
    template_from_mapping,
)

logger = get_logger("engines.recurrence")

FUTURE_LAST_GENERATED = "FUTURE_LAST_GENERATED_DATE"
DATE_OUT_OF_RANGE = "DATE_OUT_OF_RANGE"


@dataclass(frozen=True)
class TemplateRejection:
    """A template the scheduler could not process."""
    template_ref: str
    error_code: str
    message: str


@dataclass(frozen=True)
class SchedulerRunResult:
    """Outcome of one scheduler run.

    ``updated_templates`` contains only templates whose
    ``last_generated_date`` changed -- exactly what must be written back.
    """
    new_instances: tuple[Obligation, ...] = ()
    updated_templates: tuple[RecurringTemplate, ...] = ()
    rejections: tuple[TemplateRejection, ...] = ()

    @property
    def generated_count(self) -> int:
        return len(self.new_instances)


def invoice_number_for(instance_id: Any, prefix: str = "INV") -> str:
    """Human-facing invoice number derived from the instance id."""
    return f"{prefix}-{instance_id.hex[:8].upper()}"


def _coerce_template(item: RecurringTemplate | Mapping[str, Any]) -> RecurringTemplate:
    if isinstance(item, (RecurringInvoiceTemplate, RecurringExpenseTemplate)):
        frequency = parse_frequency(item.frequency)
        if frequency is not item.frequency:
            item = replace(item, frequency=frequency)
        return normalize_template_dates(item)
    return template_from_mapping(item)


def _template_ref(item: Any) -> str:
    if isinstance(item, Mapping):
        return str(item.get("id", "<no id>"))
    return str(getattr(item, "id", "<no id>"))


def _reject(
    rejections: list[TemplateRejection], ref: str, error_code: str, message: str,
) -> None:
    rejections.append(TemplateRejection(ref, error_code, message))
    logger.warning(
        "recurring_template_rejected",
        extra={"template_ref": ref, "error_code": error_code, "detail": message},
    )


def _build_instance(
    template: RecurringTemplate,
    due_date: date,
    today: date,
    invoice_number_prefix: str,
) -> Obligation:
    instance_id = generation_uuid(template.id, due_date)
    if isinstance(template, RecurringInvoiceTemplate):
        return Invoice(
            id=instance_id,
            invoice_number=invoice_number_for(instance_id, invoice_number_prefix),
            client_name=template.client_name,
            amount=template.amount,
            due_date=due_date,
            status=InvoiceStatus.SENT,
            recurring_source_id=template.id,
        )
    return Expense(
        id=instance_id,
        category=template.category,
        description=template.description,
        amount=template.amount,
        date=today,
        due_date=due_date,
        status=ExpenseStatus.UNPAID,
        recurring_source_id=template.id,
    )


def next_due_date(template: RecurringTemplate) -> date:
    """Due date of the period following ``last_generated_date``."""
    return advance(template.last_generated_date, template.frequency)


def is_due(template: RecurringTemplate, today: date) -> bool:
    """True when ``template`` should generate an instance on ``today``."""
    if today < next_due_date(template):
        return False
    if template.end_date is not None and today > template.end_date:
        return False
    return True


@traced_engine("recurrence", "1.0", fingerprint_fields=("templates", "today"))
def run_scheduler(
    templates: Sequence[RecurringTemplate | Mapping[str, Any]],
    today: date,
    invoice_number_prefix: str = "INV",
) -> SchedulerRunResult:
    """Generate at most one instance per due template.

    Args:
        templates: Typed templates or raw storage rows (mappings).
        today: The run date, supplied by the caller.
        invoice_number_prefix: Prefix for generated invoice numbers.

    Returns:
        SchedulerRunResult with new instances, changed templates and
        per-template rejections.
    """
    new_instances: list[Obligation] = []
    updated: list[RecurringTemplate] = []
    rejections: list[TemplateRejection] = []

    for item in templates:
        ref = _template_ref(item)
        try:
            template = _coerce_template(item)
        except TemplateError as exc:
            _reject(rejections, ref, exc.code, str(exc))
            continue

        if template.last_generated_date > today:
            _reject(
                rejections, ref, FUTURE_LAST_GENERATED,
                f"last_generated_date {template.last_generated_date} "
                f"is after run date {today}",
            )
            continue

        try:
            if not is_due(template, today):
                continue
            due_date = next_due_date(template)
        except (ValueError, OverflowError) as exc:
            _reject(rejections, ref, DATE_OUT_OF_RANGE, f"next due date: {exc}")
            continue

        instance = _build_instance(template, due_date, today, invoice_number_prefix)
        new_instances.append(instance)
        updated.append(replace(template, last_generated_date=today))

        logger.debug(
            "recurring_instance_generated",
            extra={
                "template_id": str(template.id),
                "kind": template.kind.value,
                "instance_id": str(instance.id),
                "due_date": due_date.isoformat(),
            },
        )

    logger.info(
        "recurrence_run_completed",
        extra={
            "run_date": today.isoformat(),
            "templates": len(templates),
            "generated": len(new_instances),
            "rejected": len(rejections),
        },
    )

    return SchedulerRunResult(
        new_instances=tuple(new_instances),
        updated_templates=tuple(updated),
        rejections=tuple(rejections),
    )
