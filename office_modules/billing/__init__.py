"""
Billing Module (``office_modules.billing``).

Responsibility
--------------
Recurring invoices and expenses: templates, the instances the daily job
generates from them, explicit template patches, and the due-date
reminder feed.

Architecture position
---------------------
**Modules layer** -- value types, config schema, ORM models and the
``BillingService`` facade.  Scheduling and notification logic lives in
``office_engines``.
"""

from office_modules.billing.config import BillingConfig
from office_modules.billing.models import (
    Expense,
    ExpenseStatus,
    Invoice,
    InvoiceStatus,
    RecurrenceFrequency,
    RecurringExpenseTemplate,
    RecurringInvoiceTemplate,
    TemplateKind,
    TemplatePatch,
    apply_template_patch,
    normalize_template_dates,
    parse_expense_status,
    parse_frequency,
    parse_invoice_status,
    template_from_mapping,
)

__all__ = [
    "BillingConfig",
    "Expense",
    "ExpenseStatus",
    "Invoice",
    "InvoiceStatus",
    "RecurrenceFrequency",
    "RecurringExpenseTemplate",
    "RecurringInvoiceTemplate",
    "TemplateKind",
    "TemplatePatch",
    "apply_template_patch",
    "normalize_template_dates",
    "parse_expense_status",
    "parse_frequency",
    "parse_invoice_status",
    "template_from_mapping",
]
