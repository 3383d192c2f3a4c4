"""
Tests for billing value types.

Covers:
- Exhaustive status / frequency parsing (no silent defaults)
- template_from_mapping() parsing and field-level errors
- TemplatePatch application rules
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from office_kernel.exceptions import (
    InvalidPatchError,
    TemplateParseError,
    UnknownFrequencyError,
    UnknownStatusError,
)
from office_modules.billing.models import (
    ExpenseStatus,
    InvoiceStatus,
    RecurrenceFrequency,
    RecurringExpenseTemplate,
    RecurringInvoiceTemplate,
    TemplateKind,
    TemplatePatch,
    apply_template_patch,
    parse_expense_status,
    parse_frequency,
    parse_invoice_status,
    normalize_template_dates,
    template_from_mapping,
)


class TestStatusParsing:
    """Raw storage strings map onto closed enums."""

    @pytest.mark.parametrize("raw", ["Partially Paid", "partially_paid", "PARTIALLY-PAID"])
    def test_partially_paid_spellings(self, raw):
        assert parse_invoice_status(raw) == InvoiceStatus.PARTIALLY_PAID

    @pytest.mark.parametrize("raw,expected", [
        ("Draft", InvoiceStatus.DRAFT),
        ("sent", InvoiceStatus.SENT),
        ("PAID", InvoiceStatus.PAID),
        ("Overdue", InvoiceStatus.OVERDUE),
    ])
    def test_invoice_statuses(self, raw, expected):
        assert parse_invoice_status(raw) == expected

    @pytest.mark.parametrize("raw", ["Cancelled", "", None, 3])
    def test_unknown_invoice_status_raises(self, raw):
        with pytest.raises(UnknownStatusError) as exc_info:
            parse_invoice_status(raw)
        assert exc_info.value.entity_type == "invoice"

    def test_expense_statuses(self):
        assert parse_expense_status("unpaid") == ExpenseStatus.UNPAID
        assert parse_expense_status("Paid") == ExpenseStatus.PAID
        with pytest.raises(UnknownStatusError):
            parse_expense_status("Pending")

    def test_enum_member_passes_through(self):
        assert parse_invoice_status(InvoiceStatus.SENT) is InvoiceStatus.SENT


class TestFrequencyParsing:
    """Frequency is a closed set."""

    @pytest.mark.parametrize("raw,expected", [
        ("Monthly", RecurrenceFrequency.MONTHLY),
        ("quarterly", RecurrenceFrequency.QUARTERLY),
        ("ANNUALLY", RecurrenceFrequency.ANNUALLY),
    ])
    def test_known(self, raw, expected):
        assert parse_frequency(raw) == expected

    @pytest.mark.parametrize("raw", ["Weekly", "Yearly", "", None])
    def test_unknown(self, raw):
        with pytest.raises(UnknownFrequencyError):
            parse_frequency(raw)


def _row(**overrides) -> dict:
    row = {
        "id": str(uuid4()),
        "kind": "invoice",
        "client_name": "Acme Corp",
        "amount": "1500.00",
        "frequency": "Monthly",
        "start_date": "2024-01-01",
        "last_generated_date": "2024-01-01",
        "end_date": None,
    }
    row.update(overrides)
    return row


class TestTemplateFromMapping:
    """Raw rows -> typed templates."""

    def test_invoice_row(self):
        row = _row()

        template = template_from_mapping(row)

        assert isinstance(template, RecurringInvoiceTemplate)
        assert template.kind == TemplateKind.INVOICE
        assert template.amount == Decimal("1500.00")
        assert template.frequency == RecurrenceFrequency.MONTHLY
        assert template.end_date is None
        assert template.counterparty == "Acme Corp"

    def test_expense_row(self):
        row = _row(kind="expense", client_name=None, category="Rent", description="HQ")

        template = template_from_mapping(row)

        assert isinstance(template, RecurringExpenseTemplate)
        assert template.counterparty == "Rent"
        assert template.description == "HQ"

    def test_date_objects_accepted(self):
        template = template_from_mapping(_row(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31)))
        assert template.end_date == date(2024, 12, 31)

    def test_datetime_truncated_to_date(self):
        template = template_from_mapping(_row(last_generated_date=datetime(2024, 1, 1, 23, 59)))
        assert template.last_generated_date == date(2024, 1, 1)
        assert type(template.last_generated_date) is date

    @pytest.mark.parametrize("value", [42, 1.5, ["2024-01-01"]])
    def test_non_date_value_rejected(self, value):
        with pytest.raises(TemplateParseError) as exc_info:
            template_from_mapping(_row(start_date=value))
        assert exc_info.value.field == "start_date"

    @pytest.mark.parametrize("field,value", [
        ("id", "not-a-uuid"),
        ("kind", "timesheet"),
        ("amount", "abc"),
        ("amount", "-5"),
        ("amount", "0"),
        ("start_date", "01/01/2024"),
        ("end_date", "2023-12-31"),
        ("client_name", ""),
    ])
    def test_bad_field(self, field, value):
        with pytest.raises(TemplateParseError) as exc_info:
            template_from_mapping(_row(**{field: value}))
        assert exc_info.value.field == field

    def test_missing_amount(self):
        row = _row()
        del row["amount"]
        with pytest.raises(TemplateParseError) as exc_info:
            template_from_mapping(row)
        assert exc_info.value.field == "amount"

    def test_unknown_frequency(self):
        with pytest.raises(UnknownFrequencyError):
            template_from_mapping(_row(frequency="Biweekly"))


class TestTemplatePatch:
    """Explicit patch struct."""

    def test_amount_and_frequency(self, invoice_template_factory):
        template = invoice_template_factory()

        updated = apply_template_patch(template, TemplatePatch(
            amount=Decimal("2000.00"), frequency=RecurrenceFrequency.QUARTERLY,
        ))

        assert updated.amount == Decimal("2000.00")
        assert updated.frequency == RecurrenceFrequency.QUARTERLY
        assert updated.id == template.id
        assert updated.last_generated_date == template.last_generated_date

    def test_empty_patch_is_identity(self, invoice_template_factory):
        template = invoice_template_factory()
        assert apply_template_patch(template, TemplatePatch()) == template

    def test_set_and_clear_end_date(self, invoice_template_factory):
        template = invoice_template_factory()

        with_end = apply_template_patch(template, TemplatePatch(end_date=date(2024, 6, 30)))
        cleared = apply_template_patch(with_end, TemplatePatch(clear_end_date=True))

        assert with_end.end_date == date(2024, 6, 30)
        assert cleared.end_date is None

    def test_set_and_clear_together_rejected(self, invoice_template_factory):
        with pytest.raises(InvalidPatchError):
            apply_template_patch(
                invoice_template_factory(),
                TemplatePatch(end_date=date(2024, 6, 30), clear_end_date=True),
            )

    def test_foreign_field_rejected(self, invoice_template_factory):
        with pytest.raises(InvalidPatchError) as exc_info:
            apply_template_patch(invoice_template_factory(), TemplatePatch(category="Rent"))
        assert exc_info.value.field == "category"

    def test_expense_rejects_client_name(self, expense_template_factory):
        with pytest.raises(InvalidPatchError):
            apply_template_patch(expense_template_factory(), TemplatePatch(client_name="X"))

    def test_expense_description(self, expense_template_factory):
        updated = apply_template_patch(
            expense_template_factory(), TemplatePatch(description="Warehouse rent"),
        )
        assert updated.description == "Warehouse rent"

    def test_non_positive_amount_rejected(self, invoice_template_factory):
        with pytest.raises(InvalidPatchError):
            apply_template_patch(invoice_template_factory(), TemplatePatch(amount=Decimal("0")))

    def test_end_before_start_rejected(self, invoice_template_factory):
        with pytest.raises(InvalidPatchError):
            apply_template_patch(
                invoice_template_factory(start_date=date(2024, 1, 1)),
                TemplatePatch(end_date=date(2023, 12, 31)),
            )


class TestNormalizeTemplateDates:
    """Typed templates carrying datetimes or foreign values."""

    def test_plain_dates_returned_unchanged(self, invoice_template_factory):
        template = invoice_template_factory()
        assert normalize_template_dates(template) is template

    def test_datetimes_truncated(self, expense_template_factory):
        template = expense_template_factory(
            last_generated_date=datetime(2024, 1, 1, 8, 15),
            end_date=datetime(2024, 12, 31, 18, 0),
        )

        normalized = normalize_template_dates(template)

        assert normalized.last_generated_date == date(2024, 1, 1)
        assert normalized.end_date == date(2024, 12, 31)
        assert type(normalized.end_date) is date

    def test_non_date_rejected(self, invoice_template_factory):
        template = invoice_template_factory(last_generated_date="yesterday")

        with pytest.raises(TemplateParseError) as exc_info:
            normalize_template_dates(template)
        assert exc_info.value.field == "last_generated_date"

    def test_end_before_start_rejected(self, invoice_template_factory):
        template = invoice_template_factory(end_date=date(2023, 6, 30))

        with pytest.raises(TemplateParseError):
            normalize_template_dates(template)
