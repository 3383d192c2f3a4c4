"""
Property-based tests for the pure engines.

Boundaries fuzzed here:
- Date advancement: month-end clamping, never skips a month
- days_between: antisymmetry and agreement with date subtraction
- Recurrence: at most one instance per template per run, repeat runs
  on the same day generate nothing
- Notifications: window bounds, ascending order, mark_read idempotence
- Leave validation: notice boundary
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from office_engines.datemath import add_months, advance, days_between
from office_engines.leave_validation import InsufficientNotice, validate_leave_request
from office_engines.notifications import compute_notifications, mark_all_read, mark_read
from office_engines.recurrence import run_scheduler
from office_modules.billing.models import (
    Expense,
    ExpenseStatus,
    Invoice,
    InvoiceStatus,
    RecurrenceFrequency,
    RecurringInvoiceTemplate,
)
from office_modules.leave.models import LeaveRequestDraft

FUZZ_SETTINGS = settings(
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31))
frequencies = st.sampled_from(list(RecurrenceFrequency))


@composite
def invoice_templates(draw, today: date):
    last = draw(st.dates(min_value=today - timedelta(days=800), max_value=today))
    return RecurringInvoiceTemplate(
        id=uuid4(),
        client_name="Client",
        amount=Decimal("100.00"),
        frequency=draw(frequencies),
        start_date=last,
        last_generated_date=last,
        end_date=None,
    )


@composite
def invoices(draw, today: date):
    return Invoice(
        id=uuid4(),
        invoice_number=f"INV-{draw(st.integers(min_value=1, max_value=9999)):04d}",
        client_name="Client",
        amount=Decimal("50.00"),
        due_date=draw(st.dates(min_value=today - timedelta(days=30), max_value=today + timedelta(days=30))),
        status=draw(st.sampled_from(list(InvoiceStatus))),
    )


@composite
def expenses(draw, today: date):
    due = draw(st.one_of(
        st.none(),
        st.dates(min_value=today - timedelta(days=30), max_value=today + timedelta(days=30)),
    ))
    return Expense(
        id=uuid4(),
        category="Utilities",
        description="Bill",
        amount=Decimal("20.00"),
        date=today,
        status=ExpenseStatus.UNPAID,
        due_date=due,
    )


class TestDateAdvancementProperties:
    """advance() never overflows into the following month."""

    @FUZZ_SETTINGS
    @given(value=dates, frequency=frequencies)
    def test_lands_in_expected_month(self, value, frequency):
        months = {"Monthly": 1, "Quarterly": 3, "Annually": 12}[frequency.value]

        result = advance(value, frequency)

        month_index = value.month - 1 + months
        assert result.year == value.year + month_index // 12
        assert result.month == month_index % 12 + 1

    @FUZZ_SETTINGS
    @given(value=dates, months=st.integers(min_value=0, max_value=36))
    def test_day_clamped_to_month_length(self, value, months):
        result = add_months(value, months)

        last_day = calendar.monthrange(result.year, result.month)[1]
        assert result.day == min(value.day, last_day)

    @FUZZ_SETTINGS
    @given(value=dates, frequency=frequencies)
    def test_strictly_later(self, value, frequency):
        assert advance(value, frequency) > value


class TestDaysBetweenProperties:
    """Day-count arithmetic."""

    @FUZZ_SETTINGS
    @given(a=dates, b=dates)
    def test_antisymmetric(self, a, b):
        assert days_between(a, b) == -days_between(b, a)

    @FUZZ_SETTINGS
    @given(a=dates, b=dates)
    def test_matches_subtraction(self, a, b):
        assert days_between(a, b) == (b - a).days


class TestRecurrenceProperties:
    """Scheduler generation bounds."""

    @FUZZ_SETTINGS
    @given(data=st.data(), today=st.dates(min_value=date(2010, 1, 1), max_value=date(2090, 12, 31)))
    def test_at_most_one_instance_per_template(self, data, today):
        templates = data.draw(st.lists(invoice_templates(today), max_size=10))

        result = run_scheduler(templates, today=today)

        sources = [i.recurring_source_id for i in result.new_instances]
        assert len(sources) == len(set(sources))
        assert len(result.updated_templates) == len(result.new_instances)
        assert all(t.last_generated_date == today for t in result.updated_templates)

    @FUZZ_SETTINGS
    @given(data=st.data(), today=st.dates(min_value=date(2010, 1, 1), max_value=date(2090, 12, 31)))
    def test_second_run_same_day_generates_nothing(self, data, today):
        templates = data.draw(st.lists(invoice_templates(today), max_size=10))
        first = run_scheduler(templates, today=today)
        changed = {t.id: t for t in first.updated_templates}
        after = [changed.get(t.id, t) for t in templates]

        second = run_scheduler(after, today=today)

        assert second.generated_count == 0
        assert second.rejections == ()


class TestNotificationProperties:
    """Reminder window and ordering."""

    @FUZZ_SETTINGS
    @given(
        data=st.data(),
        today=st.dates(min_value=date(2010, 1, 1), max_value=date(2090, 12, 31)),
        reminder_days=st.integers(min_value=0, max_value=30),
    )
    def test_window_and_order(self, data, today, reminder_days):
        invs = data.draw(st.lists(invoices(today), max_size=8))
        exps = data.draw(st.lists(expenses(today), max_size=8))

        feed = compute_notifications(invs, exps, reminder_days=reminder_days, today=today)

        assert all(0 <= (n.date - today).days <= reminder_days for n in feed)
        assert [n.date for n in feed] == sorted(n.date for n in feed)
        paid = {i.id for i in invs if i.status == InvoiceStatus.PAID}
        assert not any(n.entity_id in paid for n in feed)

    @FUZZ_SETTINGS
    @given(data=st.data(), today=st.dates(min_value=date(2010, 1, 1), max_value=date(2090, 12, 31)))
    def test_mark_read_idempotent(self, data, today):
        invs = data.draw(st.lists(invoices(today), min_size=1, max_size=8))
        feed = compute_notifications(invs, [], reminder_days=30, today=today)
        if not feed:
            return
        target = data.draw(st.sampled_from(feed)).id

        once = mark_read(feed, target)

        assert mark_read(once, target) == once
        assert mark_all_read(mark_all_read(feed)) == mark_all_read(feed)


class TestLeaveNoticeProperties:
    """Notice boundary for non-urgent leave."""

    @FUZZ_SETTINGS
    @given(
        today=st.dates(min_value=date(2010, 1, 1), max_value=date(2090, 12, 31)),
        offset=st.integers(min_value=-30, max_value=60),
        length=st.integers(min_value=0, max_value=20),
    )
    def test_notice_rule(self, today, offset, length):
        start = today + timedelta(days=offset)
        draft = LeaveRequestDraft(start_date=start, end_date=start + timedelta(days=length), reason="Trip")

        result = validate_leave_request(draft, today=today)

        if offset >= 15:
            assert result.is_accepted
        else:
            assert result.errors == (InsufficientNotice(offset, 15),)
