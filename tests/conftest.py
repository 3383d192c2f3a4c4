"""
Pytest fixtures for the office core test suite.

Provides:
- In-memory SQLite engine and sessions with every module table created
- Deterministic clock
- Structured log capture
- Small builders for templates, invoices and expenses
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from office_kernel.db.base import Base
from office_kernel.db.engine import enable_sqlite_savepoints
from office_kernel.domain.clock import DeterministicClock
from office_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from office_modules._orm_registry import import_all_orm_models
from office_modules.billing.models import (
    Expense,
    ExpenseStatus,
    Invoice,
    InvoiceStatus,
    RecurrenceFrequency,
    RecurringExpenseTemplate,
    RecurringInvoiceTemplate,
)


# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture office_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            run_scheduler(templates, today=today)
            logs = captured_logs()
            assert any(r["message"] == "recurrence_run_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("office_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    eng = create_engine("sqlite:///:memory:")
    enable_sqlite_savepoints(eng)
    import_all_orm_models()
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def actor_id() -> UUID:
    return TEST_ACTOR_ID


# =============================================================================
# Builders
# =============================================================================


def make_invoice_template(**overrides) -> RecurringInvoiceTemplate:
    values = dict(
        id=uuid4(),
        client_name="Acme Corp",
        amount=Decimal("1500.00"),
        frequency=RecurrenceFrequency.MONTHLY,
        start_date=date(2024, 1, 1),
        last_generated_date=date(2024, 1, 1),
        end_date=None,
    )
    values.update(overrides)
    return RecurringInvoiceTemplate(**values)


def make_expense_template(**overrides) -> RecurringExpenseTemplate:
    values = dict(
        id=uuid4(),
        category="Rent",
        description="Office rent",
        amount=Decimal("2400.00"),
        frequency=RecurrenceFrequency.MONTHLY,
        start_date=date(2024, 1, 1),
        last_generated_date=date(2024, 1, 1),
        end_date=None,
    )
    values.update(overrides)
    return RecurringExpenseTemplate(**values)


def make_invoice(**overrides) -> Invoice:
    values = dict(
        id=uuid4(),
        invoice_number="INV-0001",
        client_name="Acme Corp",
        amount=Decimal("500.00"),
        due_date=date(2024, 3, 4),
        status=InvoiceStatus.SENT,
    )
    values.update(overrides)
    return Invoice(**values)


def make_expense(**overrides) -> Expense:
    values = dict(
        id=uuid4(),
        category="Utilities",
        description="Electricity",
        amount=Decimal("120.00"),
        date=date(2024, 2, 1),
        status=ExpenseStatus.UNPAID,
        due_date=date(2024, 3, 4),
    )
    values.update(overrides)
    return Expense(**values)


@pytest.fixture
def invoice_template_factory():
    return make_invoice_template


@pytest.fixture
def expense_template_factory():
    return make_expense_template


@pytest.fixture
def invoice_factory():
    return make_invoice


@pytest.fixture
def expense_factory():
    return make_expense
