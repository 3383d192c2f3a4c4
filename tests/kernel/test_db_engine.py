"""Tests for office_kernel.db.engine session management."""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest
from sqlalchemy import select

from office_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from office_modules.billing.orm import RecurringTemplateModel
from office_modules.billing.config import BillingConfig
from office_modules.leave.config import LeavePolicy


@pytest.fixture
def sqlite_engine():
    engine = init_engine_from_url("sqlite:///:memory:")
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


def _template_row(actor_id) -> RecurringTemplateModel:
    return RecurringTemplateModel(
        kind="invoice",
        client_name="Acme Corp",
        amount=Decimal("10.00"),
        frequency="Monthly",
        start_date=date(2024, 1, 1),
        last_generated_date=date(2024, 1, 1),
        created_by_id=actor_id,
    )


class TestEngineLifecycle:
    """init / get / reset."""

    def test_uninitialized_raises(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session_factory()

    def test_init_returns_engine(self, sqlite_engine):
        assert get_engine() is sqlite_engine
        assert sqlite_engine.dialect.name == "sqlite"


class TestSessionScope:
    """Commit on success, rollback on exception."""

    def test_commits(self, sqlite_engine, actor_id):
        with session_scope() as session:
            session.add(_template_row(actor_id))

        with session_scope() as session:
            assert len(session.scalars(select(RecurringTemplateModel)).all()) == 1

    def test_rolls_back_and_reraises(self, sqlite_engine, actor_id):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(_template_row(actor_id))
                session.flush()
                raise RuntimeError("boom")

        with session_scope() as session:
            assert session.scalars(select(RecurringTemplateModel)).all() == []

    def test_savepoint_rollback_keeps_outer_work(self, sqlite_engine, actor_id):
        with session_scope() as session:
            session.add(_template_row(actor_id))
            savepoint = session.begin_nested()
            session.add(_template_row(actor_id))
            session.flush()
            savepoint.rollback()

        with session_scope() as session:
            assert len(session.scalars(select(RecurringTemplateModel)).all()) == 1


class TestBaseColumns:
    """UUID keys and audit columns."""

    def test_uuid_and_audit_defaults(self, sqlite_engine, actor_id):
        with session_scope() as session:
            row = _template_row(actor_id)
            session.add(row)
            session.flush()
            row_id = row.id

        with session_scope() as session:
            stored = session.get(RecurringTemplateModel, row_id)
            assert isinstance(stored.id, UUID)
            assert stored.created_by_id == actor_id
            assert stored.updated_by_id is None
            assert stored.created_at is not None
            assert stored.amount == Decimal("10.00")


class TestModuleConfigFromDict:
    """Module configs built from settings mappings."""

    def test_billing(self):
        assert BillingConfig.from_dict({"reminder_days": 7}).reminder_days == 7

    def test_leave(self):
        policy = LeavePolicy.from_dict({"min_notice_days": 20, "max_reason_length": 250})
        assert policy == LeavePolicy(min_notice_days=20, max_reason_length=250)

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            LeavePolicy.from_dict({"min_notice": 20})

    @pytest.mark.parametrize("kwargs", [{"reminder_days": -1}, {"invoice_number_prefix": " "}])
    def test_billing_invalid(self, kwargs):
        with pytest.raises(ValueError):
            BillingConfig(**kwargs)
