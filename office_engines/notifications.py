"""
Due-Date Notification Engine (``office_engines.notifications``).

Responsibility
--------------
Scan open invoices and expenses and produce the reminder feed: one
notification per obligation whose due date falls within the reminder
window ``[today, today + reminder_days]``.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  The feed is a projection, recomputed wholesale on
every call; read state is owned by the caller and passed in as
``read_keys``.

Invariants enforced
-------------------
* Paid invoices are never reminded.
* Expenses without a due date never produce a notification.
* Output is sorted ascending by date; ties keep invoices before
  expenses and input order within each.
* Same inputs give an equal tuple.

Failure modes
-------------
* ``reminder_days < 0`` raises ``ValueError`` (programming error).
* ``mark_read`` raises ``NotificationNotFoundError`` for an unknown id.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Iterable
from uuid import UUID

from office_kernel.exceptions import NotificationNotFoundError
from office_kernel.logging_config import get_logger
from office_engines.datemath import days_between
from office_engines.tracer import traced_engine
from office_modules.billing.models import Expense, Invoice, InvoiceStatus

logger = get_logger("engines.notifications")

INVOICE_PREFIX = "inv"
EXPENSE_PREFIX = "exp"


class NotificationEntityType(str, Enum):
    """Which obligation a notification points at."""
    INVOICE = "invoice"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Notification:
    """A due-date reminder."""
    id: str
    message: str
    date: date
    entity_type: NotificationEntityType
    entity_id: UUID
    is_read: bool = False


def notification_id(entity_type: NotificationEntityType, entity_id: UUID) -> str:
    """Stable notification id, e.g. ``inv-<uuid>``."""
    prefix = INVOICE_PREFIX if entity_type == NotificationEntityType.INVOICE else EXPENSE_PREFIX
    return f"{prefix}-{entity_id}"


def parse_notification_id(value: str) -> tuple[NotificationEntityType, UUID]:
    """Inverse of ``notification_id``.

    Raises:
        NotificationNotFoundError: value is not ``inv-<uuid>`` / ``exp-<uuid>``.
    """
    prefix, _, raw_id = value.partition("-")
    try:
        entity_id = UUID(raw_id)
    except ValueError:
        raise NotificationNotFoundError(value) from None
    if prefix == INVOICE_PREFIX:
        return NotificationEntityType.INVOICE, entity_id
    if prefix == EXPENSE_PREFIX:
        return NotificationEntityType.EXPENSE, entity_id
    raise NotificationNotFoundError(value)


def _within_window(due_date: date, today: date, reminder_days: int) -> bool:
    diff = days_between(today, due_date)
    return 0 <= diff <= reminder_days


@traced_engine(
    "notifications", "1.0",
    fingerprint_fields=("reminder_days", "today", "read_keys"),
)
def compute_notifications(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
    reminder_days: int,
    today: date,
    read_keys: frozenset[str] = frozenset(),
) -> tuple[Notification, ...]:
    """Build the reminder feed for ``today``.

    Args:
        invoices: Invoice snapshot.
        expenses: Expense snapshot.
        reminder_days: Size of the look-ahead window in days.
        today: The reference date, supplied by the caller.
        read_keys: Notification ids the user has already read.

    Returns:
        Notifications sorted ascending by date.
    """
    if reminder_days < 0:
        raise ValueError(f"reminder_days must be >= 0, got {reminder_days}")

    feed: list[Notification] = []

    for invoice in invoices:
        if invoice.status == InvoiceStatus.PAID:
            continue
        if not _within_window(invoice.due_date, today, reminder_days):
            continue
        nid = notification_id(NotificationEntityType.INVOICE, invoice.id)
        feed.append(Notification(
            id=nid,
            message=f"Invoice {invoice.invoice_number} is due on {invoice.due_date.isoformat()}",
            date=invoice.due_date,
            entity_type=NotificationEntityType.INVOICE,
            entity_id=invoice.id,
            is_read=nid in read_keys,
        ))

    for expense in expenses:
        if expense.due_date is None:
            continue
        if not _within_window(expense.due_date, today, reminder_days):
            continue
        nid = notification_id(NotificationEntityType.EXPENSE, expense.id)
        feed.append(Notification(
            id=nid,
            message=f'Expense "{expense.description}" is due on {expense.due_date.isoformat()}',
            date=expense.due_date,
            entity_type=NotificationEntityType.EXPENSE,
            entity_id=expense.id,
            is_read=nid in read_keys,
        ))

    # Stable sort: invoices stay ahead of expenses on equal dates
    feed.sort(key=lambda n: n.date)

    logger.debug(
        "notifications_computed",
        extra={
            "today": today.isoformat(),
            "reminder_days": reminder_days,
            "count": len(feed),
        },
    )
    return tuple(feed)


def mark_read(
    notifications: tuple[Notification, ...], notification_id: str,
) -> tuple[Notification, ...]:
    """Return a copy of the feed with one notification marked read."""
    if not any(n.id == notification_id for n in notifications):
        raise NotificationNotFoundError(notification_id)
    return tuple(
        replace(n, is_read=True) if n.id == notification_id else n
        for n in notifications
    )


def mark_all_read(notifications: tuple[Notification, ...]) -> tuple[Notification, ...]:
    """Return a copy of the feed with every notification marked read."""
    return tuple(replace(n, is_read=True) for n in notifications)


def unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.is_read)
