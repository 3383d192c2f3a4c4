"""
Idempotency key generation utilities.

A recurring template may produce at most one instance per period.  The
generation key ``recurring:<template_id>:<period_due_date>`` names that
(template, period) pair; it is stored with a unique constraint so a
crash-and-retry of the daily job cannot double-generate an instance.
"""

from datetime import date
from uuid import NAMESPACE_URL, UUID, uuid5

_PREFIX = "recurring"

# Fixed namespace so instance ids are reproducible across processes.
_GENERATION_NAMESPACE = uuid5(NAMESPACE_URL, "office-core:recurring-generation")


def generation_key(template_id: UUID | str, period_due_date: date) -> str:
    """
    Generate the idempotency key for one generated instance.

    Format: recurring:template_id:period_due_date

    Args:
        template_id: Identifier of the source template.
        period_due_date: Due date of the period being generated.

    Returns:
        Idempotency key string.

    Example:
        >>> generation_key(uuid, date(2024, 2, 1))
        "recurring:550e8400-e29b-41d4-a716-446655440000:2024-02-01"
    """
    return f"{_PREFIX}:{template_id}:{period_due_date.isoformat()}"


def generation_uuid(template_id: UUID | str, period_due_date: date) -> UUID:
    """Deterministic instance id for a (template, period) pair."""
    return uuid5(_GENERATION_NAMESPACE, generation_key(template_id, period_due_date))


def parse_generation_key(key: str) -> tuple[str, date]:
    """
    Parse a generation key into its components.

    Returns:
        Tuple of (template_id, period_due_date).

    Raises:
        ValueError: If key format is invalid.
    """
    parts = key.split(":", 2)
    if len(parts) != 3 or parts[0] != _PREFIX:
        raise ValueError(f"Invalid generation key format: {key}")
    return parts[1], date.fromisoformat(parts[2])
