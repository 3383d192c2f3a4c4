"""Utility modules for the office kernel."""

from office_kernel.utils.idempotency import (
    generation_key,
    generation_uuid,
    parse_generation_key,
)

__all__ = [
    "generation_key",
    "generation_uuid",
    "parse_generation_key",
]
