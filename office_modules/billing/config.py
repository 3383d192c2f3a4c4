"""
Billing Configuration Schema.

Defines the structure and defaults for the recurring-obligation and
reminder settings.  Actual values are loaded from tenant settings.
"""

from dataclasses import dataclass
from typing import Self

from office_kernel.logging_config import get_logger

logger = get_logger("modules.billing.config")


@dataclass(frozen=True)
class BillingConfig:
    """
    Configuration schema for the billing module.

        config = BillingConfig(reminder_days=7)
    """

    # Days before a due date during which a reminder is shown
    reminder_days: int = 3

    # Prefix of generated invoice numbers
    invoice_number_prefix: str = "INV"

    def __post_init__(self):
        if self.reminder_days < 0:
            raise ValueError("reminder_days cannot be negative")
        if not self.invoice_number_prefix or not self.invoice_number_prefix.strip():
            raise ValueError("invoice_number_prefix cannot be empty")

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g., loaded from settings)."""
        logger.info(
            "billing_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
