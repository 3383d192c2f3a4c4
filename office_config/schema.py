"""
Configuration Schema (``office_config.schema``).

Responsibility
--------------
Frozen dataclass for the parsed tenant settings.  Module configs
(``BillingConfig``, ``LeavePolicy``) are derived from it so the values
are validated in exactly one place per module.

Architecture position
---------------------
**Config layer** -- pure data definitions, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from office_modules.billing.config import BillingConfig
from office_modules.leave.config import LeavePolicy


@dataclass(frozen=True)
class TenantSettings:
    """Runtime settings for one tenant.

    ``checksum`` is the SHA-256 of the canonical JSON of the source
    fragment, so two loads of the same file compare equal.
    """

    tenant: str
    version: int = 1
    reminder_days: int = 3
    invoice_number_prefix: str = "INV"
    min_notice_days: int = 15
    max_reason_length: int = 500
    checksum: str = ""

    def __post_init__(self) -> None:
        if not self.tenant:
            raise ValueError("tenant cannot be empty")
        # Delegate range checks to the module configs.
        self.billing_config()
        self.leave_policy()

    def billing_config(self) -> BillingConfig:
        return BillingConfig(
            reminder_days=self.reminder_days,
            invoice_number_prefix=self.invoice_number_prefix,
        )

    def leave_policy(self) -> LeavePolicy:
        return LeavePolicy(
            min_notice_days=self.min_notice_days,
            max_reason_length=self.max_reason_length,
        )
