"""
Leave Policy Configuration Schema.

Defines the organizational rules a leave request is checked against.
Actual values come from tenant settings (``office_config``) at runtime.
"""

from dataclasses import dataclass
from typing import Self

from office_kernel.logging_config import get_logger

logger = get_logger("modules.leave.config")


@dataclass(frozen=True)
class LeavePolicy:
    """
    Leave policy parameters.

    Field defaults are the organization-wide HR rules:

        policy = LeavePolicy(min_notice_days=20)
    """

    # Minimum days between today and the start of a non-urgent leave
    min_notice_days: int = 15

    # Upper bound on reason / urgency reason length (characters)
    max_reason_length: int = 500

    def __post_init__(self):
        if self.min_notice_days < 0:
            raise ValueError("min_notice_days cannot be negative")
        if self.max_reason_length <= 0:
            raise ValueError("max_reason_length must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create policy from dictionary (e.g., loaded from settings)."""
        logger.info(
            "leave_policy_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
