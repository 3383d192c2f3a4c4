"""
Office Modules.

Thin orchestration layers over the office kernel and engines.
Each module contains:
- Domain models (the nouns)
- Workflows (state machines)
- Configuration schemas (policy and settings)
- ORM models and a service that owns the transaction boundary

Modules:
- Billing: recurring invoice / expense templates, instances, reminders
- Leave: leave requests, HR notice policy, approvals

Actual processing logic lives in the engines.
"""

from office_modules import billing, leave

__all__ = ["billing", "leave"]
