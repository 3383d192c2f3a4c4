"""
Pure domain layer.

Value objects with NO dependencies on ORM, database, or I/O.  The only
sanctioned source of current time is an injected ``Clock``.
"""

from office_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from office_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "Guard",
    "Transition",
    "Workflow",
]
