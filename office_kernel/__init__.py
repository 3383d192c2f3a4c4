"""
Office Kernel - shared infrastructure for the back-office core.

Provides the pieces every other package leans on:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- Injectable clock (no ambient time in engines)
- Workflow state machine value objects
- SQLAlchemy declarative base and session management
"""

__version__ = "0.1.0"
