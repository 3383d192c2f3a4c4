"""
Module ORM Registry (``office_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before tables are
created.

Architecture position
---------------------
**Modules layer** -- utility.  Imports from sibling ``office_modules``
packages.  Called by ``office_kernel.db.engine.create_tables()`` and by
``tests/conftest.py``.
"""


def import_all_orm_models() -> None:
    """Import every ``office_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    import office_modules.billing.orm  # noqa: F401
    import office_modules.leave.orm  # noqa: F401
