"""
office_config -- single public entrypoint for tenant settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``.  Services receive the resulting
    ``TenantSettings`` (or the module configs derived from it) and never
    read YAML themselves.

Architecture position:
    Configuration -- sits above ``office_kernel`` and beside
    ``office_modules``.  Engines MUST NOT import from ``office_config``;
    they take plain values (``reminder_days``, ``LeavePolicy``).

Failure modes:
    - ``SettingsNotFoundError`` -- neither ``<tenant>.yaml`` nor
      ``default.yaml`` exists in the settings directory.
    - ``ValueError`` -- unknown keys or out-of-range values.

Audit relevance:
    Every successful ``get_active_settings()`` call emits an
    ``OFFICE_CONFIG_TRACE`` log entry with tenant, version and checksum.
"""

from __future__ import annotations

from pathlib import Path

from office_config.loader import load_settings_file
from office_config.schema import TenantSettings
from office_kernel.exceptions import SettingsNotFoundError
from office_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default settings directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

DEFAULT_TENANT = "default"


def get_active_settings(
    tenant: str = DEFAULT_TENANT,
    config_dir: Path | None = None,
) -> TenantSettings:
    """The ONLY public settings entrypoint.

    Looks for ``<tenant>.yaml`` and falls back to ``default.yaml``.

    Args:
        tenant: Tenant identifier.
        config_dir: Override path to the settings directory.
            Defaults to office_config/sets/.

    Returns:
        Frozen ``TenantSettings``.

    Raises:
        SettingsNotFoundError: If neither fragment exists.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR

    path = sets_dir / f"{tenant}.yaml"
    fell_back = False
    if not path.is_file():
        path = sets_dir / f"{DEFAULT_TENANT}.yaml"
        fell_back = True
        if not path.is_file():
            raise SettingsNotFoundError(tenant, str(sets_dir))

    settings = load_settings_file(path)

    _logger.info(
        "OFFICE_CONFIG_TRACE",
        extra={
            "trace_type": "OFFICE_CONFIG_TRACE",
            "requested_tenant": tenant,
            "settings_tenant": settings.tenant,
            "fell_back_to_default": fell_back,
            "settings_version": settings.version,
            "checksum": settings.checksum,
        },
    )
    return settings


__all__ = ["get_active_settings", "TenantSettings", "DEFAULT_TENANT"]
