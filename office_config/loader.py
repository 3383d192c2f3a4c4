"""
Configuration Loader (``office_config.loader``).

Responsibility
--------------
Loads a tenant YAML fragment and parses it into ``TenantSettings``.
Services do not call this directly; the runtime entry point is
``office_config.get_active_settings()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Out-of-range values  -> ``ValueError`` from the module configs.
* Unknown keys  -> ``ValueError``; typos never fall back to defaults.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from office_config.schema import TenantSettings

_SECTIONS = {
    "billing": ("reminder_days", "invoice_number_prefix"),
    "leave": ("min_notice_days", "max_reason_length"),
}
_TOP_LEVEL = ("tenant", "version", *_SECTIONS)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_settings(data: dict[str, Any], tenant: str | None = None) -> TenantSettings:
    """
    Parse a settings fragment.

    Args:
        data: Parsed YAML mapping.
        tenant: Tenant name to record when the fragment does not name one.

    Raises:
        ValueError: unknown keys or invalid values.
    """
    unknown = set(data) - set(_TOP_LEVEL)
    if unknown:
        raise ValueError(f"Unknown settings keys: {sorted(unknown)}")

    values: dict[str, Any] = {}
    for section, keys in _SECTIONS.items():
        section_data = data.get(section) or {}
        unknown = set(section_data) - set(keys)
        if unknown:
            raise ValueError(f"Unknown keys in '{section}': {sorted(unknown)}")
        values.update(section_data)

    return TenantSettings(
        tenant=data.get("tenant") or tenant or "default",
        version=int(data.get("version", 1)),
        checksum=compute_checksum(data),
        **values,
    )


def load_settings_file(path: Path) -> TenantSettings:
    """Load and parse one ``<tenant>.yaml`` fragment."""
    return parse_settings(load_yaml_file(path), tenant=path.stem)
