"""Loading of reconciliation settings from mappings and YAML/JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml
from pydantic import BaseModel, ValidationError

from recontab.errors import ConfigError
from recontab.reconcile.models import DatasetConfig, ReconcileConfig

log = structlog.get_logger(__name__)

SECTION = "reconcile"
SIDES = ("left", "right")


def _rename_aliases(data: Mapping[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    names = {
        info.alias: name for name, info in model.model_fields.items() if info.alias
    }
    renamed: dict[str, Any] = {}
    for key, value in data.items():
        name = names.get(key, key)
        if name != key and name in data:
            continue
        renamed[name] = value
    return renamed


def canonical_settings(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return *data* with camelCase aliases rewritten to field names.

    Layers are merged key by key, so every layer must spell a setting the
    same way.  When a mapping carries both spellings the field name wins.
    """

    settings = _rename_aliases(data, ReconcileConfig)
    for side in SIDES:
        if isinstance(settings.get(side), Mapping):
            settings[side] = _rename_aliases(settings[side], DatasetConfig)
    return settings


def build_reconcile_config(data: Mapping[str, Any] | ReconcileConfig) -> ReconcileConfig:
    """Validate *data* into a :class:`ReconcileConfig`.

    Both ``snake_case`` and ``camelCase`` keys are accepted
    (``key_columns``/``keyColumns``, ``amount_tolerance``/``amountTolerance``).
    """

    if isinstance(data, ReconcileConfig):
        return data
    if not isinstance(data, Mapping):
        raise ConfigError("reconciliation settings must be a mapping")
    try:
        return ReconcileConfig.model_validate(canonical_settings(data))
    except ValidationError as exc:
        log.error("reconcile.config_invalid", errors=exc.error_count())
        raise ConfigError(f"Invalid reconciliation settings: {exc}") from exc


def load_reconcile_settings(path: Path) -> dict[str, Any]:
    """Load the raw settings mapping from a YAML or JSON document.

    The settings may sit at the top level or under a ``reconcile`` key.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{path}': {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file '{path}' is not valid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration file '{path}' must contain a mapping")
    section = data.get(SECTION, data)
    if not isinstance(section, Mapping):
        raise ConfigError(f"The '{SECTION}' section in '{path}' must be a mapping")
    return canonical_settings(section)


def load_reconcile_config(path: Path) -> ReconcileConfig:
    """Load and validate reconciliation settings from *path*."""

    return build_reconcile_config(load_reconcile_settings(path))


__all__ = [
    "build_reconcile_config",
    "canonical_settings",
    "load_reconcile_config",
    "load_reconcile_settings",
]
