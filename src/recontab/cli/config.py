"""Loading of named settings profiles from ``recontab.toml`` files."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

import structlog

from recontab.errors import ConfigError
from recontab.reconcile.settings import canonical_settings

log = structlog.get_logger(__name__)

CONFIG_FILENAME = "recontab.toml"
DEFAULT_PROFILE = "default"
PROFILE_ENV = "RECONTAB_PROFILE"
PROJECT_ROOT_ENV = "RECONTAB_PROJECT_ROOT"

# Profile keys that describe the reconciliation itself; anything else in a
# profile (delimiter, encoding, ...) is a CLI default.
RECONCILE_KEYS = ("left", "right", "amount_tolerance", "amountTolerance")


@dataclass(frozen=True)
class ProfileContext:
    """A selected profile and the files it was merged from."""

    name: str
    data: Mapping[str, Any]
    sources: tuple[Path, ...]

    def reconcile_settings(self) -> Dict[str, Any]:
        """Return the reconciliation part of the profile with field-name keys."""

        return canonical_settings(
            {key: self.data[key] for key in RECONCILE_KEYS if key in self.data}
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


def config_paths(
    *, workspace: Path | None = None, project_root: Path | None = None
) -> List[Path]:
    """Return the existing ``recontab.toml`` files, lowest precedence first.

    The user file lives in ``$XDG_CONFIG_HOME/recontab`` (``~/.config`` when
    unset).  The project root defaults to ``$RECONTAB_PROJECT_ROOT`` and then
    the working directory.  The workspace is whatever directory the caller
    names; the CLI passes the directory of the left dataset.
    """

    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    if project_root is None:
        project_root = Path(os.environ.get(PROJECT_ROOT_ENV) or Path.cwd())

    candidates = [Path(config_home) / "recontab", project_root]
    if workspace is not None:
        candidates.append(workspace)
    # A workspace may coincide with the project root.
    unique = dict.fromkeys(directory / CONFIG_FILENAME for directory in candidates)
    return [path for path in unique if path.is_file()]


def _read_document(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:  # pragma: no cover
        raise ConfigError(f"Unable to read configuration file '{path}': {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file '{path}' is not valid TOML: {exc}") from exc


def load_profile(
    *,
    profile: str | None = None,
    workspace: Path | None = None,
    project_root: Path | None = None,
) -> ProfileContext:
    """Merge every ``recontab.toml`` and select one of its ``profiles``.

    The profile is *profile*, else ``$RECONTAB_PROFILE``, else the merged
    ``default_profile``, else ``"default"``.  A missing ``"default"`` profile
    is empty; any other missing profile is a :class:`ConfigError`.
    """

    sources = config_paths(workspace=workspace, project_root=project_root)
    merged: Dict[str, Any] = {}
    for path in sources:
        merged = deep_merge(merged, _read_document(path))

    profiles = merged.get("profiles", {})
    if not isinstance(profiles, Mapping):
        raise ConfigError("The 'profiles' table must contain mappings of settings")

    default_profile = merged.get("default_profile")
    if not isinstance(default_profile, str):
        default_profile = None
    name = profile or os.environ.get(PROFILE_ENV) or default_profile or DEFAULT_PROFILE

    data = profiles.get(name)
    if data is None:
        if name != DEFAULT_PROFILE:
            available = ", ".join(sorted(str(key) for key in profiles)) or "<none>"
            raise ConfigError(
                f"Profile '{name}' was not found. Available profiles: {available}."
            )
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Profile '{name}' must be a table of settings")

    log.debug("config.profile.loaded", profile=name, sources=[str(p) for p in sources])
    return ProfileContext(name=name, data=dict(data), sources=tuple(sources))


def deep_merge(base: Mapping[str, Any], new: Mapping[str, Any]) -> Dict[str, Any]:
    """Return *base* updated with *new*, merging nested mappings."""

    merged = dict(base)
    for key, value in new.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


__all__ = [
    "CONFIG_FILENAME",
    "ProfileContext",
    "config_paths",
    "deep_merge",
    "load_profile",
]
