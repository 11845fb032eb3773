"""dateline configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variable   DATELINE_PRIORITY  (comma separated, e.g. "git,filesystem")
  3. Per-project dateline.yaml
  4. Global ~/.dateline/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dateline.dates.models import (
    DEFAULT_PRIORITY,
    DateSource,
    normalize_priority,
    parse_priority_list,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".dateline"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "dateline.yaml"
_PRIORITY_ENV: str = "DATELINE_PRIORITY"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["dates"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class DatesCfg:
    """Date resolution configuration (dateline.yaml: dates:).

    Attributes:
        priority: Sources in precedence order; the first source that yields
            a value for a field wins.
    """

    priority: tuple[DateSource, ...] = DEFAULT_PRIORITY


@dataclass
class DatelineConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    dates: DatesCfg = field(default_factory=DatesCfg)
    # Where the effective priority came from: "default", a config path, or the env var.
    priority_origin: str = "default"


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def parse_priority(values: Any, where: str) -> tuple[DateSource, ...]:
    """Normalize a priority list or comma-separated string from *where*.

    Raises:
        ConfigError: naming *where* if an entry is not a known source.
    """
    try:
        if isinstance(values, str):
            return parse_priority_list(values)
        return normalize_priority(values)
    except ValueError as exc:
        raise ConfigError(f"Invalid priority in {where}: {exc}") from None


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}', ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return data


def _sets_priority(data: dict[str, Any]) -> bool:
    dates = data.get("dates")
    return isinstance(dates, dict) and "priority" in dates


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> DatelineConfig:
    """Build a *DatelineConfig* from a merged raw YAML dict."""
    cfg = DatelineConfig()

    if "dates" in data:
        d = data["dates"] or {}
        if not isinstance(d, dict):
            raise ConfigError("Config section 'dates' must be a mapping.")
        if "priority" in d:
            raw = d["priority"]
            if not isinstance(raw, list):
                raise ConfigError(
                    f"dates.priority must be a list, got {type(raw).__name__}.\n"
                    "  Example:  priority: [frontmatter, git, filesystem]"
                )
            cfg.dates = DatesCfg(priority=parse_priority(raw, "dates.priority"))

    return cfg


def _apply_env_overrides(cfg: DatelineConfig) -> DatelineConfig:
    """Apply DATELINE_* environment variable overrides (layer 2)."""
    if raw := os.environ.get(_PRIORITY_ENV):
        cfg.dates.priority = parse_priority(raw, f"${_PRIORITY_ENV}")
        cfg.priority_origin = f"${_PRIORITY_ENV}"
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> DatelineConfig:
    """Load and return a merged *DatelineConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *dateline.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *DatelineConfig* with env var overrides applied.

    Raises:
        ConfigError: If a config layer contains an unknown date source or a
            malformed priority list.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}
    origin = "default"

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)
        if _sets_priority(raw_global):
            origin = str(global_path)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)
        if _sets_priority(raw_project):
            origin = str(project_cfg_path)

    cfg = _cfg_from_dict(merged)
    cfg.priority_origin = origin

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    return cfg
