"""Load and merge configuration from .scanview.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from scanview.config.schema import (
    OUTPUT_FORMATS,
    FiltersConfig,
    OutputConfig,
    ResultsConfig,
    ScanViewConfig,
    StateConfig,
    WorkspaceConfig,
)
from scanview.tree.grouping import GroupDimension

CONFIG_FILE = ".scanview.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILE
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _is_dimension(value: str) -> bool:
    try:
        GroupDimension.parse_selectable(value)
    except ValueError:
        return False
    return True


def _validate(cfg: ScanViewConfig) -> None:
    if not _is_dimension(cfg.filters.group_by):
        raise ConfigError(f"Invalid filters.group_by: {cfg.filters.group_by!r}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output.format: {cfg.output.format!r}")


def _merge_env_overrides(cfg: ScanViewConfig) -> None:
    """Apply SCANVIEW_* environment variable overrides."""
    if val := os.environ.get("SCANVIEW_RESULTS_PATH"):
        cfg.results.path = val
    if val := os.environ.get("SCANVIEW_WORKSPACE_ROOT"):
        cfg.workspace.root = val
    if val := os.environ.get("SCANVIEW_GROUP_BY"):
        if _is_dimension(val):
            cfg.filters.group_by = val
    if val := os.environ.get("SCANVIEW_SEVERITIES"):
        levels = {s.strip().lower() for s in val.split(",") if s.strip()}
        cfg.filters.high = "high" in levels
        cfg.filters.medium = "medium" in levels
        cfg.filters.low = "low" in levels
        cfg.filters.info = "info" in levels
    if val := os.environ.get("SCANVIEW_STATE_FILE"):
        cfg.state.file = val


def load_config(root: Path, config_override: Optional[str] = None) -> ScanViewConfig:
    """Load, validate, and return a ScanViewConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = ScanViewConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = ScanViewConfig(
                version=raw.get("version", "1.0"),
                results=_build_section(raw, ResultsConfig, "results"),
                workspace=_build_section(raw, WorkspaceConfig, "workspace"),
                filters=_build_section(raw, FiltersConfig, "filters"),
                state=_build_section(raw, StateConfig, "state"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except (AttributeError, TypeError) as exc:
            raise ConfigError(f"Invalid section in {config_path}: {exc}") from exc
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
