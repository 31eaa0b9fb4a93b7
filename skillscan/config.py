"""Load scanner settings from an optional YAML file."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml

from .engine import DEFAULT_MAX_FILE_SIZE_BYTES
from .severity import Severity
from .utils import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS, read_yaml_file

CONFIG_FILENAME = ".skillscan.yaml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ScanConfig:
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude_dirs: FrozenSet[str] = DEFAULT_EXCLUDE_DIRS
    fail_on: Severity = Severity.CRITICAL
    disabled_rules: Tuple[str, ...] = ()
    workers: int = 1
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES

    def with_overrides(self, **overrides: Any) -> "ScanConfig":
        """Return a copy where every non-``None`` override replaces the file value."""

        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def load_config(path: str | Path) -> ScanConfig:
    config_path = Path(path)
    try:
        raw = read_yaml_file(config_path)
    except (yaml.YAMLError, OSError) as exc:
        raise ConfigError(f"Cannot parse config {config_path}: {exc}") from exc

    if raw is None:
        return ScanConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    return parse_config(raw, source=str(config_path))


def parse_config(raw: Dict[str, Any], source: str = "<config>") -> ScanConfig:
    known = set(ScanConfig.__dataclass_fields__)
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    if "extensions" in raw:
        values["extensions"] = tuple(_normalise_extension(item) for item in _ensure_string_list(raw, "extensions", source))
    if "exclude_dirs" in raw:
        values["exclude_dirs"] = frozenset(_ensure_string_list(raw, "exclude_dirs", source))
    if "disabled_rules" in raw:
        values["disabled_rules"] = tuple(item.upper() for item in _ensure_string_list(raw, "disabled_rules", source))
    if "fail_on" in raw:
        try:
            values["fail_on"] = Severity.parse(raw["fail_on"])
        except ValueError as exc:
            raise ConfigError(f"{source}: fail_on: {exc}") from exc
    for key in ("workers", "max_file_size_bytes"):
        if key in raw:
            values[key] = _ensure_positive_int(raw, key, source)
    return ScanConfig(**values)


def default_config_path(scan_root: str | Path) -> Optional[Path]:
    candidate = Path(scan_root) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _ensure_string_list(raw: Dict[str, Any], key: str, source: str) -> list[str]:
    value = raw[key]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source}: '{key}' must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _ensure_positive_int(raw: Dict[str, Any], key: str, source: str) -> int:
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{source}: '{key}' must be a positive integer")
    return value
