"""Load WatchConfig from vashwatch.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from vashwatch._errors import ConfigError
from vashwatch.config import WatchConfig

_KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "vash_src", "model_src", "models_dest", "cache_dest", "debug_mode",
        "dir_types", "page_template_path", "page_dir_type",
        "combine_models_task", "precompile_task", "page_render_task",
        "debounce_ms", "task_runner",
    }
)


def load_config(root: Path, **overrides: object) -> WatchConfig:
    """Load WatchConfig from root, optionally merging vashwatch.yaml.

    Looks for vashwatch.yaml, vashwatch.yml, or vashwatch.toml in root. If
    found, loads and merges with overrides. Overrides that are ``None`` are
    ignored so unset CLI flags don't mask file values.
    """
    file_config = _read_config_file(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown option(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return WatchConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("vashwatch.yaml", "vashwatch.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "vashwatch.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. A malformed file is a ConfigError."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Could not parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        return {}
    return _flatten_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. A malformed file is a ConfigError."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Could not parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data)


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract vashwatch.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("vashwatch")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "vashwatch" and k in _KNOWN_KEYS:
            result[k] = v
    return result
