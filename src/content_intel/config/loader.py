"""
Settings loading.

Values come from three layers, later layers winning per key:
built-in defaults, an optional YAML file, then environment variables
named ``CONTENT_INTEL__<SECTION>__<KEY>``, e.g.
``CONTENT_INTEL__CLASSIFIER__SUBJECT_MIN_SCORE=3``.

Environment values are passed to pydantic as strings and coerced by the
field types, so ``"true"`` becomes a bool and ``"3"`` an int.
"""

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from content_intel.config.settings import Settings
from content_intel.core.exceptions import ConfigurationError


ENV_PREFIX = "CONTENT_INTEL"

_cached: Settings | None = None


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = dict(value) if isinstance(value, Mapping) else value


def _read_yaml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {e}",
            details={"path": str(path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got: {type(data).__name__}",
            details={"path": str(path)},
        )
    return data


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    marker = f"{ENV_PREFIX}__"

    for name, raw in environ.items():
        if not name.startswith(marker):
            continue
        *sections, field = name[len(marker):].lower().split("__")
        if not sections:
            # Settings has no top-level scalars
            continue
        node = layer
        for section in sections:
            node = node.setdefault(section, {})
        node[field] = raw

    return layer


def load_config(config_path: Path | str | None = None) -> Settings:
    """
    Build validated settings from defaults, a YAML file and the environment.

    Args:
        config_path: YAML file to read; None reads only the environment

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigurationError: If the file is not a YAML mapping
        pydantic.ValidationError: If a value fails validation
    """
    merged: dict[str, Any] = {}
    if config_path is not None:
        _merge_into(merged, _read_yaml(Path(config_path)))
    _merge_into(merged, _env_layer(os.environ))
    return Settings(**merged)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _cached

    if _cached is None:
        _cached = load_config(config_path)
    return _cached


def reset_settings() -> None:
    """Forget the process-wide settings."""
    global _cached
    _cached = None
