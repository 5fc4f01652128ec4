"""YAML config loader with runtime get/set."""

import json
from pathlib import Path
from typing import Any

import yaml

from frostwatch.config.schema import AdvisoryConfig


def load_config(path: str | Path | None = None) -> AdvisoryConfig:
    """Load and validate config from a YAML file.

    With no path, returns the built-in defaults.
    """
    if path is None:
        return AdvisoryConfig()
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return AdvisoryConfig(**raw)


def get_config_value(config: AdvisoryConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'freeze.threshold_f'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: AdvisoryConfig, dotted_key: str, value: Any) -> AdvisoryConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new AdvisoryConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if not isinstance(target, dict) or part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    if not isinstance(target, dict) or parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AdvisoryConfig(**data)
