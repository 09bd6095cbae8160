from __future__ import annotations

from pathlib import Path

import yaml

CONFIG_KEYS = {"scan", "scanner", "scannerversion", "workspace", "timestamp", "outfile"}


class ConfigLoadError(Exception):
    """Raised when a config file is missing or malformed."""


def load_config(config_path: Path) -> dict[str, str]:
    """Load option defaults from a YAML mapping.

    Values are returned as strings; null values are dropped.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigLoadError(f"config file not found: {config_path}") from None
    except OSError as e:
        raise ConfigLoadError(f"{config_path}: {e.strerror}") from None
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"{config_path}: invalid YAML: {e}") from None

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigLoadError(f"{config_path}: expected a YAML mapping at top level")

    errors = _validate_config(config)
    if errors:
        joined = "\n  ".join(errors)
        raise ConfigLoadError(f"{config_path}: config validation failed:\n  {joined}")

    return {key: str(value) for key, value in config.items() if value is not None}


def _validate_config(config: dict) -> list[str]:
    errors: list[str] = []
    for key, value in config.items():
        if key not in CONFIG_KEYS:
            errors.append(f"unknown key '{key}' (valid: {', '.join(sorted(CONFIG_KEYS))})")
        elif isinstance(value, (dict, list)):
            errors.append(f"{key}: expected a scalar, got {type(value).__name__}")
    return errors
