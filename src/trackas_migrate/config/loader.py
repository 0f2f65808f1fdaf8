"""
Configuration file loading.

Loads ``config.yaml`` (optional) and ``config.{env}.yaml`` on top of the
built-in defaults, then resolves environment placeholders.
"""

import copy
from pathlib import Path
from typing import Any

import yaml

from trackas_migrate.config.resolver import resolve_config
from trackas_migrate.exceptions import ConfigurationError

DEFAULTS: dict[str, Any] = {
    "connection": {},
    "migrations": {
        "directory": "migrations",
        "extension": ".sql",
        "table": "migrations",
        "transactional": True,
    },
    "seeds": {"directory": "seeds"},
    "logging": {
        "level": "INFO",
        "file_enabled": False,
        "console_type": "rich",
    },
}

SECTIONS = ("connection", "migrations", "seeds", "logging")


class Config:
    """Merged, resolved configuration with dot-notation lookups."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def validate(self) -> None:
        """Validate configuration structure."""
        errors = []

        if not isinstance(self.data, dict):
            errors.append(f"Configuration must be a dictionary/mapping, got {type(self.data).__name__}")
            raise ConfigurationError("\n".join(errors))

        for section in SECTIONS:
            value = self.data.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Configuration '{section}' must be a dictionary, got {type(value).__name__}")

        if errors:
            raise ConfigurationError("\n".join(errors))


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load configuration for a migrations project.

    ``config.yaml`` is optional: without it the defaults apply and the
    database comes from ``DATABASE_URL``. ``config.{env}.yaml`` is merged
    on top when present.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Validated Config instance with merged configuration

    Raises:
        ConfigurationError: If a config file cannot be read or parsed
    """
    if project_path is None:
        project_path = Path.cwd()

    config_data = copy.deepcopy(DEFAULTS)

    base_config_path = project_path / "config.yaml"
    if base_config_path.exists():
        _merge_dict(config_data, _read_yaml(base_config_path))

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.exists():
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = resolve_config(config_data, env or "dev")

    config = Config(config_data)
    config.validate()
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse one YAML config file into a mapping."""
    if not path.is_file():
        raise ConfigurationError(f"Configuration path is not a file: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        error_msg = str(e)
        if hasattr(e, "problem_mark"):
            mark = e.problem_mark
            raise ConfigurationError(
                f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                f"  {error_msg}\n"
                f"  File: {path}\n"
                f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes"
            ) from e
        raise ConfigurationError(f"Error parsing {path.name}: {error_msg}\n  File: {path}") from e
    except PermissionError as e:
        raise ConfigurationError(
            f"Permission denied reading {path.name}: {path}\n"
            f"  Error: {e}\n"
            f"  Suggestion: Check file permissions"
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping, got {type(data).__name__}")
    return data


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
