"""
Placeholder substitution for loaded configuration.

Two placeholders are understood in any string value, at any depth:

- ``${NAME}``: the value of environment variable NAME. An unset variable
  leaves the placeholder as written, so settings can tell "not configured"
  apart from an empty value (see is_unresolved()).
- ``{env}``: the active environment name, e.g. ``data/{env}.duckdb``.
"""

import os
import re
from typing import Any

UNRESOLVED_RE = re.compile(r"\${([^}]+)}")


def resolve_config(config_data: dict[str, Any], env: str = "dev") -> dict[str, Any]:
    """Return a copy of ``config_data`` with ``${NAME}`` and ``{env}`` substituted."""
    return _substitute(config_data, env)


def is_unresolved(value: Any) -> bool:
    """True for a string that still holds a ``${NAME}`` placeholder after resolution."""
    return isinstance(value, str) and UNRESOLVED_RE.search(value) is not None


def _from_environment(match: re.Match) -> str:
    return os.environ.get(match.group(1), match.group(0))


def _substitute(value: Any, env: str) -> Any:
    if isinstance(value, str):
        return UNRESOLVED_RE.sub(_from_environment, value).replace("{env}", env)
    if isinstance(value, dict):
        return {key: _substitute(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute(item, env) for item in value]
    return value
