"""
Runner settings derived from configuration.

The runner never reads global state: everything it needs (directories,
ledger table, connection parameters) is carried by a MigrateSettings
instance built here and passed in explicitly.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from trackas_migrate.config.loader import Config
from trackas_migrate.config.resolver import is_unresolved
from trackas_migrate.exceptions import ConfigurationError

# Plain or schema-qualified SQL identifier: "migrations" or "ops.migrations"
_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


@dataclass
class MigrateSettings:
    """Everything one runner invocation needs, resolved to concrete values."""

    project_dir: Path
    migrations_dir: Path
    seeds_dir: Path
    extension: str = ".sql"
    table: str = "migrations"
    transactional: bool = True
    connection: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not _TABLE_NAME_RE.match(self.table):
            raise ConfigurationError(
                f"Invalid ledger table name '{self.table}': "
                f"must be an identifier, optionally schema-qualified (e.g. 'ops.migrations')"
            )
        if not self.extension:
            raise ConfigurationError("Migration file extension must not be empty")
        if not self.extension.startswith("."):
            self.extension = f".{self.extension}"

    @classmethod
    def from_config(
        cls,
        config: Config,
        project_dir: Path,
        database_url: str | None = None,
    ) -> "MigrateSettings":
        """
        Build settings from a loaded Config.

        Args:
            config: Loaded configuration
            project_dir: Directory relative paths resolve against
            database_url: Optional URL overriding the ``connection`` section

        Returns:
            MigrateSettings instance

        Raises:
            ConfigurationError: If a value is invalid or no database is configured
        """
        migrations = config.get("migrations", {}) or {}
        seeds = config.get("seeds", {}) or {}

        return cls(
            project_dir=project_dir,
            migrations_dir=_resolve_dir(project_dir, migrations.get("directory", "migrations")),
            seeds_dir=_resolve_dir(project_dir, seeds.get("directory", "seeds")),
            extension=str(migrations.get("extension", ".sql")),
            table=str(migrations.get("table", "migrations")),
            transactional=_as_bool(migrations.get("transactional", True), "migrations.transactional"),
            connection=_connection_config(config.get("connection", {}) or {}, database_url, project_dir),
        )


def _resolve_dir(project_dir: Path, value: Any) -> Path:
    path = Path(str(value))
    if not path.is_absolute():
        path = project_dir / path
    return path


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigurationError(f"Configuration '{key}' must be a boolean, got {value!r}")


def _connection_config(
    connection: dict[str, Any],
    database_url: str | None,
    project_dir: Path,
) -> dict[str, Any]:
    """
    Pick the connection parameters.

    Precedence: explicit ``database_url`` argument, then the ``connection``
    section, then the ``DATABASE_URL`` environment variable. A relative
    DuckDB ``path`` in the section is taken from the project directory.
    """
    if database_url:
        return {"url": database_url}

    resolved = {k: v for k, v in connection.items() if not is_unresolved(v)}
    if resolved.get("type") or resolved.get("url"):
        path = resolved.get("path")
        if resolved.get("type") == "duckdb" and path and path != ":memory:":
            resolved["path"] = str(_resolve_dir(project_dir, path))
        return resolved

    env_url = os.environ.get("DATABASE_URL")
    if env_url:
        return {"url": env_url}

    raise ConfigurationError(
        "No database configured.\n"
        "  Suggestion: Set DATABASE_URL, pass --database-url, or add a 'connection' section to config.yaml"
    )
