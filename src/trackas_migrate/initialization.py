"""
Startup initialization shared by the CLI commands.

Runs in order:
1. Config (with validation)
2. Logging
3. Runner settings
4. Connection (created, opened lazily by the command)
"""

import os
from pathlib import Path

from trackas_migrate.config.loader import Config, load_config
from trackas_migrate.config.settings import MigrateSettings
from trackas_migrate.connections import BaseConnection, create_connection
from trackas_migrate.utils.logging import setup_logging_from_config


class Initializer:
    """Builds everything a command needs from the project directory."""

    def __init__(
        self,
        project_dir: Path,
        env: str | None = None,
        database_url: str | None = None,
        verbose: bool = False,
    ):
        self.project_dir = Path(project_dir)
        self.env = env or os.environ.get("TRACKAS_ENV", "dev")
        self.database_url = database_url
        self.verbose = verbose

        self.config: Config | None = None
        self.settings: MigrateSettings | None = None

    def initialize_all(self) -> tuple[MigrateSettings, BaseConnection]:
        """
        Initialize all components in the correct order.

        Returns:
            Tuple of (settings, connection)

        Raises:
            ConfigurationError: If configuration is invalid or no database is configured
        """
        self.config = load_config(self.project_dir, env=self.env)

        if self.verbose:
            self.config.data.setdefault("logging", {})["level"] = "DEBUG"
        setup_logging_from_config(self.config.data, project_dir=self.project_dir)

        self.settings = MigrateSettings.from_config(self.config, self.project_dir, database_url=self.database_url)
        connection = create_connection(self.settings.connection)
        return self.settings, connection


def initialize(
    project_dir: Path,
    env: str | None = None,
    database_url: str | None = None,
    verbose: bool = False,
) -> tuple[MigrateSettings, BaseConnection]:
    """
    Initialize config, logging, settings and the database connection.

    Args:
        project_dir: Project directory (holds config.yaml and migrations/)
        env: Environment name (default: $TRACKAS_ENV or "dev")
        database_url: Optional URL overriding the configured connection
        verbose: Force DEBUG logging

    Returns:
        Tuple of (settings, connection)
    """
    return Initializer(project_dir, env=env, database_url=database_url, verbose=verbose).initialize_all()
