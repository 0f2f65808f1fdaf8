"""
trackas-migrate - sequential, idempotent SQL migrations for the TrackAS
logistics database.
"""

__version__ = "0.1.0"

from trackas_migrate.config import Config, MigrateSettings, load_config
from trackas_migrate.connections import create_connection
from trackas_migrate.exceptions import (
    ConfigurationError,
    ConnectionLockError,
    DatabaseConnectionError,
    DiscoveryError,
    LedgerError,
    LedgerWriteError,
    MigrateError,
    MigrationExecutionError,
    SeedError,
)
from trackas_migrate.migrations import MigrationRunner, MigrationStatus, RunResult, SeedResult, run_seeds
from trackas_migrate.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Runner
    "MigrationRunner",
    "RunResult",
    "MigrationStatus",
    "run_seeds",
    "SeedResult",
    # Config
    "Config",
    "MigrateSettings",
    "load_config",
    "create_connection",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "MigrateError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "ConnectionLockError",
    "DiscoveryError",
    "MigrationExecutionError",
    "LedgerError",
    "LedgerWriteError",
    "SeedError",
]
