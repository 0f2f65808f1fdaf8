"""
Migration system for schema changes.

Applies SQL migrations from the migrations directory exactly once each,
tracking them in a ledger table, and runs idempotent seed scripts.
"""

from trackas_migrate.migrations.discovery import MigrationFile, get_migration_files
from trackas_migrate.migrations.ledger import Ledger
from trackas_migrate.migrations.runner import MigrationRunner, MigrationStatus, RunResult
from trackas_migrate.migrations.seeds import SeedResult, run_seeds

__all__ = [
    "MigrationRunner",
    "RunResult",
    "MigrationStatus",
    "MigrationFile",
    "get_migration_files",
    "Ledger",
    "run_seeds",
    "SeedResult",
]
