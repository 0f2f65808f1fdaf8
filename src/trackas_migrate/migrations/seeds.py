"""
Seed data runner.

Seed scripts load demo/reference rows (users, a sample company, app
settings). They are not recorded in the ledger and run again on every
invocation, so each one must be idempotent (``ON CONFLICT DO NOTHING``).
"""

from dataclasses import dataclass, field

import ibis

from trackas_migrate.config.settings import MigrateSettings
from trackas_migrate.exceptions import DiscoveryError, MigrateError, SeedError
from trackas_migrate.migrations.discovery import get_migration_files
from trackas_migrate.migrations.ledger import build_transaction_script
from trackas_migrate.utils.logging import get_logger
from trackas_migrate.utils.sql import execute_script, rollback

logger = get_logger("trackas_migrate.migrations.seeds")


@dataclass
class SeedResult:
    """Outcome of one seed invocation."""

    executed: list[str] = field(default_factory=list)
    error: MigrateError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def run_seeds(settings: MigrateSettings, connection: ibis.BaseBackend) -> SeedResult:
    """
    Execute every seed file in filename order, each in its own transaction.

    Stops at the first failing file; files before it stay committed.

    Args:
        settings: Provides the seeds directory and file extension
        connection: ibis backend to seed

    Returns:
        SeedResult; ``error`` holds the failure that stopped the run
    """
    result = SeedResult()

    try:
        files = get_migration_files(settings.seeds_dir, settings.extension)
    except DiscoveryError as e:
        logger.error(f"Seeding aborted: {e}")
        result.error = e
        return result

    logger.info(f"Found {len(files)} seed file(s) in {settings.seeds_dir}")

    for seed in files:
        try:
            contents = seed.read()
            logger.info(f"Running seed: {seed.filename}")
            try:
                execute_script(connection, build_transaction_script(contents))
            except Exception as e:
                rollback(connection)
                raise SeedError(seed.filename, str(e), cause=e) from e
        except MigrateError as e:
            logger.error(f"Seeding aborted: {e}")
            result.error = e
            return result

        result.executed.append(seed.filename)
        logger.info(f"✓ {seed.filename} completed")

    logger.info("Seed completed successfully")
    return result
