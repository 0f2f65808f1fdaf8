"""
Migration runner.

Applies pending SQL files from the migrations directory, in filename order,
exactly once each, and stops at the first failure. Failures are returned
in the RunResult rather than raised, so only the caller (the CLI) decides
the process exit status.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime

import ibis

from trackas_migrate.config.settings import MigrateSettings
from trackas_migrate.exceptions import MigrateError, MigrationExecutionError
from trackas_migrate.migrations.discovery import MigrationFile, get_migration_files
from trackas_migrate.migrations.ledger import Ledger
from trackas_migrate.utils.logging import get_logger
from trackas_migrate.utils.sql import execute_script

logger = get_logger("trackas_migrate.migrations.runner")

APPLIED = "applied"
PENDING = "pending"
ORPHANED = "orphaned"


@dataclass
class RunResult:
    """Outcome of one runner invocation."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)  # dry runs only
    error: MigrateError | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class MigrationStatus:
    """State of one migration for the status report."""

    filename: str
    state: str
    executed_at: datetime | None = None


class MigrationRunner:
    """
    Sequential, idempotent migration runner.

    Usage:
        with create_connection(settings.connection) as conn:
            result = MigrationRunner(settings, conn.connection).run()
    """

    def __init__(self, settings: MigrateSettings, connection: ibis.BaseBackend):
        """
        Args:
            settings: Directories, ledger table and transaction mode
            connection: ibis backend to migrate
        """
        self.settings = settings
        self.connection = connection
        self.ledger = Ledger(connection, settings.table)

    def discover(self) -> list[MigrationFile]:
        """Candidate files, sorted by filename."""
        return get_migration_files(self.settings.migrations_dir, self.settings.extension)

    def run(self, dry_run: bool = False) -> RunResult:
        """
        Apply every pending migration in order.

        1. Create the ledger table if absent.
        2. Discover candidate files.
        3. Read the applied set from the ledger.
        4. Apply each unrecorded file (script + ledger row), halting on the
           first failure. Earlier successes stay committed.

        Args:
            dry_run: Only compute what would be applied

        Returns:
            RunResult; ``error`` holds the failure that stopped the run
        """
        result = RunResult(dry_run=dry_run)

        try:
            self.ledger.ensure_table()
            files = self.discover()
            logger.info(f"Found {len(files)} migration file(s) in {self.settings.migrations_dir}")

            applied = self.ledger.applied()

            for migration in files:
                if migration.filename in applied:
                    logger.debug(f"✓ {migration.filename} already executed")
                    result.skipped.append(migration.filename)
                    continue

                if dry_run:
                    logger.info(f"[DRY RUN] Would execute: {migration.filename}")
                    result.pending.append(migration.filename)
                    continue

                self._apply(migration)
                result.applied.append(migration.filename)

        except MigrateError as e:
            logger.error(f"Migration run aborted: {e}")
            result.error = e
            return result

        if not dry_run:
            if result.applied:
                logger.info(f"All migrations completed successfully ({len(result.applied)} applied)")
            else:
                logger.info("No pending migrations")
        return result

    def _apply(self, migration: MigrationFile) -> None:
        """Apply one migration; raises MigrateError subclasses on failure."""
        contents = migration.read()
        logger.info(f"Running migration: {migration.filename}")
        start = time.perf_counter()

        if self.settings.transactional:
            self.ledger.apply(migration.filename, contents)
        else:
            try:
                execute_script(self.connection, contents)
            except Exception as e:
                raise MigrationExecutionError(migration.filename, str(e), cause=e) from e
            self.ledger.record(migration.filename)

        elapsed = time.perf_counter() - start
        logger.info(f"✓ {migration.filename} completed in {elapsed:.2f}s")

    def pending(self) -> list[MigrationFile]:
        """
        Files not yet recorded in the ledger, in application order.

        Raises:
            MigrateError: If discovery or the ledger read fails
        """
        self.ledger.ensure_table()
        applied = self.ledger.applied()
        return [f for f in self.discover() if f.filename not in applied]

    def status(self) -> list[MigrationStatus]:
        """
        Every known migration with its state, sorted by filename.

        Ledger rows with no file on disk are reported as orphaned.

        Raises:
            MigrateError: If discovery or the ledger read fails
        """
        self.ledger.ensure_table()
        records = self.ledger.records()
        files = self.discover()

        statuses = []
        for migration in files:
            if migration.filename in records:
                statuses.append(MigrationStatus(migration.filename, APPLIED, records[migration.filename]))
            else:
                statuses.append(MigrationStatus(migration.filename, PENDING))

        on_disk = {f.filename for f in files}
        for filename, executed_at in records.items():
            if filename not in on_disk:
                statuses.append(MigrationStatus(filename, ORPHANED, executed_at))

        return sorted(statuses, key=lambda s: s.filename)
