"""
trackas-migrate exception hierarchy.

Every failure the runner can report inherits from MigrateError, so the CLI
can turn any of them into a non-zero exit with a single ``except`` clause
while callers embedding the runner can still tell them apart.

Hierarchy::

    MigrateError
    ├── ConfigurationError          - config loading, parsing, validation
    ├── DatabaseConnectionError     - backend cannot be opened
    │   └── ConnectionLockError     - database file locked by another process
    ├── DiscoveryError              - migrations directory or file unreadable
    ├── MigrationExecutionError     - a migration script failed
    ├── LedgerError                 - ledger table DDL/read failure
    │   └── LedgerWriteError        - record insert failed after the script ran
    └── SeedError                   - a seed script failed
"""

from __future__ import annotations


class MigrateError(Exception):
    """Base exception for all trackas-migrate errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(MigrateError):
    """Raised when configuration loading, parsing, or validation fails."""


# --- Connections -------------------------------------------------------------


class DatabaseConnectionError(MigrateError):
    """Raised when the database backend cannot be opened."""


class ConnectionLockError(DatabaseConnectionError):
    """Raised when a database file is locked by another process."""

    def __init__(self, message: str, *, pid: str | None = None, path: str | None = None) -> None:
        super().__init__(message, details={"pid": pid, "path": path})
        self.pid = pid
        self.path = path


# --- Discovery ---------------------------------------------------------------


class DiscoveryError(MigrateError):
    """Raised when migration files cannot be enumerated or read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message, details={"path": path})
        self.path = path


# --- Execution ---------------------------------------------------------------


class MigrationExecutionError(MigrateError):
    """Raised when a migration script fails against the database."""

    def __init__(self, filename: str, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(f"Migration '{filename}' failed: {message}", details={"filename": filename})
        self.filename = filename
        if cause is not None:
            self.__cause__ = cause


# --- Ledger ------------------------------------------------------------------


class LedgerError(MigrateError):
    """Raised when the ledger table cannot be created or read."""


class LedgerWriteError(LedgerError):
    """Raised when recording a migration fails after its script succeeded.

    The migration is applied but unrecorded; the next run will try to apply
    it again unless an operator records it by hand.
    """

    def __init__(self, filename: str, message: str, *, cause: Exception | None = None) -> None:
        full = f"Migration '{filename}' was applied but could not be recorded: {message}"
        super().__init__(full, details={"filename": filename})
        self.filename = filename
        if cause is not None:
            self.__cause__ = cause


# --- Seeds -------------------------------------------------------------------


class SeedError(MigrateError):
    """Raised when a seed script fails."""

    def __init__(self, filename: str, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(f"Seed '{filename}' failed: {message}", details={"filename": filename})
        self.filename = filename
        if cause is not None:
            self.__cause__ = cause
