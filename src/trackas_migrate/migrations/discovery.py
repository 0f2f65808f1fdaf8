"""
Migration file discovery.

Filenames are both the idempotency key and the sort key, so they need
sortable prefixes (``001_init.sql``, ``002_add_col.sql`` or timestamps).
"""

from dataclasses import dataclass
from pathlib import Path

from trackas_migrate.exceptions import DiscoveryError
from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.migrations.discovery")


@dataclass(frozen=True)
class MigrationFile:
    """One unit of schema change on disk."""

    filename: str
    path: Path

    def read(self) -> str:
        """
        Read the script contents.

        Raises:
            DiscoveryError: If the file cannot be read or decoded as UTF-8
        """
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DiscoveryError(f"Cannot read migration file {self.path}: {e}", path=str(self.path)) from e


def get_migration_files(directory: Path, extension: str = ".sql") -> list[MigrationFile]:
    """
    Get all migration files from a directory.

    Args:
        directory: Path to the migrations directory
        extension: File extension to keep (default: ".sql")

    Returns:
        MigrationFile list sorted by filename (plain string order)

    Raises:
        DiscoveryError: If the directory is missing or cannot be listed
    """
    if not directory.exists():
        raise DiscoveryError(f"Migrations directory not found: {directory}", path=str(directory))
    if not directory.is_dir():
        raise DiscoveryError(f"Migrations path is not a directory: {directory}", path=str(directory))

    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise DiscoveryError(f"Cannot list migrations directory {directory}: {e}", path=str(directory)) from e

    files = [
        MigrationFile(filename=entry.name, path=entry)
        for entry in entries
        if entry.name.endswith(extension) and entry.is_file()
    ]
    files.sort(key=lambda f: f.filename)

    logger.debug(f"Discovered {len(files)} '{extension}' file(s) in {directory}")
    return files
