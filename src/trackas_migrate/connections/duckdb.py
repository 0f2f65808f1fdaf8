"""
DuckDB connection via ibis.
"""

import re
from pathlib import Path

import ibis

from trackas_migrate.connections.base import BaseConnection
from trackas_migrate.exceptions import ConnectionLockError, DatabaseConnectionError
from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.connections.duckdb")


class DuckDBConnection(BaseConnection):
    """DuckDB connection wrapper using ibis."""

    @property
    def connection(self) -> ibis.BaseBackend:
        """
        Get DuckDB connection via ibis (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis DuckDB backend

        Raises:
            ConnectionLockError: If the database file is locked by another process
            DatabaseConnectionError: If the database cannot be opened
        """
        if self._connection is None:
            path = str(self.config.get("path", ":memory:"))

            if path == ":memory:":
                self._connection = ibis.duckdb.connect()
            else:
                Path(path).parent.mkdir(parents=True, exist_ok=True)
                try:
                    self._connection = ibis.duckdb.connect(path)
                except Exception as e:
                    error_str = str(e)
                    if "lock" in error_str.lower() or "conflicting" in error_str.lower():
                        pid_match = re.search(r"PID\s+(\d+)", error_str)
                        pid = pid_match.group(1) if pid_match else None
                        pid_info = f" (PID: {pid})" if pid else ""
                        raise ConnectionLockError(
                            f"Cannot connect to DuckDB database '{path}': File is locked by another process{pid_info}.\n"
                            f"Please close any other processes accessing this database.",
                            pid=pid,
                            path=path,
                        ) from e
                    raise DatabaseConnectionError(
                        f"Cannot connect to DuckDB database '{path}': {error_str}\n"
                        f"Please verify:\n"
                        f"  - Database file is accessible\n"
                        f"  - File permissions are correct\n"
                        f"  - Database file is not corrupted",
                        details={"path": path},
                    ) from e

            logger.debug(f"Opened DuckDB connection '{self.name}' ({path})")

        return self._connection
