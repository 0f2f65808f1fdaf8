"""
Ledger table: the persistent record of applied migrations.

One row per applied file, keyed by filename. Rows are only ever inserted;
the unique constraint on ``filename`` is what rejects a second runner
recording the same file.
"""

from datetime import datetime

import ibis
import pandas as pd

from trackas_migrate.exceptions import LedgerError, LedgerWriteError, MigrationExecutionError
from trackas_migrate.utils.logging import get_logger
from trackas_migrate.utils.sql import (
    escape_identifier,
    escape_qualified_name,
    escape_sql_string,
    execute_script,
    fetch_rows,
    rollback,
)

logger = get_logger("trackas_migrate.migrations.ledger")


def build_transaction_script(contents: str, *statements: str) -> str:
    """
    Wrap a script and follow-up statements in one explicit transaction.

    Args:
        contents: Raw script text (may or may not end with ``;``)
        *statements: Extra statements to run after the script, without ``;``

    Returns:
        ``BEGIN TRANSACTION; <contents>; <statements>; COMMIT;``
    """
    parts = ["BEGIN TRANSACTION;"]
    body = contents.strip()
    if body:
        parts.append(_terminate(body))
    parts.extend(f"{statement};" for statement in statements)
    parts.append("COMMIT;")
    return "\n".join(parts)


def _terminate(body: str) -> str:
    """Close the last statement of ``body`` before anything is appended."""
    # On its own line: a trailing "-- comment" would swallow a ";" on the same line.
    # An extra empty statement after an already terminated body is harmless.
    return f"{body}\n;"


class Ledger:
    """Reads and writes the ledger table on one ibis backend."""

    def __init__(self, connection: ibis.BaseBackend, table: str = "migrations"):
        """
        Args:
            connection: ibis backend the migrations run against
            table: Ledger table name, optionally schema-qualified
        """
        self.connection = connection
        self.table = table
        self.qualified_table = escape_qualified_name(table)

    def ensure_table(self) -> None:
        """
        Create the ledger table (and its schema) if absent.

        Relies on ``IF NOT EXISTS`` so concurrent runners cannot create it twice.

        Raises:
            LedgerError: If the DDL fails
        """
        try:
            if "." in self.table:
                schema = self.table.split(".", 1)[0]
                execute_script(self.connection, f"CREATE SCHEMA IF NOT EXISTS {escape_identifier(schema)}")
            execute_script(
                self.connection,
                f"""
                CREATE TABLE IF NOT EXISTS {self.qualified_table} (
                    filename VARCHAR NOT NULL UNIQUE,
                    executed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """,
            )
        except Exception as e:
            raise LedgerError(f"Could not create ledger table {self.table}: {e}") from e
        logger.debug(f"Ledger table {self.table} ready")

    def records(self) -> dict[str, datetime | None]:
        """
        Read every ledger row.

        Returns:
            Mapping of filename to executed_at, in filename order

        Raises:
            LedgerError: If the table cannot be read
        """
        try:
            rows = fetch_rows(
                self.connection,
                f"SELECT filename, executed_at FROM {self.qualified_table} ORDER BY filename",
            )
        except Exception as e:
            raise LedgerError(f"Could not read ledger table {self.table}: {e}") from e

        records: dict[str, datetime | None] = {}
        for row in rows:
            executed_at = row.get("executed_at")
            if executed_at is None or pd.isna(executed_at):
                records[row["filename"]] = None
            else:
                records[row["filename"]] = pd.Timestamp(executed_at).to_pydatetime()
        return records

    def applied(self) -> set[str]:
        """Filenames already recorded."""
        return set(self.records())

    def insert_statement(self, filename: str) -> str:
        return f"INSERT INTO {self.qualified_table} (filename) VALUES ({escape_sql_string(filename)})"

    def record(self, filename: str) -> None:
        """
        Insert one ledger row on its own, after the script already ran.

        Raises:
            LedgerWriteError: If the insert fails (duplicate, connectivity...)
        """
        try:
            execute_script(self.connection, self.insert_statement(filename))
        except Exception as e:
            raise LedgerWriteError(filename, str(e), cause=e) from e

    def apply(self, filename: str, contents: str) -> None:
        """
        Run a migration script and record it in a single transaction.

        Either both the schema change and the ledger row are committed or
        neither is. A duplicate ledger row (another runner got there first)
        rolls the script back too.

        Args:
            filename: Ledger key for the migration
            contents: Script text

        Raises:
            MigrationExecutionError: If any statement, including the insert, fails
        """
        script = build_transaction_script(contents, self.insert_statement(filename))
        try:
            execute_script(self.connection, script)
        except Exception as e:
            rollback(self.connection)
            raise MigrationExecutionError(filename, str(e), cause=e) from e

