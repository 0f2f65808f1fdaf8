"""
SQL helpers: identifier/value escaping and raw script execution on ibis backends.
"""

from typing import Any

import ibis

from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.utils.sql")


def escape_identifier(identifier: str) -> str:
    """
    Escape a SQL identifier (table, column or schema name).

    Wraps the identifier in double quotes and doubles any embedded quotes,
    which is valid for both PostgreSQL and DuckDB.

    Example:
        >>> escape_identifier("migrations")
        '"migrations"'
    """
    if not identifier:
        raise ValueError("Identifier cannot be empty")
    escaped = identifier.replace('"', '""')
    return f'"{escaped}"'


def escape_qualified_name(name: str) -> str:
    """Escape ``table`` or ``schema.table`` as ``"table"`` / ``"schema"."table"``."""
    return ".".join(escape_identifier(part) for part in name.split("."))


def escape_sql_string(value: str | None) -> str:
    """
    Render a Python string as a SQL string literal.

    Example:
        >>> escape_sql_string("O'Brien")
        "'O''Brien'"
    """
    if value is None:
        return "NULL"
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def execute_script(connection: ibis.BaseBackend, script: str) -> None:
    """
    Execute a raw SQL script (one or more statements) for its side effects.

    Goes straight to ``raw_sql()``: migration scripts hold DDL and several
    statements, which ``sql()`` cannot compile. Any cursor handed back by
    the backend is closed; DuckDB returns its native connection instead,
    which must stay open.

    Args:
        connection: ibis backend
        script: SQL text, statements separated by ``;``

    Raises:
        ValueError: If the backend cannot run raw SQL
        Exception: Whatever the backend raises for a failing statement
    """
    if not hasattr(connection, "raw_sql"):
        raise ValueError(
            f"Cannot execute SQL on connection type {type(connection)}. "
            "Connection must support raw_sql()."
        )

    result = connection.raw_sql(script)
    _close_cursor(connection, result)


def fetch_rows(connection: ibis.BaseBackend, query: str) -> list[dict[str, Any]]:
    """
    Run a SELECT and return its rows as dicts.

    Args:
        connection: ibis backend
        query: SELECT statement

    Returns:
        One dict per row, keyed by column name
    """
    result = connection.sql(query).execute()
    if result is None or len(result) == 0:
        return []
    return result.to_dict(orient="records")


def _close_cursor(connection: ibis.BaseBackend, result: Any) -> None:
    if result is None or result is connection or result is getattr(connection, "con", None):
        return
    close = getattr(result, "close", None)
    if callable(close):
        close()


def rollback(connection: ibis.BaseBackend) -> None:
    """Abort whatever transaction a failed script left open."""
    try:
        execute_script(connection, "ROLLBACK")
    except Exception as e:
        # Nothing open: the script failed before BEGIN took effect (e.g. parse error)
        logger.debug(f"ROLLBACK after failed script: {e}")
