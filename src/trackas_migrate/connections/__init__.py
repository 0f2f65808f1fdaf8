"""
Database connections.

Builds the ibis-backed connection wrapper for the configured database.
"""

from typing import Any

from trackas_migrate.connections.base import BaseConnection
from trackas_migrate.connections.duckdb import DuckDBConnection
from trackas_migrate.connections.postgres import POSTGRES_SCHEMES, PostgresConnection
from trackas_migrate.exceptions import ConfigurationError
from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.connections")

CONNECTION_TYPES: dict[str, type[BaseConnection]] = {
    "duckdb": DuckDBConnection,
    "postgres": PostgresConnection,
}


def create_connection(config: dict[str, Any], name: str = "default") -> BaseConnection:
    """
    Create a (not yet opened) connection from a ``connection`` config section.

    ``type`` selects the backend. Without it the backend is inferred from
    the scheme of ``url``: ``postgres://`` / ``postgresql://`` or
    ``duckdb://<path>``.

    Args:
        config: Connection configuration dictionary
        name: Connection name used in log and error messages

    Returns:
        Connection wrapper; the backend opens on first ``.connection`` access

    Raises:
        ConfigurationError: If the type or URL scheme is not supported
    """
    conn_type = config.get("type")
    url = config.get("url")

    if conn_type is None:
        if not url:
            raise ConfigurationError(f"Connection '{name}' needs a 'type' or a 'url'")
        scheme, _, rest = url.partition("://")
        if scheme in POSTGRES_SCHEMES:
            conn_type = "postgres"
        elif scheme == "duckdb":
            conn_type = "duckdb"
            config = {**config, "path": rest or ":memory:"}
        else:
            raise ConfigurationError(
                f"Unsupported database URL scheme '{scheme}' for connection '{name}'. "
                f"Supported: postgres://, postgresql://, duckdb://"
            )

    conn_class = CONNECTION_TYPES.get(conn_type)
    if conn_class is None:
        raise ConfigurationError(
            f"Unknown connection type '{conn_type}' for connection '{name}'. "
            f"Supported: {', '.join(sorted(CONNECTION_TYPES))}"
        )

    logger.debug(f"Using {conn_type} connection '{name}'")
    return conn_class(name, config)


__all__ = [
    "BaseConnection",
    "DuckDBConnection",
    "PostgresConnection",
    "create_connection",
]
