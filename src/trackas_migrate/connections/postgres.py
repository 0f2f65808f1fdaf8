"""
Postgres connection via ibis.

Accepts either a connection URL (the ``DATABASE_URL`` the application
backend uses) or discrete ``config`` fields.
"""

from urllib.parse import urlsplit

import ibis

from trackas_migrate.connections.base import BaseConnection
from trackas_migrate.exceptions import DatabaseConnectionError
from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.connections.postgres")

POSTGRES_SCHEMES = ("postgres", "postgresql")


def redact_url(url: str) -> str:
    """Hide the password in a connection URL for logging."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return parts._replace(netloc=netloc).geturl()


class PostgresConnection(BaseConnection):
    """Postgres connection wrapper using ibis."""

    @property
    def connection(self) -> ibis.BaseBackend:
        """
        Get Postgres connection via ibis (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis Postgres backend

        Raises:
            DatabaseConnectionError: If the server cannot be reached or rejects the login
        """
        if self._connection is None:
            url = self.config.get("url")
            try:
                if url:
                    scheme, sep, rest = url.partition("://")
                    # ibis registers the backend as "postgres"
                    if scheme == "postgresql":
                        url = f"postgres{sep}{rest}"
                    target = redact_url(url)
                    self._connection = ibis.connect(url)
                else:
                    db_config = self.config.get("config", {})
                    host = db_config.get("host", "localhost")
                    port = int(db_config.get("port", 5432))
                    database = db_config.get("database", "")
                    target = f"{host}:{port}/{database}"
                    self._connection = ibis.postgres.connect(
                        host=host,
                        port=port,
                        user=db_config.get("user", ""),
                        password=db_config.get("password", ""),
                        database=database,
                    )
            except Exception as e:
                raise DatabaseConnectionError(
                    f"Cannot connect to Postgres database '{self.name}': {e}",
                    details={"connection": self.name},
                ) from e

            logger.debug(f"Opened Postgres connection '{self.name}' ({target})")

        return self._connection
