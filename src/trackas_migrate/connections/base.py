"""
Abstract base connection class for ibis-backed databases.
"""

from abc import ABC, abstractmethod
from typing import Any

import ibis

from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.connections.base")


class BaseConnection(ABC):
    """
    Lazily opened, closable wrapper around an ibis backend.

    The runner only ever sees the backend itself (``.connection``); the
    wrapper owns its lifetime and can be used as a context manager.
    """

    def __init__(self, name: str, config: dict[str, Any]):
        """
        Initialize connection.

        Args:
            name: Connection name used in log messages
            config: Connection configuration dictionary
        """
        self.name = name
        self.config = config
        self._connection: ibis.BaseBackend | None = None

    @property
    @abstractmethod
    def connection(self) -> ibis.BaseBackend:
        """
        Get ibis backend connection (lazy initialization).

        Returns:
            ibis.BaseBackend: ibis backend connection
        """

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def close(self) -> None:
        """Close connection and cleanup resources."""
        if self._connection is not None:
            try:
                self._connection.disconnect()
            except Exception as e:
                logger.debug(f"Error during disconnect() for {self.name}: {e}")
            self._connection = None

    def __enter__(self) -> "BaseConnection":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        """Context manager exit - closes connection."""
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
