"""
Shared fixtures: an in-memory DuckDB backend and a project layout under tmp_path.
"""

import logging

import ibis
import pytest

from trackas_migrate.config.settings import MigrateSettings


@pytest.fixture
def con():
    """Fresh in-memory DuckDB backend."""
    con = ibis.duckdb.connect()
    yield con
    con.disconnect()


@pytest.fixture
def project(tmp_path):
    """Project directory with empty migrations/ and seeds/ folders."""
    (tmp_path / "migrations").mkdir()
    (tmp_path / "seeds").mkdir()
    return tmp_path


@pytest.fixture
def settings(project):
    return MigrateSettings(
        project_dir=project,
        migrations_dir=project / "migrations",
        seeds_dir=project / "seeds",
        connection={"type": "duckdb"},
    )


@pytest.fixture
def write_migration(project):
    """Write ``migrations/<filename>`` and return its path."""

    def _write(filename, sql, folder="migrations"):
        path = project / folder / filename
        path.write_text(sql, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers a CLI invocation attached to streams that are gone after the test."""
    yield
    logger = logging.getLogger("trackas_migrate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
