"""
Tests for configuration loading, resolution and runner settings.
"""

from pathlib import Path

import pytest

from trackas_migrate.config.loader import Config, _merge_dict, load_config
from trackas_migrate.config.resolver import is_unresolved, resolve_config
from trackas_migrate.config.settings import MigrateSettings
from trackas_migrate.connections import PostgresConnection, create_connection
from trackas_migrate.exceptions import ConfigurationError


class TestConfig:
    """Tests for Config class."""

    def test_dot_notation(self):
        cfg = Config({"migrations": {"table": "migrations"}})
        assert cfg.get("migrations.table") == "migrations"

    def test_dot_notation_missing_returns_default(self):
        cfg = Config({"a": 1})
        assert cfg.get("a.b.c", "fallback") == "fallback"

    def test_validate_section_must_be_dict(self):
        cfg = Config({"migrations": "bad"})
        with pytest.raises(ConfigurationError, match="must be a dictionary"):
            cfg.validate()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_config_file(self, tmp_path):
        cfg = load_config(tmp_path)
        assert cfg.get("migrations.directory") == "migrations"
        assert cfg.get("migrations.table") == "migrations"
        assert cfg.get("migrations.transactional") is True
        assert cfg.get("seeds.directory") == "seeds"

    def test_config_file_overrides_defaults(self, tmp_path):
        (tmp_path / "config.yaml").write_text("migrations:\n  table: schema_log\n")
        cfg = load_config(tmp_path)
        assert cfg.get("migrations.table") == "schema_log"
        assert cfg.get("migrations.extension") == ".sql"

    def test_env_overlay(self, tmp_path):
        (tmp_path / "config.yaml").write_text("connection:\n  type: duckdb\n  path: dev.duckdb\n")
        (tmp_path / "config.prod.yaml").write_text("connection:\n  path: prod.duckdb\n")
        cfg = load_config(tmp_path, env="prod")
        assert cfg.get("connection.type") == "duckdb"
        assert cfg.get("connection.path") == "prod.duckdb"

    def test_invalid_yaml_raises(self, tmp_path):
        (tmp_path / "config.yaml").write_text(":\n  :\n  invalid: [")
        with pytest.raises(ConfigurationError, match="Error parsing"):
            load_config(tmp_path)

    def test_non_mapping_raises(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(tmp_path)

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TRACKAS_DB", "postgres://app@db/trackas")
        (tmp_path / "config.yaml").write_text("connection:\n  url: ${TRACKAS_DB}\n")
        cfg = load_config(tmp_path)
        assert cfg.get("connection.url") == "postgres://app@db/trackas"

    def test_env_placeholder_substitution(self, tmp_path):
        (tmp_path / "config.yaml").write_text("connection:\n  type: duckdb\n  path: data/{env}.duckdb\n")
        cfg = load_config(tmp_path, env="staging")
        assert cfg.get("connection.path") == "data/staging.duckdb"


class TestResolver:
    def test_unset_variable_left_in_place(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        resolved = resolve_config({"url": "${NOT_SET_ANYWHERE}"})
        assert resolved["url"] == "${NOT_SET_ANYWHERE}"
        assert is_unresolved(resolved["url"])

    def test_non_strings_untouched(self):
        assert resolve_config({"n": 3, "flag": True, "items": [1, "{env}"]}, "qa") == {
            "n": 3,
            "flag": True,
            "items": [1, "qa"],
        }


class TestMergeDict:
    def test_nested_merge(self):
        base = {"a": {"x": 1, "y": 2}}
        _merge_dict(base, {"a": {"y": 3, "z": 4}})
        assert base == {"a": {"x": 1, "y": 3, "z": 4}}

    def test_replace_non_dict(self):
        base = {"a": "string"}
        _merge_dict(base, {"a": {"nested": True}})
        assert base == {"a": {"nested": True}}


class TestMigrateSettings:
    """Tests for MigrateSettings.from_config."""

    def test_relative_directories_resolve_against_project(self, tmp_path):
        cfg = Config(
            {
                "connection": {"type": "duckdb"},
                "migrations": {"directory": "db/migrations"},
                "seeds": {"directory": "db/seeds"},
            }
        )
        settings = MigrateSettings.from_config(cfg, tmp_path)
        assert settings.migrations_dir == tmp_path / "db" / "migrations"
        assert settings.seeds_dir == tmp_path / "db" / "seeds"

    def test_absolute_directory_kept(self, tmp_path):
        absolute = tmp_path / "elsewhere"
        cfg = Config({"connection": {"type": "duckdb"}, "migrations": {"directory": str(absolute)}})
        settings = MigrateSettings.from_config(cfg, Path("/unused"))
        assert settings.migrations_dir == absolute

    def test_extension_gets_leading_dot(self, tmp_path):
        settings = MigrateSettings(
            project_dir=tmp_path,
            migrations_dir=tmp_path,
            seeds_dir=tmp_path,
            extension="psql",
        )
        assert settings.extension == ".psql"

    @pytest.mark.parametrize("table", ["migrations", "ops.migrations", "_ledger2"])
    def test_valid_table_names(self, tmp_path, table):
        settings = MigrateSettings(project_dir=tmp_path, migrations_dir=tmp_path, seeds_dir=tmp_path, table=table)
        assert settings.table == table

    @pytest.mark.parametrize("table", ["", "1migrations", "drop table x;", "a.b.c", 'mig"rations'])
    def test_invalid_table_names(self, tmp_path, table):
        with pytest.raises(ConfigurationError, match="Invalid ledger table name"):
            MigrateSettings(project_dir=tmp_path, migrations_dir=tmp_path, seeds_dir=tmp_path, table=table)

    @pytest.mark.parametrize("value,expected", [(False, False), ("false", False), ("yes", True), (True, True)])
    def test_transactional_coercion(self, tmp_path, value, expected):
        cfg = Config({"connection": {"type": "duckdb"}, "migrations": {"transactional": value}})
        assert MigrateSettings.from_config(cfg, tmp_path).transactional is expected

    def test_transactional_garbage_raises(self, tmp_path):
        cfg = Config({"connection": {"type": "duckdb"}, "migrations": {"transactional": "sometimes"}})
        with pytest.raises(ConfigurationError, match="must be a boolean"):
            MigrateSettings.from_config(cfg, tmp_path)

    def test_database_url_argument_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/db")
        cfg = Config({"connection": {"type": "duckdb", "path": "x.duckdb"}})
        settings = MigrateSettings.from_config(cfg, tmp_path, database_url="postgres://cli/db")
        assert settings.connection == {"url": "postgres://cli/db"}

    def test_connection_section_beats_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/db")
        cfg = Config({"connection": {"type": "duckdb", "path": "x.duckdb"}})
        settings = MigrateSettings.from_config(cfg, tmp_path)
        assert settings.connection == {"type": "duckdb", "path": str(tmp_path / "x.duckdb")}

    def test_falls_back_to_database_url_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/db")
        settings = MigrateSettings.from_config(Config({"connection": {}}), tmp_path)
        assert settings.connection == {"url": "postgres://env/db"}

    def test_unresolved_url_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/db")
        cfg = Config({"connection": {"url": "${MISSING_DB_URL}"}})
        settings = MigrateSettings.from_config(cfg, tmp_path)
        assert settings.connection == {"url": "postgres://env/db"}

    def test_no_database_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ConfigurationError, match="No database configured"):
            MigrateSettings.from_config(Config({"connection": {}}), tmp_path)


class TestExampleProject:
    """The bundled examples/trackas project resolves per environment."""

    EXAMPLE_DIR = Path(__file__).resolve().parents[1] / "examples" / "trackas"

    def test_local_env_targets_postgres(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        cfg = load_config(self.EXAMPLE_DIR, env="local")
        settings = MigrateSettings.from_config(cfg, self.EXAMPLE_DIR)

        assert settings.connection["url"].startswith("postgresql://")
        assert isinstance(create_connection(settings.connection), PostgresConnection)

    def test_default_env_uses_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://app@db/trackas")
        cfg = load_config(self.EXAMPLE_DIR, env="dev")
        settings = MigrateSettings.from_config(cfg, self.EXAMPLE_DIR)

        assert settings.connection == {"url": "postgresql://app@db/trackas"}

    def test_no_environment_overlay_switches_to_duckdb(self):
        """The example migrations are Postgres SQL; every overlay must stay on Postgres."""
        for overlay in self.EXAMPLE_DIR.glob("config.*.yaml"):
            assert "duckdb" not in overlay.read_text().lower(), overlay.name
