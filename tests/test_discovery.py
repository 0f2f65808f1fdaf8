"""
Tests for migration file discovery.
"""

from pathlib import Path

import pytest

from trackas_migrate.exceptions import DiscoveryError
from trackas_migrate.migrations.discovery import MigrationFile, get_migration_files


class TestGetMigrationFiles:
    def test_sorted_and_filtered(self, tmp_path):
        for name in ["002_add_col.sql", "001_init.sql", "README.md", "003_index.sql.bak", "010_late.sql"]:
            (tmp_path / name).write_text("SELECT 1;")

        files = get_migration_files(tmp_path)
        assert [f.filename for f in files] == ["001_init.sql", "002_add_col.sql", "010_late.sql"]
        assert all(f.path.parent == tmp_path for f in files)

    def test_lexicographic_not_numeric(self, tmp_path):
        """Unpadded numbers sort as strings, which is why prefixes must be zero-padded."""
        for name in ["2_b.sql", "10_c.sql", "1_a.sql"]:
            (tmp_path / name).write_text("")

        assert [f.filename for f in get_migration_files(tmp_path)] == ["10_c.sql", "1_a.sql", "2_b.sql"]

    def test_ignores_directories_with_matching_suffix(self, tmp_path):
        (tmp_path / "archive.sql").mkdir()
        (tmp_path / "001_init.sql").write_text("")
        assert [f.filename for f in get_migration_files(tmp_path)] == ["001_init.sql"]

    def test_custom_extension(self, tmp_path):
        (tmp_path / "001_init.psql").write_text("")
        (tmp_path / "002_other.sql").write_text("")
        assert [f.filename for f in get_migration_files(tmp_path, ".psql")] == ["001_init.psql"]

    def test_listing_order_does_not_matter(self, tmp_path, monkeypatch):
        for name in ["001_a.sql", "002_b.sql", "003_c.sql"]:
            (tmp_path / name).write_text("")

        original_iterdir = Path.iterdir
        monkeypatch.setattr(Path, "iterdir", lambda self: reversed(list(original_iterdir(self))))

        assert [f.filename for f in get_migration_files(tmp_path)] == ["001_a.sql", "002_b.sql", "003_c.sql"]

    def test_empty_directory(self, tmp_path):
        assert get_migration_files(tmp_path) == []

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(DiscoveryError, match="not found") as exc_info:
            get_migration_files(tmp_path / "nope")
        assert exc_info.value.path == str(tmp_path / "nope")

    def test_file_instead_of_directory_raises(self, tmp_path):
        target = tmp_path / "migrations"
        target.write_text("")
        with pytest.raises(DiscoveryError, match="not a directory"):
            get_migration_files(target)


class TestMigrationFile:
    def test_read(self, tmp_path):
        path = tmp_path / "001_init.sql"
        path.write_text("CREATE TABLE shipments (id INTEGER);", encoding="utf-8")
        assert MigrationFile("001_init.sql", path).read() == "CREATE TABLE shipments (id INTEGER);"

    def test_read_missing_raises(self, tmp_path):
        with pytest.raises(DiscoveryError, match="Cannot read migration file"):
            MigrationFile("gone.sql", tmp_path / "gone.sql").read()

    def test_read_invalid_utf8_raises(self, tmp_path):
        path = tmp_path / "bad.sql"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(DiscoveryError):
            MigrationFile("bad.sql", path).read()
