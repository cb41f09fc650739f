"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from faktura.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)

MIGRATIONS_DIR = "faktura.infrastructure.storage.sqlite.migrations.migrator.MIGRATIONS_DIR"

TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial"
        assert len(info.checksum) == 16

    def test_from_file_invalid_filename_raises(self, tmp_path: Path):
        invalid_file = tmp_path / "invalid_migration.sql"
        invalid_file.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(invalid_file)


class TestDiscoverMigrations:
    def test_bundled_migrations(self):
        versions = [m.version for m in discover_migrations()]
        assert versions[0] == "001"
        assert versions == sorted(versions)

    def test_returns_sorted_and_skips_invalid(self, tmp_path: Path):
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "v_no_number.sql").write_text("SELECT 3;")

        with patch(MIGRATIONS_DIR, tmp_path):
            result = discover_migrations()

        assert [m.version for m in result] == ["001", "002"]


class TestInitializeDatabase:
    async def test_fresh_database(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert results
        assert all(r.success for r in results)
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_current_version(conn) == results[-1].version

    async def test_second_run_applies_nothing(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        assert await initialize_database(temp_db_path) == []

    async def test_backup_removed_after_success(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        await initialize_database(temp_db_path)
        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_stops_at_failed_migration(self, tmp_path: Path):
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "v001_base.sql").write_text(TRACKING_TABLE)
        (migrations / "v002_broken.sql").write_text("CREATE TABL oops;")
        (migrations / "v003_after.sql").write_text("CREATE TABLE after (id INTEGER);")

        with patch(MIGRATIONS_DIR, migrations):
            results = await initialize_database(tmp_path / "db.sqlite", create_backup_before=False)

        assert [(r.version, r.success) for r in results] == [("001", True), ("002", False)]
        assert results[1].error


class TestBackups:
    def test_create_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        db_path.write_text("original")

        backup_path = create_backup(db_path)
        assert "backup_" in backup_path.name

        db_path.write_text("broken")
        restore_backup(db_path, backup_path)
        assert db_path.read_text() == "original"


class TestGetMigrationStatus:
    async def test_missing_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "missing.db")

        assert status["exists"] is False
        assert status["current_version"] is None
        assert "001" in status["pending_migrations"]

    async def test_migrated_database(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        status = await get_migration_status(temp_db_path)

        assert status["exists"] is True
        assert "001" in status["applied_migrations"]
        assert status["pending_migrations"] == []


class TestVerifySchemaIntegrity:
    async def test_all_checks_pass(self, initialized_db: Path):
        checks = await verify_schema_integrity(initialized_db)

        assert {c["check"] for c in checks} == {"foreign_keys", "integrity", "required_tables"}
        assert all(c["status"] == "PASS" for c in checks)
