"""Unit tests for database migrator."""

from pathlib import Path

import aiosqlite

from stockroom.infrastructure.storage.sqlite.migrations import (
    MigrationInfo,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert len(info.checksum) == 16

    def test_checksum_follows_content(self, tmp_path: Path):
        a = tmp_path / "v001_a.sql"
        b = tmp_path / "v002_b.sql"
        a.write_text("SELECT 1;")
        b.write_text("SELECT 2;")
        assert MigrationInfo.from_file(a).checksum != MigrationInfo.from_file(b).checksum


class TestMigrations:
    def test_bundled_migrations_are_discovered(self):
        versions = [m.version for m in discover_migrations()]
        assert versions[0] == "001"
        assert versions == sorted(versions)

    async def test_initialize_creates_schema(self, tmp_path: Path):
        db_path = tmp_path / "fresh.db"

        results = await initialize_database(db_path, create_backup_before=False)

        assert results and all(r.success for r in results)
        async with aiosqlite.connect(db_path) as conn:
            assert await get_current_version(conn) == results[-1].version
        checks = await verify_schema_integrity(db_path)
        assert all(c["status"] == "PASS" for c in checks)

    async def test_initialize_is_idempotent(self, tmp_path: Path):
        db_path = tmp_path / "fresh.db"
        await initialize_database(db_path, create_backup_before=False)

        assert await initialize_database(db_path) == []
        assert not list(tmp_path.glob("*.backup_*"))

    async def test_status(self, tmp_path: Path):
        db_path = tmp_path / "fresh.db"
        before = await get_migration_status(db_path)
        assert before["exists"] is False
        assert "001" in before["pending_migrations"]

        await initialize_database(db_path, create_backup_before=False)

        after = await get_migration_status(db_path)
        assert after["exists"] is True
        assert after["pending_migrations"] == []
        assert "001" in after["applied_migrations"]

    async def test_missing_tables_fail_verification(self, tmp_path: Path):
        db_path = tmp_path / "empty.db"
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("CREATE TABLE users (id INTEGER)")
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(db_path)}

        assert checks["required_tables"]["status"] == "FAIL"
        assert "inventory_items" in checks["required_tables"]["missing"]
