"""Tests for the migration runner's file handling."""

from unittest.mock import MagicMock

from run_migrations import (
    MIGRATIONS_DIR,
    MigrationFile,
    discover_migrations,
    migration_checksum,
    run_migration,
    split_pending,
)


def test_checksum_is_stable():
    assert migration_checksum("select 1;") == migration_checksum("select 1;")
    assert migration_checksum("select 1;") != migration_checksum("select 2;")
    assert len(migration_checksum("select 1;")) == 16


def test_discover_in_name_order(tmp_path):
    (tmp_path / "002_b.sql").write_text("select 2;")
    (tmp_path / "001_a.sql").write_text("select 1;")
    (tmp_path / "notes.txt").write_text("ignored")

    migrations = discover_migrations(tmp_path)

    assert [m.name for m in migrations] == ["001_a.sql", "002_b.sql"]
    assert migrations[0].checksum == migration_checksum("select 1;")


def test_discover_missing_directory(tmp_path):
    assert discover_migrations(tmp_path / "missing") == []


def test_split_pending(tmp_path):
    first = MigrationFile("001_a.sql", tmp_path / "001_a.sql", "aaa")
    second = MigrationFile("002_b.sql", tmp_path / "002_b.sql", "bbb")
    third = MigrationFile("003_c.sql", tmp_path / "003_c.sql", "ccc")
    applied = {
        "001_a.sql": {"checksum": "aaa", "applied_at": None},
        "002_b.sql": {"checksum": "old", "applied_at": None},
    }

    pending, changed = split_pending([first, second, third], applied)

    assert pending == [third]
    assert changed == [second]


def test_shipped_migrations_are_ordered():
    names = [m.name for m in discover_migrations(MIGRATIONS_DIR)]

    assert names[:2] == ["001_members.sql", "002_subscribers.sql"]


def test_dry_run_touches_nothing(tmp_path):
    path = tmp_path / "001_a.sql"
    path.write_text("select 1;")
    conn = MagicMock()

    run_migration(conn, MigrationFile(path.name, path, "aaa"), dry_run=True)

    conn.cursor.assert_not_called()
    conn.commit.assert_not_called()


def test_run_records_migration(tmp_path):
    path = tmp_path / "001_a.sql"
    path.write_text("select 1;")
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value

    run_migration(conn, MigrationFile(path.name, path, "aaa"))

    assert cursor.execute.call_args_list[0].args == ("select 1;",)
    assert cursor.execute.call_args_list[1].args[1] == ("001_a.sql", "aaa")
    conn.commit.assert_called_once()


