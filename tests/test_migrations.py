"""Tests for SQL migrations and the migration runner."""

from pathlib import Path

from storage.database import MIGRATIONS_DIR, run_migrations


class TestMigrationFiles:
    def test_migrations_exist(self):
        assert MIGRATIONS_DIR.exists()
        names = [f.name for f in sorted(MIGRATIONS_DIR.glob("*.sql"))]
        assert names[0].startswith("001_")


class TestMigration001:
    def _read(self):
        return (MIGRATIONS_DIR / "001_notifications.sql").read_text()

    def test_creates_notifications(self):
        sql = self._read()
        assert "CREATE TABLE IF NOT EXISTS notifications" in sql

    def test_has_required_columns(self):
        sql = self._read()
        for column in ("id", "type", "title", "message", "priority", "is_read",
                       "created_at", "related_id", "action_url", "employee_id"):
            assert column in sql

    def test_scoped_primary_key(self):
        assert "PRIMARY KEY (employee_id, id)" in self._read()


class TestRunMigrations:
    async def test_applies_pending(self, fake_pool, fake_conn):
        fake_conn.fetch_results = [[]]
        applied = await run_migrations(fake_pool)
        assert applied == ["001_notifications.sql"]
        queries = [q for q, _ in fake_conn._execute_calls]
        assert "_migrations" in queries[0]
        assert any("INSERT INTO _migrations" in q for q in queries)

    async def test_skips_applied(self, fake_pool, fake_conn):
        fake_conn.fetch_results = [[{"filename": "001_notifications.sql"}]]
        assert await run_migrations(fake_pool) == []
        assert len(fake_conn._execute_calls) == 1

    async def test_custom_dir_in_name_order(self, fake_pool, fake_conn, tmp_path: Path):
        (tmp_path / "002_b.sql").write_text("SELECT 2;")
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        fake_conn.fetch_results = [[]]
        assert await run_migrations(fake_pool, tmp_path) == ["001_a.sql", "002_b.sql"]
