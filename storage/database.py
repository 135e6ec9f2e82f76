"""asyncpg pool for the remote notification mirror and entity tables."""

import json
from pathlib import Path

import asyncpg
import structlog

from config.settings import settings

log = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_pool: asyncpg.Pool | None = None


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns (e.g. inventory profile slots) to Python values."""
    for typename in ("jsonb", "json"):
        await conn.set_type_codec(typename, encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


async def get_pool() -> asyncpg.Pool:
    """Get or lazily create the shared pool."""
    global _pool
    if _pool is None:
        _pool = await asyncpg.create_pool(settings.database_url, min_size=1, max_size=5, init=_init_connection)
        log.info("database_pool_created")
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        log.info("database_pool_closed")


async def run_migrations(pool: asyncpg.Pool | None = None, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending ``*.sql`` files in name order. Returns the filenames applied."""
    pool = pool or await get_pool()
    applied_now: list[str] = []

    async with pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS _migrations (
                filename VARCHAR(255) PRIMARY KEY,
                applied_at TIMESTAMPTZ DEFAULT NOW()
            )
            """
        )
        done = {row["filename"] for row in await conn.fetch("SELECT filename FROM _migrations")}

        for path in sorted(migrations_dir.glob("*.sql")):
            if path.name in done:
                continue
            async with conn.transaction():
                await conn.execute(path.read_text())
                await conn.execute("INSERT INTO _migrations (filename) VALUES ($1)", path.name)
            applied_now.append(path.name)
            log.info("migration_applied", filename=path.name)

    return applied_now
