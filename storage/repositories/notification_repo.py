"""Remote notification mirror repository."""

from typing import Any, Protocol

import asyncpg

from notifications.types import Notification
from utils.retry import async_retry

# Transient failures worth another attempt
RETRYABLE = (OSError, asyncpg.PostgresConnectionError, asyncpg.InterfaceError)


class RemoteMirror(Protocol):
    async def get_existing_pairs(self, employee_id: str) -> set[tuple[str, str | None]]: ...

    async def insert(self, notifications: list[Notification], employee_id: str) -> int: ...

    async def load_all(self, employee_id: str) -> list[dict[str, Any]]: ...

    async def mark_read(self, notif_ids: list[str], employee_id: str) -> None: ...


class NotificationRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @async_retry(exceptions=RETRYABLE)
    async def get_existing_pairs(self, employee_id: str) -> set[tuple[str, str | None]]:
        """``(type, related_id)`` pairs already stored for ``employee_id``."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT type, related_id FROM notifications WHERE employee_id = $1",
                employee_id,
            )
        return {(r["type"], r["related_id"]) for r in rows}

    @async_retry(exceptions=RETRYABLE)
    async def insert(self, notifications: list[Notification], employee_id: str) -> int:
        """Insert rows, skipping ids the employee already has. Returns rows sent."""
        if not notifications:
            return 0
        records = [_row_values(n, employee_id) for n in notifications]
        async with self._pool.acquire() as conn:
            await conn.executemany(
                """
                INSERT INTO notifications
                    (id, type, title, message, priority, is_read, created_at,
                     related_id, action_url, employee_id)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                ON CONFLICT (employee_id, id) DO NOTHING
                """,
                records,
            )
        return len(records)

    @async_retry(exceptions=RETRYABLE)
    async def load_all(self, employee_id: str) -> list[dict[str, Any]]:
        """All rows for ``employee_id``, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, type, title, message, priority, is_read, created_at,
                       related_id, action_url, employee_id
                FROM notifications
                WHERE employee_id = $1
                ORDER BY created_at DESC
                """,
                employee_id,
            )
        return [dict(r) for r in rows]

    @async_retry(exceptions=RETRYABLE)
    async def mark_read(self, notif_ids: list[str], employee_id: str) -> None:
        if not notif_ids:
            return
        async with self._pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE notifications SET is_read = TRUE
                WHERE employee_id = $1 AND id = ANY($2::varchar[])
                """,
                employee_id,
                notif_ids,
            )


def _row_values(notif: Notification, employee_id: str) -> tuple:
    row = notif.to_row(employee_id)
    return (
        row["id"],
        row["type"],
        row["title"],
        row["message"],
        row["priority"],
        row["is_read"],
        notif.created_at,
        row["related_id"],
        row["action_url"],
        row["employee_id"],
    )
