"""Entity snapshot repository: reads orders, packages, inventory and warranties."""

import asyncio
import json
from typing import Any

import asyncpg
import structlog

from data.entities import (
    EntitySnapshot,
    InventoryItem,
    InventoryProfileSlot,
    Order,
    ProductPackage,
    Warranty,
)
from utils.retry import async_retry
from storage.repositories.notification_repo import RETRYABLE

log = structlog.get_logger(__name__)


class EntityRepository:
    """Postgres-backed snapshot provider."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_snapshot(self) -> EntitySnapshot:
        orders, packages, inventory, warranties = await asyncio.gather(
            self.get_orders(),
            self.get_packages(),
            self.get_inventory(),
            self.get_warranties(),
        )
        return EntitySnapshot(
            orders=orders, packages=packages, inventory=inventory, warranties=warranties,
        )

    @async_retry(exceptions=RETRYABLE)
    async def get_orders(self) -> list[Order]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, code, package_id, status, payment_status, created_at, expiry_date
                FROM orders
                """
            )
        return [
            Order(
                id=r["id"],
                code=r["code"],
                package_id=r["package_id"],
                status=r["status"],
                payment_status=r["payment_status"],
                created_at=r["created_at"],
                expiry_date=r["expiry_date"],
            )
            for r in rows
        ]

    @async_retry(exceptions=RETRYABLE)
    async def get_packages(self) -> list[ProductPackage]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch("SELECT id, name FROM packages")
        return [ProductPackage(id=r["id"], name=r["name"]) for r in rows]

    @async_retry(exceptions=RETRYABLE)
    async def get_inventory(self) -> list[InventoryItem]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, code, is_account_based, profiles FROM inventory"
            )
        return [
            InventoryItem(
                id=r["id"],
                code=r["code"],
                is_account_based=bool(r["is_account_based"]),
                profiles=_parse_profiles(r["id"], r["profiles"]),
            )
            for r in rows
        ]

    @async_retry(exceptions=RETRYABLE)
    async def get_warranties(self) -> list[Warranty]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, code, order_id, status, created_at FROM warranties"
            )
        return [
            Warranty(
                id=r["id"],
                code=r["code"],
                order_id=r["order_id"],
                status=r["status"],
                created_at=r["created_at"],
            )
            for r in rows
        ]


def _parse_profiles(inventory_id: str, raw: Any) -> tuple[InventoryProfileSlot, ...]:
    """Profiles live in a JSON column with camelCase keys."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("inventory_profiles_unparseable", inventory_id=inventory_id)
            return ()
    if not isinstance(raw, list):
        return ()
    return tuple(
        InventoryProfileSlot(
            id=str(p.get("id", "")),
            label=p.get("label") or "",
            needs_update=bool(p.get("needsUpdate", p.get("needs_update", False))),
        )
        for p in raw
        if isinstance(p, dict)
    )
