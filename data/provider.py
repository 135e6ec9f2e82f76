"""Snapshot provider interface."""

from typing import Protocol

from data.entities import EntitySnapshot


class SnapshotProvider(Protocol):
    """Supplies the current entity collections on demand."""

    async def get_snapshot(self) -> EntitySnapshot: ...


class StaticSnapshotProvider:
    """Serves a snapshot held in memory; swap it with ``update``."""

    def __init__(self, snapshot: EntitySnapshot | None = None) -> None:
        self._snapshot = snapshot or EntitySnapshot()

    def update(self, snapshot: EntitySnapshot) -> None:
        self._snapshot = snapshot

    async def get_snapshot(self) -> EntitySnapshot:
        return self._snapshot
