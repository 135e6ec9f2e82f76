"""Generation pipeline: snapshot -> rules -> reconcile -> remote sync."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from data.provider import SnapshotProvider
from notifications.alerters import AlertHooks
from notifications.reconciler import NotificationSet
from notifications.rules import evaluate_all
from notifications.types import Notification, NotificationSettings
from storage.local_store import ArchiveBackup, ReadStateStore, SettingsStore
from storage.repositories.notification_repo import RemoteMirror
from utils.time_utils import now_local

log = structlog.get_logger(__name__)


class NotificationEngine:
    """Owns the canonical notification set for one session.

    At most one generation cycle runs at a time. A request that arrives while
    a cycle is in flight is coalesced into a single re-run once it finishes.
    Remote calls run as detached tasks and never change the local result.
    """

    def __init__(
        self,
        provider: SnapshotProvider,
        read_state: ReadStateStore,
        remote: RemoteMirror | None = None,
        *,
        employee_id: str = "",
        settings_store: SettingsStore | None = None,
        archive_backup: ArchiveBackup | None = None,
        alerts: AlertHooks | None = None,
        clock: Callable[[], datetime] = now_local,
    ) -> None:
        self._provider = provider
        self._read_state = read_state
        self._remote = remote
        self._employee_id = employee_id
        self._settings_store = settings_store
        self._archive_backup = archive_backup
        self._alerts = alerts or AlertHooks()
        self._clock = clock

        self.notifications = NotificationSet()
        self._read_ids: set[str] = read_state.load()
        self.settings = settings_store.load() if settings_store else NotificationSettings()

        if archive_backup is not None:
            self.notifications.merge(archive_backup.load(), self._read_ids)

        self._running = False
        self._rerun_requested = False
        self._background: set[asyncio.Task[Any]] = set()

    # ── Generation ──

    @property
    def is_generating(self) -> bool:
        return self._running

    async def generate(self) -> bool:
        """Run a generation cycle. Returns False if coalesced into a running one."""
        if self._running:
            self._rerun_requested = True
            log.debug("generation_coalesced")
            return False

        self._running = True
        try:
            while True:
                self._rerun_requested = False
                await self._run_cycle()
                if not self._rerun_requested:
                    break
        finally:
            self._running = False
        return True

    async def _run_cycle(self) -> None:
        try:
            snapshot = await self._provider.get_snapshot()
        except Exception as e:
            log.error("snapshot_fetch_failed", error=str(e))
            return

        candidates = evaluate_all(snapshot, self.settings, self._clock())
        added = self.notifications.merge(candidates, self._read_ids)
        log.info(
            "notifications_generated",
            candidates=len(candidates),
            added=len(added),
            unread=self.notifications.unread_count,
        )

        if added:
            await self._alerts.announce(added)
        if candidates and self._remote is not None:
            self._spawn(self._sync_remote(candidates))

    async def _sync_remote(self, candidates: list[Notification]) -> None:
        """Insert candidates whose ``(type, related_id)`` the remote does not have yet."""
        try:
            existing = await self._remote.get_existing_pairs(self._employee_id)
        except Exception as e:
            log.warning("remote_pairs_fetch_failed", error=str(e))
            return

        missing = [n for n in candidates if n.dedup_pair not in existing]
        if not missing:
            return
        try:
            inserted = await self._remote.insert(missing, self._employee_id)
            log.info("remote_notifications_inserted", count=inserted)
        except Exception as e:
            log.error("remote_insert_failed", count=len(missing), error=str(e))

    async def load_from_remote(self) -> int:
        """Merge the employee's remote rows into the canonical set. Returns rows added."""
        if self._remote is None:
            return 0
        try:
            rows = await self._remote.load_all(self._employee_id)
        except Exception as e:
            log.warning("remote_load_failed", error=str(e))
            return 0

        loaded = []
        for row in rows:
            try:
                loaded.append(Notification.from_row(row))
            except (KeyError, TypeError, ValueError) as e:
                log.warning("remote_row_skipped", id=row.get("id"), error=str(e))
        added = self.notifications.merge(loaded, self._read_ids)
        log.info("remote_notifications_loaded", rows=len(rows), added=len(added))
        return len(added)

    # ── Acknowledgment ──

    @property
    def read_ids(self) -> frozenset[str]:
        return frozenset(self._read_ids)

    @property
    def unread_count(self) -> int:
        return self.notifications.unread_count

    def mark_as_read(self, notif_id: str) -> bool:
        """Acknowledge one notification; the read-state is on disk when this returns."""
        found = self.notifications.mark_read(notif_id)
        self._persist_read({notif_id})
        return found

    def mark_all_as_read(self) -> int:
        """Acknowledge every notification, archived included. Returns how many changed."""
        changed = self.notifications.mark_all_read()
        self._persist_read(self.notifications.ids)
        return len(changed)

    def _persist_read(self, ids: set[str]) -> None:
        if ids <= self._read_ids:
            return
        self._read_ids = self._read_state.add(ids)
        if self._remote is not None:
            self._spawn(self._mark_remote_read(sorted(ids)))

    async def _mark_remote_read(self, ids: list[str]) -> None:
        try:
            await self._remote.mark_read(ids, self._employee_id)
        except Exception as e:
            log.warning("remote_mark_read_failed", count=len(ids), error=str(e))

    # ── Lifecycle of individual notifications ──

    def archive(self, notif_id: str) -> bool:
        notif = self.notifications.archive(notif_id, self._clock())
        if notif is None:
            return False
        self._save_archive()
        return True

    def remove(self, notif_id: str) -> bool:
        removed = self.notifications.remove(notif_id)
        if removed:
            self._save_archive()
        return removed

    def _save_archive(self) -> None:
        if self._archive_backup is None:
            return
        try:
            self._archive_backup.save(self.notifications.archived)
        except OSError as e:
            log.warning("archive_backup_save_failed", error=str(e))

    # ── Settings ──

    def update_settings(self, **changes: Any) -> NotificationSettings:
        """Apply and persist a settings change. Raises ValidationError on bad values."""
        self.settings = self.settings.updated(**changes)
        if self._settings_store is not None:
            self._settings_store.save(self.settings)
        log.info("notification_settings_updated", **self.settings.model_dump())
        return self.settings

    # ── Background tasks ──

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for all detached remote work to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._background):
            task.cancel()
        await asyncio.gather(*list(self._background), return_exceptions=True)
        self._background.clear()
